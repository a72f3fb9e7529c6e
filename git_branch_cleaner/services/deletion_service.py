"""Branch deletion service for git-branch-cleaner."""

from typing import Iterable, List, Optional

from git_branch_cleaner.config import Policy
from git_branch_cleaner.exceptions import (
    BranchProtectedError,
    CurrentBranchError,
    GitOperationError,
)
from git_branch_cleaner.logging_config import get_logger
from git_branch_cleaner.models.branch import BranchRecord, DeletionResult
from git_branch_cleaner.services.git import GitOperations
from git_branch_cleaner.services.glob_matcher import first_match

logger = get_logger(__name__)


class DeletionService:
    """Deletes confirmed branches one at a time.

    Every branch gets its own DeletionResult; a failure is recorded against
    that branch and the rest of the batch still runs. Protected and excluded
    names, and the checked out branch, are refused before git is called.
    """

    def __init__(self, git_service: GitOperations, policy: Optional[Policy] = None):
        self.git_service = git_service
        self.policy = policy or Policy()

    def _error_text(self, error: GitOperationError) -> str:
        return error.message or str(error)

    def _current_branch(self) -> Optional[str]:
        try:
            return self.git_service.get_current_branch()
        except Exception as e:
            raise GitOperationError("get_current_branch", message=str(e)) from e

    def check_deletable(self, branch_name: str, *aliases: str) -> None:
        """Raise BranchProtectedError if any name of the branch is protected or excluded.

        Remote branches pass both ``origin/foo`` and ``foo``.
        """
        for name in (branch_name,) + aliases:
            if self.policy.is_protected(name):
                raise BranchProtectedError(branch_name)
            pattern = first_match(name, self.policy.exclude_patterns)
            if pattern is not None:
                raise BranchProtectedError(
                    branch_name, f"Branch is excluded by pattern '{pattern}'"
                )

    def _refuse(self, branch_name: str, error: GitOperationError) -> DeletionResult:
        logger.warning(f"Refusing to delete {branch_name}: {self._error_text(error)}")
        return DeletionResult(branch_name, False, error=self._error_text(error), refused=True)

    def delete_local_branch(
        self, branch_name: str, force: bool = False, current_branch: Optional[str] = None
    ) -> DeletionResult:
        """Delete a local branch, refusing protected names and the checked out one.

        Args:
            branch_name: Local branch to delete
            force: Delete even if not merged (``git branch -D``)
            current_branch: Checked out branch, looked up when not given
        """
        try:
            self.check_deletable(branch_name)
            if current_branch is None:
                current_branch = self._current_branch()
            if branch_name == current_branch:
                raise CurrentBranchError(branch_name)
        except (BranchProtectedError, CurrentBranchError) as e:
            return self._refuse(branch_name, e)
        except GitOperationError as e:
            # Without knowing the current branch nothing is safe to delete
            logger.warning(f"Could not verify current branch before deleting {branch_name}: {e}")
            return DeletionResult(branch_name, False, error=self._error_text(e), refused=True)

        try:
            message = self.git_service.delete_local_branch(branch_name, force=force)
        except GitOperationError as e:
            logger.warning(f"Failed to delete local branch {branch_name}: {e}")
            return DeletionResult(branch_name, False, error=self._error_text(e))
        return DeletionResult(branch_name, True, message=message)

    def delete_remote_branch(self, branch_name: str, remote: Optional[str] = None) -> DeletionResult:
        """Delete a branch on a remote, refusing protected names."""
        remote = remote or self.git_service.remote_name
        prefix = f"{remote}/"
        short_name = branch_name[len(prefix):] if branch_name.startswith(prefix) else branch_name
        try:
            self.check_deletable(short_name, f"{prefix}{short_name}")
        except BranchProtectedError as e:
            return self._refuse(branch_name, e)

        try:
            message = self.git_service.delete_remote_branch(short_name, remote)
        except GitOperationError as e:
            logger.warning(f"Failed to delete remote branch {branch_name}: {e}")
            return DeletionResult(branch_name, False, error=self._error_text(e))
        return DeletionResult(branch_name, True, message=message)

    def delete_branches(self, branch_names: Iterable[str], force: bool = False) -> List[DeletionResult]:
        """Delete local branches independently of each other."""
        branch_names = list(branch_names)
        if not branch_names:
            return []

        try:
            current_branch = self._current_branch()
        except GitOperationError as e:
            return [
                DeletionResult(name, False, error=self._error_text(e), refused=True)
                for name in branch_names
            ]

        return [
            self.delete_local_branch(name, force=force, current_branch=current_branch)
            for name in branch_names
        ]

    def delete_records(
        self, branches: Iterable[BranchRecord], force: bool = False
    ) -> List[DeletionResult]:
        """Delete local and remote branches, each according to its kind."""
        branches = list(branches)
        local_names = [b.name for b in branches if not b.is_remote]
        local_results = iter(self.delete_branches(local_names, force=force))

        results = []
        for branch in branches:
            if branch.is_remote:
                results.append(self.delete_remote_branch(branch.short_name, branch.remote_name))
            else:
                results.append(next(local_results))
        return results
