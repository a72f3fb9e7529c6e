"""Git operations service"""

import git
from datetime import datetime, timezone
from typing import List, Optional

from git_branch_cleaner.constants import (
    DEFAULT_REMOTE,
    FALLBACK_MAIN_BRANCH,
    MAIN_BRANCH_CANDIDATES,
)
from git_branch_cleaner.exceptions import BranchNotFoundError, GitOperationError
from git_branch_cleaner.logging_config import get_logger
from git_branch_cleaner.models.branch import BranchKind, BranchRecord

logger = get_logger(__name__)

LOCAL_PREFIX = "refs/heads/"
REMOTE_PREFIX = "refs/remotes/"

# Ref names cannot contain spaces, so the ref goes last and the line splits cleanly
REF_FORMAT = "%(committerdate:unix) %(objectname:short) %(refname)"


def git_error_text(error: git.exc.GitCommandError) -> str:
    """Extract git's own error output from a GitCommandError."""
    text = (getattr(error, "stderr", "") or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:"):].strip()
        if len(text) >= 2 and text[0] == text[-1] == "'":
            text = text[1:-1]
    text = text.strip()
    if text:
        return text
    status = getattr(error, "status", "unknown")
    return f"git exited with status {status}"


class GitOperations:
    """Service for Git operations."""

    def __init__(self, repo_path: str, remote_name: str = DEFAULT_REMOTE):
        """Initialize the service.

        Args:
            repo_path: Path to the git repository (string path, not repo object)
            remote_name: Remote used for fetching, HEAD detection and remote deletes
        """
        self.repo_path = repo_path
        self.remote_name = remote_name
        logger.info("Git operations initialized")

    def _get_repo(self) -> git.Repo:
        """Open the repository.

        GitPython repos are lightweight - they don't clone, just open the existing repo.
        """
        return git.Repo(self.repo_path)

    def _parse_refs(self, output: str, prefix: str, kind: BranchKind) -> List[BranchRecord]:
        records = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                timestamp, commit_hash, refname = line.split(" ", 2)
            except ValueError:
                logger.debug(f"Skipping unparseable ref line: {line!r}")
                continue
            if refname.endswith("/HEAD") or not refname.startswith(prefix):
                continue
            records.append(
                BranchRecord(
                    name=refname[len(prefix):],
                    kind=kind,
                    last_commit_date=datetime.fromtimestamp(int(timestamp), tz=timezone.utc),
                    commit_hash=commit_hash,
                )
            )
        return records

    def fetch_prune(self) -> bool:
        """Fetch and prune remote refs. Failures are logged and ignored."""
        try:
            repo = self._get_repo()
            repo.git.fetch("--prune", self.remote_name)
            return True
        except git.exc.GitCommandError as e:
            logger.debug(f"Fetch from {self.remote_name} failed: {git_error_text(e)}")
            return False

    def list_branches(
        self, include_local: bool = True, include_remote: bool = True, fetch: bool = True
    ) -> List[BranchRecord]:
        """List branches, most recent commit first within each kind.

        Raises:
            GitOperationError: if the refs cannot be listed
        """
        branches: List[BranchRecord] = []
        try:
            repo = self._get_repo()
            if include_local:
                output = repo.git.for_each_ref(
                    "--sort=-committerdate", f"--format={REF_FORMAT}", LOCAL_PREFIX
                )
                branches.extend(self._parse_refs(output, LOCAL_PREFIX, BranchKind.LOCAL))

            if include_remote:
                if fetch:
                    self.fetch_prune()
                output = repo.git.for_each_ref(
                    "--sort=-committerdate", f"--format={REF_FORMAT}", REMOTE_PREFIX
                )
                branches.extend(self._parse_refs(output, REMOTE_PREFIX, BranchKind.REMOTE))
        except git.exc.GitCommandError as e:
            raise GitOperationError("list_branches", message=git_error_text(e)) from e

        logger.debug(f"Listed {len(branches)} branches")
        return branches

    def ref_exists(self, ref: str) -> bool:
        try:
            self._get_repo().git.rev_parse("--verify", "--quiet", ref)
            return True
        except git.exc.GitCommandError:
            return False

    def detect_main_branch(self) -> str:
        """Detect the main branch: main, master, the remote's HEAD, else main."""
        for candidate in MAIN_BRANCH_CANDIDATES:
            if self.ref_exists(candidate):
                logger.debug(f"Main branch detected: {candidate}")
                return candidate

        remote_head = f"refs/remotes/{self.remote_name}/HEAD"
        try:
            target = self._get_repo().git.symbolic_ref(remote_head).strip()
            prefix = f"refs/remotes/{self.remote_name}/"
            if target.startswith(prefix):
                main_branch = target[len(prefix):]
                logger.debug(f"Main branch detected from {remote_head}: {main_branch}")
                return main_branch
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not read {remote_head}: {git_error_text(e)}")

        logger.debug(f"Falling back to main branch {FALLBACK_MAIN_BRANCH}")
        return FALLBACK_MAIN_BRANCH

    def is_merged_into_main(self, ref: str, main_branch: str) -> bool:
        """Check whether ref's tip is an ancestor of main_branch.

        Raises:
            GitOperationError: if either ref cannot be resolved
        """
        if ref == main_branch:
            return False
        try:
            repo = self._get_repo()
            return repo.is_ancestor(ref, main_branch)
        except git.exc.GitCommandError as e:
            raise GitOperationError("check_merged", ref, git_error_text(e)) from e

    def get_current_branch(self) -> Optional[str]:
        """Name of the checked out branch, or None for a detached HEAD."""
        repo = self._get_repo()
        try:
            return repo.active_branch.name
        except TypeError:
            # Detached HEAD
            return None

    def get_branch_info(self, branch_name: str, now: Optional[datetime] = None) -> dict:
        """Details of the tip commit of a branch.

        Raises:
            BranchNotFoundError: if the branch does not resolve to a commit
        """
        try:
            commit = self._get_repo().commit(branch_name)
        except (git.exc.BadName, git.exc.GitCommandError, ValueError) as e:
            logger.debug(f"Could not resolve {branch_name}: {e}")
            raise BranchNotFoundError(branch_name) from e

        committed = datetime.fromtimestamp(commit.committed_date, tz=timezone.utc)
        if now is None:
            now = datetime.now(timezone.utc)
        message = commit.message if isinstance(commit.message, str) else commit.message.decode(
            "utf-8", errors="ignore"
        )
        return {
            "branch": branch_name,
            "last_commit": {
                "hash": commit.hexsha,
                "author": commit.author.name,
                "email": commit.author.email,
                "date": committed.isoformat(),
                "message": message.strip().split("\n")[0],
            },
            "days_since_last_commit": (now - committed).days,
        }

    def delete_local_branch(self, branch_name: str, force: bool = False) -> str:
        """Delete a local branch with ``git branch -d`` (or ``-D`` when forced).

        Raises:
            GitOperationError: with git's error text, e.g. for unmerged branches
        """
        try:
            self._get_repo().delete_head(branch_name, force=force)
        except git.exc.GitCommandError as e:
            raise GitOperationError("delete_local_branch", branch_name, git_error_text(e)) from e
        logger.info(f"Deleted local branch {branch_name}")
        return f"Local branch '{branch_name}' deleted successfully"

    def delete_remote_branch(self, branch_name: str, remote: Optional[str] = None) -> str:
        """Delete a branch on a remote with ``git push <remote> --delete``.

        A leading ``<remote>/`` in branch_name is stripped.

        Raises:
            GitOperationError: with git's error text, e.g. for protected remote branches
        """
        remote = remote or self.remote_name
        prefix = f"{remote}/"
        clean_name = branch_name[len(prefix):] if branch_name.startswith(prefix) else branch_name
        try:
            self._get_repo().git.push(remote, "--delete", clean_name)
        except git.exc.GitCommandError as e:
            raise GitOperationError(
                "delete_remote_branch", f"{remote}/{clean_name}", git_error_text(e)
            ) from e
        logger.info(f"Deleted remote branch {remote}/{clean_name}")
        return f"Remote branch '{remote}/{clean_name}' deleted successfully"
