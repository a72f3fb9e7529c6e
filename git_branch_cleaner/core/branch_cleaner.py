"""Core functionality for git-branch-cleaner"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional

import git
from rich.console import Console

from git_branch_cleaner.config import Policy, RunOptions
from git_branch_cleaner.exceptions import GitBranchCleanerError, GitOperationError
from git_branch_cleaner.formatters import format_deletion_item
from git_branch_cleaner.logging_config import get_logger
from git_branch_cleaner.models.branch import BranchRecord, ClassificationResult, DeletionResult
from git_branch_cleaner.services.branch_classifier import BranchClassifier
from git_branch_cleaner.services.deletion_service import DeletionService
from git_branch_cleaner.services.display_service import DisplayService
from git_branch_cleaner.services.git import GitOperations

console = Console()
logger = get_logger(__name__)


@dataclass
class CleanupReport:
    """What a cleanup run found and did."""

    main_branch: str
    results: List[ClassificationResult] = field(default_factory=list)
    deletions: List[DeletionResult] = field(default_factory=list)
    cancelled: bool = False
    dry_run: bool = False

    @property
    def eligible(self) -> List[ClassificationResult]:
        return [r for r in self.results if r.is_eligible]

    @property
    def deleted(self) -> List[str]:
        return [d.branch for d in self.deletions if d.success]

    @property
    def failed(self) -> List[DeletionResult]:
        return [d for d in self.deletions if not d.success]


class BranchCleaner:
    """Lists, classifies and (after confirmation) deletes branches."""

    def __init__(
        self,
        options: RunOptions,
        policy: Policy,
        git_service: Optional[GitOperations] = None,
        display_service: Optional[DisplayService] = None,
    ):
        """Initialize BranchCleaner.

        Args:
            options: Run options (repo path, remote, dry run, ...)
            policy: Effective deletion policy
            git_service: Git collaborator; built from options.repo_path when omitted
            display_service: Output and confirmation; built from options when omitted
        """
        self.options = options
        self.policy = policy

        if git_service is None:
            try:
                git.Repo(options.repo_path)
            except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
                raise GitBranchCleanerError(f"Not a git repository: {options.repo_path}") from e
            git_service = GitOperations(options.repo_path, options.remote)

        self.git_service = git_service
        self.display_service = display_service or DisplayService(
            verbose=options.verbose, debug=options.debug
        )
        self.classifier = BranchClassifier(policy)
        self.deletion_service = DeletionService(self.git_service, policy)

    def check_merged(self, branch: BranchRecord, main_branch: str) -> Optional[bool]:
        """Merge status of a branch, or None if it could not be determined."""
        try:
            return self.git_service.is_merged_into_main(branch.name, main_branch)
        except GitOperationError as e:
            logger.warning(f"Could not check merge status of {branch.name}: {e.message or e}")
            return None

    def collect_branches(self, main_branch: str) -> List[BranchRecord]:
        """List branches and attach their merge status."""
        branches = self.git_service.list_branches(
            include_local=True, include_remote=self.options.include_remote
        )
        return [
            replace(branch, merged_into_main=self.check_merged(branch, main_branch))
            for branch in branches
        ]

    def classify(self, now: Optional[datetime] = None) -> CleanupReport:
        """Classify every branch without deleting anything."""
        main_branch = self.git_service.detect_main_branch()
        logger.info(f"Main branch: {main_branch}")
        branches = self.collect_branches(main_branch)
        results = self.classifier.classify_all(branches, now or datetime.now(timezone.utc))
        return CleanupReport(main_branch=main_branch, results=results)

    def run(self, now: Optional[datetime] = None) -> CleanupReport:
        """Run a full cleanup session."""
        self.display_service.display_header(self.options, self.policy)

        report = self.classify(now)
        current_branch = self.git_service.get_current_branch()
        self.display_service.display_branch_table(
            report.results, current_branch=current_branch, main_branch=report.main_branch
        )

        eligible = report.eligible
        if not eligible:
            console.print("\n[green]No branches to clean up![/green]")
            return report

        if self.options.dry_run:
            report.dry_run = True
            self.display_service.display_dry_run(eligible)
            return report

        if not self.options.assume_yes:
            message = (
                f"Found {len(eligible)} branches that are merged into {report.main_branch} "
                f"or have had no commits for more than {self.policy.stale_days} days."
            )
            confirmed = self.display_service.confirm_deletion(
                message, [format_deletion_item(r) for r in eligible]
            )
            if not confirmed:
                report.cancelled = True
                console.print("[yellow]Cleanup cancelled, nothing was deleted[/yellow]")
                return report

        report.deletions = self.deletion_service.delete_records(
            [r.branch for r in eligible], force=self.options.force
        )
        self.display_service.display_deletion_results(report.deletions)
        return report
