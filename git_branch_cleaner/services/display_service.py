"""Display and confirmation service for branch information"""
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from git_branch_cleaner.config import Policy, RunOptions
from git_branch_cleaner.constants import COLUMNS, LEGEND_TEXT
from git_branch_cleaner.formatters import (
    format_age,
    format_branch_name,
    format_classification,
    format_date,
    format_merged,
    get_row_style,
)
from git_branch_cleaner.logging_config import get_logger
from git_branch_cleaner.models.branch import Classification, ClassificationResult, DeletionResult

console = Console()
logger = get_logger(__name__)

CONFIRM_ANSWERS = ("y", "yes")


class DisplayService:
    def __init__(self, verbose: bool = False, debug: bool = False):
        self.verbose = verbose
        self.debug_mode = debug

    def display_header(self, options: RunOptions, policy: Policy) -> None:
        """Show the repository and the effective policy."""
        console.print("[bold]Git Branch Cleaner[/bold]")
        console.print(Rule())
        console.print(f"Repository: {escape(options.repo_path)}")
        console.print(f"Stale threshold: {policy.stale_days} days")
        if policy.source:
            console.print(f"Config: {escape(policy.source)}")
        if policy.exclude_patterns:
            console.print(f"Exclude patterns: {escape(', '.join(policy.exclude_patterns))}")
        console.print(Rule())

    def display_branch_table(
        self,
        results: Sequence[ClassificationResult],
        current_branch: Optional[str] = None,
        main_branch: Optional[str] = None,
    ) -> None:
        """Display a table of classified branches."""
        title = f"Branches (main: {main_branch})" if main_branch else "Branches"
        table = Table(title=title)

        for col in COLUMNS:
            table.add_column(col.label)

        for result in results:
            branch = result.branch
            is_current = not branch.is_remote and branch.name == current_branch
            # Match COLUMNS order: Branch, Type, Last Commit, Age, Hash, Merged, Status
            table.add_row(
                escape(format_branch_name(branch.name, is_current)),
                branch.kind.value,
                format_date(branch.last_commit_date),
                format_age(result.age_days),
                branch.commit_hash,
                format_merged(branch.merged_into_main),
                format_classification(result),
                style=get_row_style(result),
            )

        console.print(table)

        if self.verbose:
            console.print(LEGEND_TEXT)
            self.display_summary(results)

    def display_summary(self, results: Sequence[ClassificationResult]) -> None:
        counts = {c: 0 for c in Classification}
        for result in results:
            counts[result.classification] += 1

        console.print("\nSummary:")
        console.print(f"Total branches: {len(results)}")
        console.print(f"Eligible for deletion: {counts[Classification.ELIGIBLE]}")
        console.print(f"Protected: {counts[Classification.PROTECTED]}")
        console.print(f"Excluded by pattern: {counts[Classification.EXCLUDED]}")
        console.print(f"Kept: {counts[Classification.KEEP]}")

    def confirm_deletion(self, message: str, branches: List[str]) -> bool:
        """Ask the operator to confirm a deletion. Blocks until answered.

        Only "y" or "yes" (any case) confirms; anything else, including end of
        input, cancels.
        """
        console.print()
        console.print(Rule("[bold yellow]CONFIRMATION REQUIRED[/bold yellow]"))
        console.print(escape(message))
        console.print("\nBranches to be deleted:")
        for name in branches:
            console.print(f"  - {escape(name)}")
        console.print()

        try:
            answer = console.input("Do you want to proceed? (yes/no): ")
        except EOFError:
            answer = ""

        confirmed = answer.strip().lower() in CONFIRM_ANSWERS
        if confirmed:
            console.print("[green]Confirmed[/green]")
        else:
            console.print("[yellow]Cancelled[/yellow]")
        logger.debug(f"Deletion confirmation answer: {answer!r} -> {confirmed}")
        return confirmed

    def display_dry_run(self, results: Sequence[ClassificationResult]) -> None:
        for result in results:
            reason = result.reason.value if result.reason else "eligible"
            console.print(
                f"[yellow]Would delete {result.branch.kind.value} branch "
                f"{escape(result.branch.name)} ({reason})[/yellow]"
            )

    def display_deletion_results(self, results: Sequence[DeletionResult]) -> None:
        """Show per-branch outcomes, then the failures with git's own error text."""
        deleted = [r for r in results if r.success]
        failed = [r for r in results if not r.success]

        for result in deleted:
            console.print(f"[green]✓ {escape(result.message or f'Deleted {result.branch}')}[/green]")

        console.print(f"\n[green]Successfully deleted {len(deleted)} branches[/green]")

        if failed:
            console.print(f"\n[red]Failed to delete {len(failed)} branches:[/red]")
            for result in failed:
                console.print(f"[red]  • {escape(result.branch)}: {escape(result.error or 'Unknown error')}[/red]")
