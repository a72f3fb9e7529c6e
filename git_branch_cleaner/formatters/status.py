"""Classification and deletion formatting utilities."""

from typing import Optional

from git_branch_cleaner.constants import (
    CLI_COLORS,
    SYMBOL_CURRENT_BRANCH,
    SYMBOL_MERGED,
    SYMBOL_NOT_MERGED,
    SYMBOL_UNKNOWN,
)
from git_branch_cleaner.models.branch import Classification, ClassificationResult


def format_merged(merged: Optional[bool]) -> str:
    """Symbol for a merge status (True/False/unknown)."""
    if merged is None:
        return SYMBOL_UNKNOWN
    return SYMBOL_MERGED if merged else SYMBOL_NOT_MERGED


def format_branch_name(name: str, is_current: bool = False) -> str:
    """Branch name with the current branch marker."""
    return name + (SYMBOL_CURRENT_BRANCH if is_current else "")


def format_classification(result: ClassificationResult) -> str:
    """
    Format a classification as display text.

    Eligible branches show why ("eligible (merged)"), excluded ones the
    pattern that excluded them.
    """
    if result.classification == Classification.ELIGIBLE and result.reason:
        return f"eligible ({result.reason.value})"
    if result.classification == Classification.EXCLUDED and result.matched_pattern:
        return f"excluded ({result.matched_pattern})"
    return result.classification.value


def format_deletion_reason(result: ClassificationResult) -> str:
    """Deletion reason ("merged" or "stale") for an eligible branch."""
    return result.reason.value if result.reason else "unknown"


def get_row_style(result: ClassificationResult) -> Optional[str]:
    """Rich style name for a table row."""
    return CLI_COLORS.get(result.classification.value)


def format_deletion_item(result: ClassificationResult) -> str:
    """
    Format one branch for the deletion confirmation list.

    Example:
        "origin/bugfix/temp (stale, remote)"
    """
    return f"{result.branch.name} ({format_deletion_reason(result)}, {result.branch.kind.value})"
