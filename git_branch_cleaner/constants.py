"""Shared constants for git-branch-cleaner."""

from dataclasses import dataclass
from typing import List


# Branch names that are never deleted, whatever the configuration says
BUILTIN_PROTECTED_BRANCHES = (
    "main",
    "master",
    "dev",
    "develop",
    "development",
    "stage",
    "staging",
    "prod",
    "production",
    "preview",
    "release",
)

DEFAULT_STALE_DAYS = 30
DEFAULT_REMOTE = "origin"

# Probed in order in the working directory when no --config is given
CONFIG_FILE_NAMES = (
    ".branchcleanerrc",
    ".branchcleanerrc.json",
    ".branchcleaner.json",
    "branchcleaner.config.json",
)

# Main branch candidates, tried before the remote's symbolic HEAD
MAIN_BRANCH_CANDIDATES = ("main", "master")
FALLBACK_MAIN_BRANCH = "main"


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("kind", "Type", 6),
    ColumnDefinition("last_commit", "Last Commit", 12),
    ColumnDefinition("age", "Age", 6),
    ColumnDefinition("hash", "Hash", 9),
    ColumnDefinition("merged", "Merged", 7),
    ColumnDefinition("status", "Status", 16),
]


# Symbol constants
SYMBOL_MERGED = "✓"
SYMBOL_NOT_MERGED = "✗"
SYMBOL_UNKNOWN = "?"
SYMBOL_CURRENT_BRANCH = " *"


# CLI colors (Rich color names), keyed by Classification value
CLI_COLORS = {
    "protected": "cyan",
    "excluded": "blue",
    "eligible": "red",  # Will be deleted
    "keep": None,  # Default color
}


LEGEND_TEXT = """
Legend:
✓ = Merged into main      ✗ = Not merged
? = Merge status unknown  * = Current branch

Colors:
Red = Will be deleted
Cyan = Protected branch
Blue = Excluded by pattern
"""
