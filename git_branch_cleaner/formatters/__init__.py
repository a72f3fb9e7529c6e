"""Formatting utilities for git-branch-cleaner.

- date: Date and age formatting
- status: Classification, merge status and deletion formatting
"""

from .date import format_date, format_age
from .status import (
    format_branch_name,
    format_classification,
    format_deletion_item,
    format_deletion_reason,
    format_merged,
    get_row_style,
)

__all__ = [
    # Date
    "format_date",
    "format_age",
    # Status
    "format_branch_name",
    "format_classification",
    "format_deletion_item",
    "format_deletion_reason",
    "format_merged",
    "get_row_style",
]
