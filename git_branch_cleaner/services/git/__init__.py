"""Git-related services for git-branch-cleaner."""

from .operations import GitOperations, git_error_text

__all__ = [
    "GitOperations",
    "git_error_text",
]
