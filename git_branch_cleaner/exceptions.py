"""Custom exceptions for git-branch-cleaner"""

from typing import Optional


class GitBranchCleanerError(Exception):
    """Base exception for all git-branch-cleaner errors."""
    pass


class ConfigError(GitBranchCleanerError):
    """Exception raised when a config file cannot be used."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Invalid config file {path}: {message}")


class GitOperationError(GitBranchCleanerError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.branch = branch
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class BranchNotFoundError(GitOperationError):
    """Exception raised when a branch is not found."""

    def __init__(self, branch: str):
        super().__init__("find_branch", branch, "Branch not found")


class BranchProtectedError(GitOperationError):
    """Exception raised when attempting to modify a protected branch."""

    def __init__(self, branch: str, message: str = "Branch is protected"):
        super().__init__("delete_branch", branch, message)


class CurrentBranchError(GitOperationError):
    """Exception raised when attempting to delete the checked out branch."""

    def __init__(self, branch: str):
        super().__init__(
            "delete_branch", branch, "Cannot delete the currently checked out branch"
        )
