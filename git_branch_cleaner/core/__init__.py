"""Core orchestration for git-branch-cleaner."""

from .branch_cleaner import BranchCleaner, CleanupReport

__all__ = ["BranchCleaner", "CleanupReport"]
