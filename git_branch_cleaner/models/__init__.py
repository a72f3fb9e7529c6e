"""Data models for git-branch-cleaner."""

from .branch import (
    BranchKind,
    BranchRecord,
    Classification,
    ClassificationResult,
    DeletionResult,
    EligibilityReason,
)

__all__ = [
    "BranchKind",
    "BranchRecord",
    "Classification",
    "ClassificationResult",
    "DeletionResult",
    "EligibilityReason",
]
