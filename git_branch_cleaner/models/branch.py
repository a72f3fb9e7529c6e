"""Branch model and related enums"""
from enum import Enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class BranchKind(Enum):
    """Where a branch ref lives."""
    LOCAL = "local"
    REMOTE = "remote"


class Classification(Enum):
    """Outcome of classifying a branch against the policy."""
    PROTECTED = "protected"
    EXCLUDED = "excluded"
    ELIGIBLE = "eligible"
    KEEP = "keep"


class EligibilityReason(Enum):
    """Why an eligible branch may be deleted."""
    MERGED = "merged"
    STALE = "stale"


@dataclass(frozen=True)
class BranchRecord:
    """Snapshot of one branch ref as listed from the repository."""
    name: str
    kind: BranchKind
    last_commit_date: datetime
    commit_hash: str
    merged_into_main: Optional[bool] = None  # None = not checked or check failed

    @property
    def is_remote(self) -> bool:
        return self.kind == BranchKind.REMOTE

    @property
    def short_name(self) -> str:
        """Name without the remote prefix (``origin/foo`` -> ``foo``)."""
        if self.is_remote and "/" in self.name:
            return self.name.split("/", 1)[1]
        return self.name

    @property
    def remote_name(self) -> Optional[str]:
        if self.is_remote and "/" in self.name:
            return self.name.split("/", 1)[0]
        return None


@dataclass(frozen=True)
class ClassificationResult:
    """Classification of a single branch."""
    branch: BranchRecord
    classification: Classification
    age_days: int
    reason: Optional[EligibilityReason] = None
    matched_pattern: Optional[str] = None  # Set for EXCLUDED

    @property
    def is_eligible(self) -> bool:
        return self.classification == Classification.ELIGIBLE


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of deleting one branch."""
    branch: str
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    refused: bool = False  # True when a guard rail stopped the deletion before git ran

    def to_dict(self) -> dict:
        payload = {"branch": self.branch, "success": self.success}
        if self.message:
            payload["message"] = self.message
        if self.error:
            payload["error"] = self.error
        if self.refused:
            payload["refused"] = True
        return payload
