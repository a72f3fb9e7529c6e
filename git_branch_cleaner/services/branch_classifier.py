"""Service for deciding which branches may be deleted"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from git_branch_cleaner.config import Policy
from git_branch_cleaner.logging_config import get_logger
from git_branch_cleaner.models.branch import (
    BranchRecord,
    Classification,
    ClassificationResult,
    EligibilityReason,
)
from git_branch_cleaner.services.glob_matcher import GlobPattern, compile_pattern

logger = get_logger(__name__)


def age_in_days(last_commit_date: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed between the last commit and now, rounded down."""
    if now is None:
        now = datetime.now(timezone.utc)
    if last_commit_date.tzinfo is None:
        last_commit_date = last_commit_date.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - last_commit_date).days


class BranchClassifier:
    """Classifies branches against a policy.

    Rules are applied in a fixed order and the first one that applies wins:

    1. protected name -> PROTECTED
    2. matches an exclude pattern -> EXCLUDED
    3. merged into main -> ELIGIBLE (merged)
    4. older than ``stale_days`` whole days -> ELIGIBLE (stale)
    5. otherwise -> KEEP

    Remote branches are checked under both their full name (``origin/foo``)
    and their short name (``foo``) for rules 1 and 2.
    """

    def __init__(self, policy: Policy):
        self.policy = policy
        self.protected_names = policy.protected_names
        self.patterns: List[GlobPattern] = [compile_pattern(p) for p in policy.exclude_patterns]

    def _candidate_names(self, branch: BranchRecord) -> List[str]:
        names = [branch.name]
        if branch.short_name != branch.name:
            names.append(branch.short_name)
        return names

    def is_protected(self, branch: BranchRecord) -> bool:
        return any(name in self.protected_names for name in self._candidate_names(branch))

    def matching_pattern(self, branch: BranchRecord) -> Optional[str]:
        """Return the first exclude pattern the branch matches, if any."""
        for name in self._candidate_names(branch):
            for pattern in self.patterns:
                if pattern.matches(name):
                    return pattern.pattern
        return None

    def classify(
        self,
        branch: BranchRecord,
        merged_into_main: Optional[bool] = None,
        now: Optional[datetime] = None,
    ) -> ClassificationResult:
        """Classify a single branch.

        Args:
            branch: Branch snapshot
            merged_into_main: Merge status; defaults to ``branch.merged_into_main``
            now: Reference time for staleness (default: current UTC time)
        """
        if merged_into_main is None:
            merged_into_main = branch.merged_into_main
        age = age_in_days(branch.last_commit_date, now)

        if self.is_protected(branch):
            logger.debug(f"Branch {branch.name} is protected")
            return ClassificationResult(branch, Classification.PROTECTED, age)

        pattern = self.matching_pattern(branch)
        if pattern is not None:
            logger.debug(f"Branch {branch.name} excluded by pattern {pattern}")
            return ClassificationResult(
                branch, Classification.EXCLUDED, age, matched_pattern=pattern
            )

        if merged_into_main is True:
            logger.debug(f"Branch {branch.name} is merged into main")
            return ClassificationResult(
                branch, Classification.ELIGIBLE, age, reason=EligibilityReason.MERGED
            )

        # Strictly greater: a branch exactly stale_days old is kept
        if age > self.policy.stale_days:
            logger.debug(f"Branch {branch.name} is stale (age: {age} days)")
            return ClassificationResult(
                branch, Classification.ELIGIBLE, age, reason=EligibilityReason.STALE
            )

        logger.debug(f"Branch {branch.name} kept (age: {age} days)")
        return ClassificationResult(branch, Classification.KEEP, age)

    def classify_all(
        self, branches: Iterable[BranchRecord], now: Optional[datetime] = None
    ) -> List[ClassificationResult]:
        """Classify branches using their own merge status, against one reference time."""
        if now is None:
            now = datetime.now(timezone.utc)
        return [self.classify(branch, now=now) for branch in branches]


def classify(
    branch: BranchRecord,
    policy: Policy,
    merged_into_main: Optional[bool] = None,
    now: Optional[datetime] = None,
) -> ClassificationResult:
    """Classify one branch against a policy."""
    return BranchClassifier(policy).classify(branch, merged_into_main, now)
