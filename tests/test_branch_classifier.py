"""Tests for BranchClassifier"""
from datetime import datetime, timedelta, timezone

import pytest

from git_branch_cleaner.config import Policy
from git_branch_cleaner.constants import BUILTIN_PROTECTED_BRANCHES
from git_branch_cleaner.models.branch import BranchKind, Classification, EligibilityReason
from git_branch_cleaner.services.branch_classifier import (
    BranchClassifier,
    age_in_days,
    classify,
)


class TestProtectedBranches:
    """Protected names short-circuit every other rule."""

    @pytest.mark.parametrize("name", BUILTIN_PROTECTED_BRANCHES)
    @pytest.mark.parametrize("merged", [True, False, None])
    def test_builtin_names_always_protected(self, name, merged, make_branch, now):
        branch = make_branch(name, age_days=400)
        result = classify(branch, Policy(), merged, now)
        assert result.classification == Classification.PROTECTED

    def test_user_protected_name(self, make_branch, now):
        policy = Policy(protected_branches=("keep-me",))
        result = classify(make_branch("keep-me", age_days=100), policy, True, now)
        assert result.classification == Classification.PROTECTED

    def test_protection_is_exact_match(self, make_branch, now):
        result = classify(make_branch("main-old", age_days=100), Policy(), False, now)
        assert result.classification == Classification.ELIGIBLE

    def test_remote_branch_checked_by_short_name(self, make_branch, now):
        branch = make_branch("origin/main", age_days=400, kind=BranchKind.REMOTE)
        result = classify(branch, Policy(), True, now)
        assert result.classification == Classification.PROTECTED


class TestExcludedBranches:
    """Exclude patterns win over merge status and age."""

    def test_exclusion_wins_over_merged(self, make_branch, now):
        policy = Policy(exclude_patterns=("release-*",))
        result = classify(make_branch("release-candidate"), policy, True, now)
        assert result.classification == Classification.EXCLUDED
        assert result.matched_pattern == "release-*"
        assert result.is_eligible is False

    def test_exclusion_wins_over_stale(self, make_branch, now):
        policy = Policy(exclude_patterns=("wip/*",))
        result = classify(make_branch("wip/experiment", age_days=500), policy, False, now)
        assert result.classification == Classification.EXCLUDED

    def test_protection_checked_before_exclusion(self, make_branch, now):
        policy = Policy(exclude_patterns=("ma*",))
        result = classify(make_branch("main"), policy, False, now)
        assert result.classification == Classification.PROTECTED

    def test_remote_branch_excluded_by_short_name(self, make_branch, now):
        policy = Policy(exclude_patterns=("preview-*",))
        branch = make_branch("origin/preview-42", kind=BranchKind.REMOTE)
        result = classify(branch, policy, True, now)
        assert result.classification == Classification.EXCLUDED


class TestEligibleBranches:
    """Merged or stale branches are eligible."""

    def test_merged_branch(self, make_branch, now):
        result = classify(make_branch("feature/done", age_days=1), Policy(), True, now)
        assert result.classification == Classification.ELIGIBLE
        assert result.reason == EligibilityReason.MERGED

    def test_merged_reported_before_stale(self, make_branch, now):
        result = classify(make_branch("feature/done", age_days=300), Policy(), True, now)
        assert result.reason == EligibilityReason.MERGED

    def test_stale_branch(self, make_branch, now):
        result = classify(make_branch("feature/old", age_days=31), Policy(), False, now)
        assert result.classification == Classification.ELIGIBLE
        assert result.reason == EligibilityReason.STALE
        assert result.age_days == 31

    def test_unknown_merge_status_uses_staleness(self, make_branch, now):
        result = classify(make_branch("feature/old", age_days=45), Policy(), None, now)
        assert result.reason == EligibilityReason.STALE


class TestStaleBoundary:
    """A branch exactly stale_days old is not stale."""

    def test_exactly_threshold_is_kept(self, make_branch, now):
        result = classify(make_branch("feature/x", age_days=30), Policy(), False, now)
        assert result.classification == Classification.KEEP

    def test_one_day_over_threshold_is_stale(self, make_branch, now):
        result = classify(make_branch("feature/x", age_days=31), Policy(), False, now)
        assert result.classification == Classification.ELIGIBLE

    def test_partial_days_are_rounded_down(self, make_branch, now):
        branch = make_branch("feature/x", age_days=30)
        later = now + timedelta(hours=23, minutes=59)
        assert classify(branch, Policy(), False, later).classification == Classification.KEEP

    def test_custom_threshold(self, make_branch, now):
        policy = Policy(stale_days=60)
        assert classify(make_branch("f", age_days=60), policy, False, now).classification == Classification.KEEP
        assert classify(make_branch("f", age_days=61), policy, False, now).classification == Classification.ELIGIBLE

    def test_zero_threshold(self, make_branch, now):
        policy = Policy(stale_days=0)
        assert classify(make_branch("f", age_days=0), policy, False, now).classification == Classification.KEEP
        assert classify(make_branch("f", age_days=1), policy, False, now).classification == Classification.ELIGIBLE


class TestClassifierService:
    """Test the BranchClassifier object."""

    def test_merge_status_defaults_to_branch_field(self, make_branch, now):
        classifier = BranchClassifier(Policy())
        result = classifier.classify(make_branch("feature/x", merged=True), now=now)
        assert result.reason == EligibilityReason.MERGED

    def test_explicit_merge_status_overrides_branch_field(self, make_branch, now):
        classifier = BranchClassifier(Policy())
        result = classifier.classify(make_branch("feature/x", merged=True), False, now)
        assert result.classification == Classification.KEEP

    def test_classify_all(self, make_branch, now):
        classifier = BranchClassifier(Policy(exclude_patterns=("keep/*",)))
        branches = [
            make_branch("main"),
            make_branch("keep/this", age_days=90),
            make_branch("feature/merged", merged=True),
            make_branch("feature/old", age_days=90, merged=False),
            make_branch("feature/new", age_days=2, merged=False),
        ]
        results = classifier.classify_all(branches, now)
        assert [r.classification for r in results] == [
            Classification.PROTECTED,
            Classification.EXCLUDED,
            Classification.ELIGIBLE,
            Classification.ELIGIBLE,
            Classification.KEEP,
        ]

    def test_classification_is_pure(self, make_branch, now):
        classifier = BranchClassifier(Policy())
        branch = make_branch("feature/x", age_days=40)
        assert classifier.classify(branch, False, now) == classifier.classify(branch, False, now)


class TestAgeInDays:
    """Test age calculation."""

    def test_naive_datetimes_treated_as_utc(self):
        now = datetime(2024, 1, 10, 12, 0)
        assert age_in_days(datetime(2024, 1, 1, 12, 0), now) == 9

    def test_mixed_timezones(self):
        now = datetime(2024, 1, 10, 0, 0, tzinfo=timezone.utc)
        commit = datetime(2024, 1, 9, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        # 2024-01-08 23:00 UTC -> 1 day 1 hour
        assert age_in_days(commit, now) == 1
