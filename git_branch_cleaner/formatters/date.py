"""Commit date and branch age formatting."""

from datetime import datetime, timezone


def format_date(commit_date: datetime) -> str:
    """
    Format a commit date as YYYY-MM-DD in UTC.

    Naive datetimes are taken to be UTC already, matching age_in_days.
    """
    if commit_date.tzinfo is None:
        commit_date = commit_date.replace(tzinfo=timezone.utc)
    return commit_date.astimezone(timezone.utc).strftime("%Y-%m-%d")


def format_age(age_days: int) -> str:
    """Age column text: whole days followed by "d", e.g. "31d"."""
    return f"{age_days}d"
