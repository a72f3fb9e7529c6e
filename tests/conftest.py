"""Pytest fixtures for git-branch-cleaner tests"""
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from git_branch_cleaner.config import Policy, RunOptions
from git_branch_cleaner.models.branch import BranchKind, BranchRecord
from git_branch_cleaner.services.git import GitOperations

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
OLD_DATE = "2020-01-01T12:00:00"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def now():
    """Fixed reference time for age calculations."""
    return NOW


@pytest.fixture
def default_policy():
    return Policy()


@pytest.fixture
def make_branch():
    """Factory for BranchRecord snapshots relative to NOW."""
    def _make(name, age_days=0, kind=BranchKind.LOCAL, merged=None, commit_hash="abc1234"):
        return BranchRecord(
            name=name,
            kind=kind,
            last_commit_date=NOW - timedelta(days=age_days),
            commit_hash=commit_hash,
            merged_into_main=merged,
        )
    return _make


def commit_file(repo, name, content, message, date=None):
    """Write a file and commit it, optionally with a fixed commit date."""
    path = Path(repo.working_dir) / name
    path.write_text(content)
    repo.index.add([name])
    if date:
        return repo.index.commit(message, author_date=date, commit_date=date)
    return repo.index.commit(message)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_branches(git_repo):
    """Create a Git repository with merged, unmerged and stale branches.

    - feature/test-feature: recent, not merged
    - feature/to-merge: merged into main with --no-ff
    - stale/old-branch: not merged, last commit in 2020
    """
    repo = git_repo

    repo.git.checkout('-b', 'feature/test-feature')
    commit_file(repo, "feature.txt", "Feature content\n", "Add feature")

    repo.git.checkout('main')
    repo.git.checkout('-b', 'stale/old-branch')
    commit_file(repo, "old.txt", "Old content\n", "Old commit", date=OLD_DATE)

    repo.git.checkout('main')
    repo.git.checkout('-b', 'feature/to-merge')
    commit_file(repo, "merge.txt", "Merge content\n", "Feature to merge")

    repo.git.checkout('main')
    repo.git.merge('feature/to-merge', '--no-ff', '-m', 'Merge feature/to-merge')

    yield repo


@pytest.fixture
def git_repo_with_remote(git_repo_with_branches, temp_dir):
    """Repository with a bare 'origin' that has main and two feature branches."""
    repo = git_repo_with_branches
    remote_path = temp_dir / "origin.git"
    git.Repo.init(remote_path, bare=True)
    repo.create_remote('origin', str(remote_path))
    repo.git.push('origin', 'main', 'feature/to-merge', 'feature/test-feature')
    repo.git.fetch('origin')
    yield repo


@pytest.fixture
def run_options(git_repo_with_branches):
    return RunOptions(repo_path=git_repo_with_branches.working_dir, include_remote=False)


@pytest.fixture
def mock_git_service():
    """Create a mock GitOperations."""
    service = Mock(spec=GitOperations)
    service.repo_path = "/fake/repo/path"
    service.remote_name = "origin"

    service.get_current_branch = Mock(return_value="main")
    service.detect_main_branch = Mock(return_value="main")
    service.is_merged_into_main = Mock(return_value=False)
    service.list_branches = Mock(return_value=[])
    service.delete_local_branch = Mock(
        side_effect=lambda name, force=False: f"Local branch '{name}' deleted successfully"
    )
    service.delete_remote_branch = Mock(
        side_effect=lambda name, remote=None: f"Remote branch '{remote or 'origin'}/{name}' deleted successfully"
    )

    return service
