"""Command-line argument parsing for git-branch-cleaner."""

import argparse

from git_branch_cleaner.__version__ import __version__
from git_branch_cleaner.constants import (
    BUILTIN_PROTECTED_BRANCHES,
    CONFIG_FILE_NAMES,
    DEFAULT_REMOTE,
    DEFAULT_STALE_DAYS,
)

EPILOG = f"""\
examples:
  git-branch-cleaner                                 clean branches in the current directory
  git-branch-cleaner /path/to/repo                   clean branches in a specific repo
  git-branch-cleaner --exclude "preview-*"           keep preview branches
  git-branch-cleaner -e "release-*" -e "hotfix-*" -s 60

config file:
  The first of {", ".join(CONFIG_FILE_NAMES)} found in the
  current directory is used, unless --config is given:
  {{
    "excludePatterns": ["preview-*", "release-*"],
    "staleDays": 30,
    "protectedBranches": ["custom-protected"]
  }}

protected branches (never deleted):
  {", ".join(BUILTIN_PROTECTED_BRANCHES)}

exit status:
  0 when the run completes or the confirmation is declined, 1 on errors or
  Ctrl-C, 2 for unknown or invalid options (reported by argparse)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-branch-cleaner",
        description="Safely clean up merged and stale git branches",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "repo_path", nargs="?", metavar="REPO_PATH",
        help="Path to the git repository (used when --path is not given)",
    )
    parser.add_argument(
        "-p", "--path", help="Path to the git repository (default: current directory)"
    )
    parser.add_argument("-c", "--config", help="Path to config file")
    parser.add_argument(
        "-e", "--exclude", action="append", default=[], metavar="PATTERN",
        help="Exclude branches matching pattern (can be used multiple times)",
    )
    # Parsed later so an invalid value only produces a warning
    parser.add_argument(
        "-s", "--stale-days", metavar="DAYS",
        help=f"Days of inactivity to consider a branch stale (default: {DEFAULT_STALE_DAYS})",
    )
    parser.add_argument(
        "--remote", default=DEFAULT_REMOTE, help=f"Remote name (default: {DEFAULT_REMOTE})"
    )
    parser.add_argument(
        "--local-only", action="store_true", help="Only consider local branches, skip fetching"
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Preview mode - show what would be deleted without deleting",
    )
    parser.add_argument(
        "--force", action="store_true", help="Force-delete local branches that are not merged"
    )
    parser.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument(
        "--list-tools", action="store_true",
        help="Print the agent tool definitions as JSON and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-branch-cleaner {__version__}")
    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
