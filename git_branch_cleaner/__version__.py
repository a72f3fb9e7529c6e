"""Version information for git-branch-cleaner."""

__version__ = "0.1.0"
