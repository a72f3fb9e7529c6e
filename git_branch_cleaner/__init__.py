"""
git-branch-cleaner - Safely clean up merged and stale git branches
"""

from .__version__ import __version__
from .core import BranchCleaner
from .cli.main import main

__all__ = ["BranchCleaner", "main", "__version__"]
