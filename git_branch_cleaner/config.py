"""Configuration handling for git-branch-cleaner"""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple, Union

from git_branch_cleaner.constants import (
    BUILTIN_PROTECTED_BRANCHES,
    CONFIG_FILE_NAMES,
    DEFAULT_REMOTE,
    DEFAULT_STALE_DAYS,
)
from git_branch_cleaner.exceptions import ConfigError
from git_branch_cleaner.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Policy:
    """Effective deletion policy after merging defaults, config file and CLI."""

    protected_branches: Tuple[str, ...] = BUILTIN_PROTECTED_BRANCHES
    exclude_patterns: Tuple[str, ...] = ()
    stale_days: int = DEFAULT_STALE_DAYS
    source: Optional[str] = field(default=None, compare=False)  # Config file path, if any

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.stale_days, bool) or not isinstance(self.stale_days, int):
            raise ValueError(f"stale_days must be an integer, got {self.stale_days!r}")
        if self.stale_days < 0:
            raise ValueError(f"stale_days must not be negative, got {self.stale_days}")

        # Built-ins can never be dropped, whatever was passed in
        protected = tuple(self.protected_branches)
        missing = tuple(b for b in BUILTIN_PROTECTED_BRANCHES if b not in protected)
        object.__setattr__(self, "protected_branches", missing + protected)
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

    @property
    def protected_names(self) -> frozenset:
        return frozenset(self.protected_branches)

    def is_protected(self, branch_name: str) -> bool:
        return branch_name in self.protected_names

    def with_overrides(
        self,
        exclude_patterns: Iterable[str] = (),
        stale_days: Optional[Union[int, str]] = None,
    ) -> "Policy":
        """Apply command-line overrides.

        Exclude patterns are appended. A stale-day value replaces the configured
        one only if it is a valid non-negative integer; anything else is logged
        and ignored.
        """
        patterns = self.exclude_patterns + tuple(p for p in exclude_patterns if p)
        days = self.stale_days
        if stale_days is not None:
            parsed = parse_stale_days(stale_days)
            if parsed is None:
                logger.warning(
                    f"Ignoring invalid stale days value {stale_days!r}, using {self.stale_days}"
                )
            else:
                days = parsed
        return replace(self, exclude_patterns=patterns, stale_days=days)

    def to_dict(self) -> dict:
        return {
            "protected_branches": list(self.protected_branches),
            "exclude_patterns": list(self.exclude_patterns),
            "stale_days": self.stale_days,
            "source": self.source,
        }


@dataclass(frozen=True)
class RunOptions:
    """Per-run settings that are not part of the deletion policy."""

    repo_path: str = "."
    remote: str = DEFAULT_REMOTE
    include_remote: bool = True
    dry_run: bool = False
    force: bool = False
    assume_yes: bool = False
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        if not self.remote or not self.remote.strip():
            raise ValueError("remote cannot be empty")


def parse_stale_days(value: Any) -> Optional[int]:
    """Return value as a non-negative int, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
    return None


def find_config_file(cwd: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Return the first conventional config file present in cwd."""
    base = Path(cwd) if cwd is not None else Path(os.getcwd())
    for file_name in CONFIG_FILE_NAMES:
        candidate = base / file_name
        if candidate.is_file():
            return candidate
    return None


def _string_list(data: dict, key: str, path: Path) -> Tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(str(path), f"'{key}' must be a list of strings")
    return tuple(value)


def parse_config(path: Path) -> Policy:
    """Read a config file into a Policy.

    Raises:
        ConfigError: if the file cannot be read or does not have the expected shape
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise ConfigError(str(path), "top level must be an object")

    user_excludes = _string_list(data, "excludePatterns", path)
    user_protected = _string_list(data, "protectedBranches", path)

    stale_days = DEFAULT_STALE_DAYS
    if "staleDays" in data and data["staleDays"] is not None:
        parsed = parse_stale_days(data["staleDays"])
        if parsed is None:
            logger.warning(
                f"Invalid staleDays {data['staleDays']!r} in {path}, using {DEFAULT_STALE_DAYS}"
            )
        else:
            stale_days = parsed

    return Policy(
        # Built-ins are folded into the exclude list too, so both checks guard them
        protected_branches=BUILTIN_PROTECTED_BRANCHES + user_protected,
        exclude_patterns=BUILTIN_PROTECTED_BRANCHES + user_excludes,
        stale_days=stale_days,
        source=str(path),
    )


def load_config(
    custom_path: Optional[Union[str, Path]] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> Policy:
    """Resolve the effective policy from defaults and an optional config file.

    Never raises for config problems: they are logged as warnings and the
    defaults are used instead.

    Args:
        custom_path: Explicit config file path (from --config)
        cwd: Directory probed for conventional config names (default: os.getcwd())

    Returns:
        Policy with built-in defaults merged with the config file
    """
    if custom_path:
        config_path = Path(custom_path).expanduser()
        if not config_path.is_absolute():
            config_path = (Path(cwd) if cwd is not None else Path(os.getcwd())) / config_path
        if not config_path.exists():
            logger.warning(f"Config file not found at {config_path}, using defaults")
            return Policy()
    else:
        config_path = find_config_file(cwd)
        if config_path is None:
            logger.debug("No config file found, using defaults")
            return Policy()

    try:
        policy = parse_config(config_path)
    except ConfigError as e:
        logger.warning(f"Failed to parse config file: {e}")
        return Policy()

    logger.info(f"Loaded config from: {config_path}")
    return policy
