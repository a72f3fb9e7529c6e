"""Glob pattern matching for branch names.

Patterns support two wildcards: ``*`` matches any run of characters (including
``/``) and ``?`` matches exactly one character. Every other character is taken
literally, so ``release-1.2`` only matches itself. Matching is anchored at both
ends and case-sensitive.

A pattern is compiled once into a :class:`GlobPattern` and can then be tested
against any number of names.
"""

from functools import lru_cache
from typing import Iterable, Optional, Tuple

# A segment is the text between two ``*``; ``None`` stands for ``?``
Segment = Tuple[Optional[str], ...]


def _compile_segment(text: str) -> Segment:
    return tuple(None if char == "?" else char for char in text)


def _segment_at(name: str, start: int, segment: Segment) -> bool:
    """Check that segment matches name exactly at position start."""
    if start < 0 or start + len(segment) > len(name):
        return False
    for offset, expected in enumerate(segment):
        if expected is not None and name[start + offset] != expected:
            return False
    return True


def _find_segment(name: str, segment: Segment, start: int, end: int) -> int:
    """Leftmost position in name[start:end] where segment matches, or -1."""
    for position in range(start, end - len(segment) + 1):
        if _segment_at(name, position, segment):
            return position
    return -1


class GlobPattern:
    """A compiled glob pattern."""

    __slots__ = ("pattern", "_segments")

    def __init__(self, pattern: str):
        self.pattern = pattern
        self._segments: Tuple[Segment, ...] = tuple(
            _compile_segment(part) for part in pattern.split("*")
        )

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r})"

    def matches(self, name: str) -> bool:
        """Return True if name matches the whole pattern."""
        if name == self.pattern:
            return True

        segments = self._segments
        if len(segments) == 1:
            only = segments[0]
            return len(name) == len(only) and _segment_at(name, 0, only)

        head, middle, tail = segments[0], segments[1:-1], segments[-1]
        if len(name) < len(head) + len(tail):
            return False
        if not _segment_at(name, 0, head):
            return False
        tail_start = len(name) - len(tail)
        if not _segment_at(name, tail_start, tail):
            return False

        # Leftmost placement of each middle segment leaves the most room for the rest
        position = len(head)
        for segment in middle:
            found = _find_segment(name, segment, position, tail_start)
            if found < 0:
                return False
            position = found + len(segment)
        return True


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> GlobPattern:
    """Compile a pattern, reusing earlier compilations of the same text."""
    return GlobPattern(pattern)


def matches(name: str, pattern: str) -> bool:
    """Check whether a branch name matches a glob pattern."""
    return compile_pattern(pattern).matches(name)


def first_match(name: str, patterns: Iterable[str]) -> Optional[str]:
    """Return the first pattern that matches name, or None."""
    for pattern in patterns:
        if matches(name, pattern):
            return pattern
    return None
