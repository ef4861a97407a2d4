"""Exclude handling for the source walk.

Two tiers:

HARDCODED_DIRS: never traversed, not user-configurable (VCS internals and
    compiler caches).

User patterns (``-e/--exclude`` and ``tags.exclude`` in config): plain
    substrings matched against the root-relative path of each candidate
    file. Not globs, not anchored, case-sensitive.
"""

from __future__ import annotations

import os
from collections.abc import Iterable

# =============================================================================
# Tier 0: HARDCODED - Never traverse
# =============================================================================

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # Nim compiler output
        "nimcache",
    )
)

CANONICAL_SEP = "/"


def normalize_separators(path: str) -> str:
    """Convert OS-specific directory separators to ``/``."""
    path = path.replace("\\", CANONICAL_SEP)
    if os.sep != CANONICAL_SEP:
        path = path.replace(os.sep, CANONICAL_SEP)
    if os.altsep and os.altsep != CANONICAL_SEP:
        path = path.replace(os.altsep, CANONICAL_SEP)
    return path


def normalize_patterns(patterns: Iterable[str]) -> list[str]:
    """Normalize separators and drop empty patterns."""
    return [normalize_separators(p) for p in patterns if p]


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    """Return True if any non-empty pattern occurs in the normalized path."""
    normalized = normalize_separators(relative_path)
    return any(pattern in normalized for pattern in normalize_patterns(patterns))
