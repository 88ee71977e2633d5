"""Ignore-pattern globs compiled to anchored regular expressions.

Conventions:
  - ``**`` matches anything, ``/`` included.
  - ``*`` matches anything except ``/``; ``?`` one character except ``/``.
  - A leading ``/`` anchors the pattern to the start of the path.
  - A pattern without ``/`` (after de-anchoring) is matched against the
    basename only.
  - Otherwise an unanchored pattern may start at the path root or right
    after any ``/``.
  - Matches always cover the whole candidate string.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Union

PathPredicate = Callable[[str], bool]

_ANY_DIR_PREFIX = "(?:.*/)?"


def glob_to_regex(glob: str, anchored: bool) -> re.Pattern[str]:
    """Compile *glob* into a pattern meant for ``fullmatch``."""
    parts: List[str] = [] if anchored else [_ANY_DIR_PREFIX]
    idx = 0
    while idx < len(glob):
        char = glob[idx]
        if char == "*":
            if glob[idx + 1:idx + 2] == "*":
                parts.append(".*")
                idx += 2
                continue
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
        idx += 1
    return re.compile("".join(parts))


def basename(file_path: str) -> str:
    return file_path.rsplit("/", 1)[-1] or file_path


def compile_pattern(pattern: str) -> PathPredicate:
    """Return a predicate telling whether a path matches *pattern*."""
    anchored = pattern.startswith("/")
    normalized = pattern[1:] if anchored else pattern

    if "/" not in normalized:
        regex = glob_to_regex(normalized, anchored=True)
        return lambda file_path: regex.fullmatch(basename(file_path)) is not None

    regex = glob_to_regex(normalized, anchored=anchored)
    return lambda file_path: regex.fullmatch(file_path) is not None


def normalize_patterns(patterns: Union[str, Iterable[str], None]) -> List[str]:
    """Trim patterns and drop blanks, keeping order.

    None means no patterns; a bare string is a single pattern.
    """
    if patterns is None:
        return []
    if isinstance(patterns, str):
        patterns = [patterns]
    return [p.strip() for p in patterns if p and p.strip()]


class IgnoreMatcher:
    """Evaluate a configured list of ignore globs against file paths."""

    def __init__(self, patterns: Union[str, Iterable[str], None] = None) -> None:
        self.patterns = normalize_patterns(patterns)
        self._predicates = [compile_pattern(p) for p in self.patterns]

    def __bool__(self) -> bool:
        return bool(self._predicates)

    def is_ignored(self, file_path: str) -> bool:
        """Return True if any pattern matches *file_path*."""
        return any(match(file_path) for match in self._predicates)
