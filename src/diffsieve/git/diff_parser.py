"""Unified diff segmenter — splits raw diff text into per-file segments.

The input may be the naive concatenation of several patches (one per
reviewed commit), so the same path can legitimately appear in more than
one ``diff --git`` section. Such sections are folded into a single
DiffSegment, keeping only the first header block and appending every
later hunk or binary payload.

Best effort: sections whose header cannot be parsed are dropped, never
raised.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Generator, List, Optional, Tuple

from diffsieve.git.models import DiffSegment

logger = logging.getLogger(__name__)

SECTION_DELIMITER = "diff --git "

# Header body after the delimiter, e.g. "a/foo.py b/foo.py"
_HEADER_PATHS_RE = re.compile(r"a/(.+?) b/(.+)")

# Header lines never repeated when merging a later section
_MERGE_SKIP_PREFIXES = ("diff --git ", "index ", "--- ", "+++ ")
_BINARY_PREFIXES = ("GIT binary patch", "Binary files ")


def count_changes(section_text: str) -> Tuple[int, int]:
    """Return ``(insertions, deletions)`` for one section.

    Every ``+``/``-`` line counts except the ``+++ ``/``--- `` file markers,
    including lines outside hunks.
    """
    insertions = 0
    deletions = 0
    for line in section_text.split("\n"):
        if line.startswith("+++ ") or line.startswith("--- "):
            continue
        if line.startswith("+"):
            insertions += 1
        elif line.startswith("-"):
            deletions += 1
    return insertions, deletions


def extract_appendix(section_text: str) -> str:
    """Return the part of a repeated section worth appending to its segment.

    Precedence: hunks from the first ``@@`` line, then a binary payload,
    then whatever metadata lines remain once the header block is removed.
    """
    lines = section_text.split("\n")

    for idx, line in enumerate(lines):
        if line.startswith("@@"):
            return "\n".join(lines[idx:]).rstrip()

    for idx, line in enumerate(lines):
        if line.startswith(_BINARY_PREFIXES):
            return "\n".join(lines[idx:]).rstrip()

    meta = [line for line in lines[1:] if not line.startswith(_MERGE_SKIP_PREFIXES)]
    return "\n".join(meta).rstrip()


def merge_segment(existing: DiffSegment, section_text: str) -> DiffSegment:
    """Fold *section_text* into *existing* (same path). Mutates and returns it."""
    appendix = extract_appendix(section_text)
    if appendix:
        existing.text = f"{existing.text.rstrip()}\n{appendix}"

    insertions, deletions = count_changes(section_text)
    existing.insertions += insertions
    existing.deletions += deletions
    return existing


def parse_header_path(header_line: str) -> Optional[str]:
    """Return the display path from a header body, or None if unrecognised.

    Prefers the new path; falls back to the old one when the new is empty.
    """
    m = _HEADER_PATHS_RE.fullmatch(header_line.rstrip("\r"))
    if m is None:
        return None
    old_path, new_path = m.group(1), m.group(2)
    return new_path or old_path


class DiffParser:
    """Split unified diff text into ordered, unique-by-path DiffSegments.

    Usage::

        segments = DiffParser(diff_text).parse()
        for seg in segments:
            print(seg.file_path, seg.insertions, seg.deletions)
    """

    def __init__(self, diff_text: str) -> None:
        self._text = diff_text or ""

    def sections(self) -> Generator[str, None, None]:
        """Yield each ``diff --git`` section with its header re-prefixed.

        Text before the first delimiter is treated as one more section, so
        it survives only if its first line reads like ``a/<old> b/<new>``.
        """
        buffer: List[str] = []

        for line in self._text.split("\n"):
            if line.startswith(SECTION_DELIMITER):
                section = self._flush(buffer)
                if section:
                    yield section
                buffer = [line[len(SECTION_DELIMITER):]]
                continue
            buffer.append(line)

        section = self._flush(buffer)
        if section:
            yield section

    @staticmethod
    def _flush(buffer: List[str]) -> Optional[str]:
        body = "\n".join(buffer).strip()
        if not body:
            return None
        return SECTION_DELIMITER + body

    def parse(self) -> List[DiffSegment]:
        """Return segments in order of first appearance of each path."""
        if not self._text.strip():
            return []

        merged: Dict[str, DiffSegment] = {}

        for section in self.sections():
            header = section[len(SECTION_DELIMITER):].split("\n", 1)[0]
            file_path = parse_header_path(header)
            if not file_path:
                logger.debug("Dropped section with unrecognised header: %r", header)
                continue

            existing = merged.get(file_path)
            if existing is not None:
                merge_segment(existing, section)
                logger.debug("Merged repeated section for %s", file_path)
                continue

            insertions, deletions = count_changes(section)
            merged[file_path] = DiffSegment(
                file_path=file_path,
                text=section,
                insertions=insertions,
                deletions=deletions,
            )

        return list(merged.values())
