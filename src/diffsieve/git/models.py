"""Data models for diff segmentation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DiffSegment:
    """One file's contribution to a diff.

    Mutable: later sections for the same path are merged into it in place.
    """

    file_path: str
    text: str  # starts with its own "diff --git" header line
    insertions: int = 0
    deletions: int = 0

    @property
    def change_size(self) -> int:
        return self.insertions + self.deletions
