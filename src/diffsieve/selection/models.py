"""Selection options and result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class DiffOptions:
    """Caller-supplied selection options.

    ``ignore_patterns`` of None means nothing is ignored. ``max_files`` is
    the trim bound in cap-and-trim mode and the batch size in batching
    mode; ``None`` means unbounded (or a single batch).
    """

    ignore_patterns: Optional[List[str]] = field(default_factory=list)
    max_files: Optional[int] = None


@dataclass
class ProcessResult:
    """A single, size-capped diff."""

    diff: str = ""
    file_count: int = 0
    ignored_file_count: int = 0
    trimmed_file_count: int = 0
    insertions: int = 0
    deletions: int = 0


@dataclass
class Batch:
    """One bounded partition of the filtered files."""

    diff: str
    file_count: int
    insertions: int
    deletions: int


@dataclass
class BatchResult:
    """Every non-ignored file, partitioned into ordered batches."""

    batches: List[Batch] = field(default_factory=list)
    total_file_count: int = 0
    ignored_file_count: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def batch_count(self) -> int:
        return len(self.batches)
