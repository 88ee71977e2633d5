"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

OutputFormat = Literal["terminal", "json", "diff"]

OUTPUT_FORMATS = ("terminal", "json", "diff")

DEFAULT_IGNORE_PATTERNS = ["**/*.lock", "dist/**", "node_modules/**"]


@dataclass
class ReviewConfig:
    ignore_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    max_files: int = 50  # cap-and-trim bound; <= 0 means unbounded
    batch_size: Optional[int] = None  # batching mode; falls back to max_files

    @property
    def effective_batch_size(self) -> Optional[int]:
        return self.batch_size if self.batch_size is not None else self.max_files


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class DiffSieveConfig:
    version: str = "1.0"
    review: ReviewConfig = field(default_factory=ReviewConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
