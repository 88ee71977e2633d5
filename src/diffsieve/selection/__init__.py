"""Selection — ignore globs, cap-and-trim, batching."""

from diffsieve.selection.globs import IgnoreMatcher, compile_pattern, glob_to_regex
from diffsieve.selection.models import Batch, BatchResult, DiffOptions, ProcessResult
from diffsieve.selection.selector import (
    create_diff_batches_for_review,
    filter_segments,
    normalize_bound,
    process_diff_for_review,
    select_top_changes,
)

__all__ = [
    "Batch",
    "BatchResult",
    "DiffOptions",
    "IgnoreMatcher",
    "ProcessResult",
    "compile_pattern",
    "create_diff_batches_for_review",
    "filter_segments",
    "glob_to_regex",
    "normalize_bound",
    "process_diff_for_review",
    "select_top_changes",
]
