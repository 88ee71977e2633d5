"""Segment selection — ignore filtering, cap-and-trim, and batching.

Both modes consume the same filtered segment list in discovery order and
never raise; invalid bounds degrade to "unbounded".
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Any, List, Optional, Sequence, Tuple

from diffsieve.git.diff_parser import DiffParser
from diffsieve.git.models import DiffSegment
from diffsieve.selection.globs import IgnoreMatcher
from diffsieve.selection.models import Batch, BatchResult, DiffOptions, ProcessResult

logger = logging.getLogger(__name__)


def normalize_bound(value: Any) -> Optional[int]:
    """Return a positive integer bound, or None for "unbounded"."""
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return None
    if not math.isfinite(value):
        return None
    bound = math.floor(value)
    return bound if bound >= 1 else None


def filter_segments(
    segments: Sequence[DiffSegment],
    ignore_patterns: Optional[Sequence[str]],
) -> Tuple[List[DiffSegment], int]:
    """Return ``(kept, ignored_count)``; *kept* keeps the input order."""
    matcher = IgnoreMatcher(ignore_patterns)
    if not matcher:
        return list(segments), 0

    kept: List[DiffSegment] = []
    ignored = 0
    for seg in segments:
        if matcher.is_ignored(seg.file_path):
            logger.debug("Ignored %s", seg.file_path)
            ignored += 1
            continue
        kept.append(seg)
    return kept, ignored


def select_top_changes(segments: Sequence[DiffSegment], limit: int) -> List[DiffSegment]:
    """Keep the *limit* largest segments by change size, in original order.

    Ties go to the segment seen first.
    """
    if len(segments) <= limit:
        return list(segments)
    ranked = sorted(range(len(segments)), key=lambda i: (-segments[i].change_size, i))
    keep = set(ranked[:limit])
    return [seg for i, seg in enumerate(segments) if i in keep]


def join_segments(segments: Sequence[DiffSegment]) -> str:
    return "\n".join(seg.text.rstrip() for seg in segments)


def _totals(segments: Sequence[DiffSegment]) -> Tuple[int, int]:
    return (
        sum(seg.insertions for seg in segments),
        sum(seg.deletions for seg in segments),
    )


def _parse_and_filter(
    diff_text: str, options: Optional[DiffOptions]
) -> Tuple[List[DiffSegment], int, Optional[int]]:
    options = options or DiffOptions()
    segments = DiffParser(diff_text).parse()
    included, ignored = filter_segments(segments, options.ignore_patterns)
    return included, ignored, normalize_bound(options.max_files)


def process_diff_for_review(
    diff_text: str,
    options: Optional[DiffOptions] = None,
) -> ProcessResult:
    """Build one diff capped at ``options.max_files`` files.

    Files beyond the cap are dropped, smallest change size first.
    """
    included, ignored, max_files = _parse_and_filter(diff_text, options)

    final = included
    if max_files is not None and len(included) > max_files:
        final = select_top_changes(included, max_files)
        logger.debug("Trimmed %d file(s) over max_files=%d", len(included) - len(final), max_files)

    insertions, deletions = _totals(final)
    return ProcessResult(
        diff=join_segments(final),
        file_count=len(final),
        ignored_file_count=ignored,
        trimmed_file_count=len(included) - len(final),
        insertions=insertions,
        deletions=deletions,
    )


def create_diff_batches_for_review(
    diff_text: str,
    options: Optional[DiffOptions] = None,
) -> BatchResult:
    """Partition every non-ignored file into batches of ``options.max_files``."""
    included, ignored, batch_size = _parse_and_filter(diff_text, options)
    step = batch_size or len(included) or 1

    batches: List[Batch] = []
    for start in range(0, len(included), step):
        chunk = included[start:start + step]
        insertions, deletions = _totals(chunk)
        batches.append(
            Batch(
                diff=join_segments(chunk),
                file_count=len(chunk),
                insertions=insertions,
                deletions=deletions,
            )
        )

    insertions, deletions = _totals(included)
    return BatchResult(
        batches=batches,
        total_file_count=len(included),
        ignored_file_count=ignored,
        insertions=insertions,
        deletions=deletions,
    )
