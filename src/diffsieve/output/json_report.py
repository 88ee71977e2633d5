"""JSON reporter for scripts and CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, Union

from diffsieve.selection.models import BatchResult, ProcessResult


def to_dict(result: Union[ProcessResult, BatchResult]) -> Dict[str, Any]:
    """Convert a selection result to a JSON-serialisable dict."""
    if isinstance(result, BatchResult):
        return {
            "version": "1.0",
            "mode": "batch",
            "total_file_count": result.total_file_count,
            "ignored_file_count": result.ignored_file_count,
            "insertions": result.insertions,
            "deletions": result.deletions,
            "batches": [
                {
                    "index": idx,
                    "file_count": b.file_count,
                    "insertions": b.insertions,
                    "deletions": b.deletions,
                    "diff": b.diff,
                }
                for idx, b in enumerate(result.batches, 1)
            ],
        }

    return {
        "version": "1.0",
        "mode": "split",
        "file_count": result.file_count,
        "ignored_file_count": result.ignored_file_count,
        "trimmed_file_count": result.trimmed_file_count,
        "insertions": result.insertions,
        "deletions": result.deletions,
        "diff": result.diff,
    }


def render(result: Union[ProcessResult, BatchResult]) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
