"""Git interface layer — adapter, diff segmentation, models."""

from diffsieve.git.adapter import (
    GitError,
    get_commits_diff,
    get_range_diff,
    get_repo_root,
    get_staged_diff,
)
from diffsieve.git.diff_parser import DiffParser, count_changes, extract_appendix, merge_segment
from diffsieve.git.models import DiffSegment

__all__ = [
    "DiffParser",
    "DiffSegment",
    "GitError",
    "count_changes",
    "extract_appendix",
    "get_commits_diff",
    "get_range_diff",
    "get_repo_root",
    "get_staged_diff",
    "merge_segment",
]
