"""diffsieve: split, filter, and batch git diffs for AI code review."""

__version__ = "0.1.0"
