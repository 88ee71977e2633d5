"""Starter .diffsieve.toml template."""

DEFAULT_TOML = """\
# diffsieve configuration
version = "1.0"

[review]
# Globs for files left out of review. A leading "/" anchors to the repo root;
# patterns without "/" match the file name only.
ignore_patterns = ["**/*.lock", "dist/**", "node_modules/**"]
max_files = 50            # split: keep the N most-changed files (0 = no limit)
# batch_size = 20         # batch: files per batch (defaults to max_files)

[output]
format = "terminal"       # terminal | json | diff
show_summary = true
"""
