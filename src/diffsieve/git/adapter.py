"""Git subprocess wrapper — staged diff, range diff, per-commit patches."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    logger.debug("git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        # Empty diff is not an error
        if not stderr or "fatal" not in stderr.lower():
            return result.stdout
        raise GitError(f"git error: {stderr}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def get_staged_diff(repo_root: Path) -> str:
    """Return the unified diff of staged changes (--cached)."""
    return _run_git(["diff", "--cached", "--no-color"], cwd=repo_root)


def get_range_diff(repo_root: Path, rev_range: str) -> str:
    """Return the unified diff for a revision range such as ``main..HEAD``."""
    return _run_git(["diff", rev_range, "--no-color"], cwd=repo_root)


def _show_patch(repo_root: Path, commit: str) -> str:
    return _run_git(["show", commit, "--format=", "--patch", "--no-color"], cwd=repo_root)


def get_commits_diff(repo_root: Path, commits: Sequence[str]) -> str:
    """Return the diff for the selected commits only.

    A single commit is diffed against its parent (root commits fall back to
    ``git show``). Several commits are taken newest-first, as listed by
    ``git log``, and their patches concatenated oldest-first; intermediate
    commits that were not selected are left out, so the same file may show
    up in more than one patch.
    """
    if not commits:
        return ""

    if len(commits) == 1:
        commit = commits[0]
        try:
            return _run_git(["diff", f"{commit}^", commit, "--no-color"], cwd=repo_root)
        except GitError:
            logger.debug("No parent for %s, falling back to git show", commit)
            return _show_patch(repo_root, commit)

    patches: List[str] = []
    for commit in reversed(commits):
        patch = _show_patch(repo_root, commit)
        if patch.strip():
            patches.append(patch.rstrip())
    return "\n".join(patches)

