"""Shared test fixtures — sample diffs, diff builders, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path
from typing import Sequence

import pytest


def make_section(path: str, added: int = 1, removed: int = 0, start: int = 1) -> str:
    """Build a one-hunk ``diff --git`` section for *path*."""
    lines = [
        f"diff --git a/{path} b/{path}",
        "index 1234567..89abcde 100644",
        f"--- a/{path}",
        f"+++ b/{path}",
        f"@@ -{start},{removed} +{start},{added} @@",
    ]
    lines += [f"-old line {i}" for i in range(removed)]
    lines += [f"+new line {i}" for i in range(added)]
    return "\n".join(lines) + "\n"


def make_diff(sizes: Sequence[int], prefix: str = "file") -> str:
    """Build a diff with one file per entry of *sizes* (added lines each)."""
    return "".join(make_section(f"{prefix}{i}.py", added=n) for i, n in enumerate(sizes))


@pytest.fixture
def sample_diff_simple() -> str:
    """One modified file with one insertion and one deletion."""
    return textwrap.dedent("""\
        diff --git a/app.py b/app.py
        index 1234567..abcdef0 100644
        --- a/app.py
        +++ b/app.py
        @@ -1,2 +1,2 @@
         import os
        -DEBUG = True
        +DEBUG = False
    """)


@pytest.fixture
def sample_diff_concatenated() -> str:
    """Two commit patches touching a.ts twice and b.ts once."""
    return textwrap.dedent("""\
        diff --git a/a.ts b/a.ts
        index 1111111..2222222 100644
        --- a/a.ts
        +++ b/a.ts
        @@ -1,1 +1,2 @@
         const a = 1
        +const b = 2
        diff --git a/b.ts b/b.ts
        index 3333333..4444444 100644
        --- a/b.ts
        +++ b/b.ts
        @@ -3,1 +3,1 @@
        -let x = 1
        +let x = 2
        diff --git a/a.ts b/a.ts
        index 2222222..5555555 100644
        --- a/a.ts
        +++ b/a.ts
        @@ -10,2 +10,1 @@
         export default a
        -export { b }
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file."""
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        new file mode 100644
        index 0000000..abc1234
        Binary files /dev/null and b/image.png differ
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    """A diff with only a file mode change."""
    return textwrap.dedent("""\
        diff --git a/script.sh b/script.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    """A deleted file."""
    return textwrap.dedent("""\
        diff --git a/old.py b/old.py
        deleted file mode 100644
        index abc1234..0000000
        --- a/old.py
        +++ /dev/null
        @@ -1,3 +0,0 @@
        -line one
        -line two
        -line three
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A renamed file with one added line."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,0 +2,1 @@
        +# New line added after rename
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path


@pytest.fixture
def diff_of_sizes():
    """Factory fixture: ``diff_of_sizes([10, 5])`` -> diff of file0.py, file1.py."""
    return make_diff


@pytest.fixture
def section():
    """Factory fixture for a single ``diff --git`` section."""
    return make_section
