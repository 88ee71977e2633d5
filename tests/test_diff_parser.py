"""Tests for the diff segmenter and the per-path merge."""

from diffsieve.git.diff_parser import (
    DiffParser,
    count_changes,
    extract_appendix,
    merge_segment,
    parse_header_path,
)
from diffsieve.git.models import DiffSegment
from diffsieve.selection.selector import process_diff_for_review


class TestBasicParsing:
    def test_single_file(self, sample_diff_simple):
        segments = DiffParser(sample_diff_simple).parse()
        assert len(segments) == 1
        seg = segments[0]
        assert seg.file_path == "app.py"
        assert seg.insertions == 1
        assert seg.deletions == 1
        assert seg.change_size == 2
        assert seg.text.startswith("diff --git a/app.py b/app.py\n")

    def test_empty_input(self):
        assert DiffParser("").parse() == []
        assert DiffParser("   \n\n").parse() == []

    def test_none_input(self):
        assert DiffParser(None).parse() == []  # type: ignore[arg-type]

    def test_first_seen_order(self, section):
        diff = section("z.py") + section("a.py") + section("m.py")
        paths = [s.file_path for s in DiffParser(diff).parse()]
        assert paths == ["z.py", "a.py", "m.py"]

    def test_rename_uses_new_path(self, sample_diff_rename):
        segments = DiffParser(sample_diff_rename).parse()
        assert [s.file_path for s in segments] == ["new_name.py"]
        assert segments[0].insertions == 1

    def test_deleted_file(self, sample_diff_deleted):
        segments = DiffParser(sample_diff_deleted).parse()
        assert segments[0].file_path == "old.py"
        assert segments[0].insertions == 0
        assert segments[0].deletions == 3

    def test_path_with_spaces(self):
        diff = (
            "diff --git a/my file.txt b/my file.txt\n"
            "--- a/my file.txt\n"
            "+++ b/my file.txt\n"
            "@@ -0,0 +1 @@\n"
            "+hello\n"
        )
        segments = DiffParser(diff).parse()
        assert segments[0].file_path == "my file.txt"

    def test_trailing_whitespace_trimmed(self, section):
        segments = DiffParser(section("a.py") + "\n\n\n").parse()
        assert not segments[0].text.endswith("\n")


class TestDegradedInput:
    def test_unrecognised_header_dropped(self, section):
        diff = "diff --git something odd\n+x\n" + section("ok.py")
        segments = DiffParser(diff).parse()
        assert [s.file_path for s in segments] == ["ok.py"]

    def test_preamble_before_first_header_ignored(self, section):
        diff = "commit 0123abc\nAuthor: Dev <dev@example.com>\n\n    +not a change\n" + section("a.py")
        segments = DiffParser(diff).parse()
        assert len(segments) == 1
        assert segments[0].insertions == 1

    def test_header_shaped_leading_chunk_kept(self, section):
        diff = "a/x.py b/x.py\n+one\n" + section("y.py")
        segments = DiffParser(diff).parse()
        assert [s.file_path for s in segments] == ["x.py", "y.py"]
        assert segments[0].text == "diff --git a/x.py b/x.py\n+one"
        assert segments[0].insertions == 1

    def test_text_without_headers(self):
        assert DiffParser("just some text\n+plus\n-minus\n").parse() == []

    def test_crlf_header(self):
        diff = (
            "diff --git a/w.txt b/w.txt\r\n"
            "--- a/w.txt\r\n"
            "+++ b/w.txt\r\n"
            "@@ -1 +1 @@\r\n"
            "-a\r\n"
            "+b\r\n"
        )
        segments = DiffParser(diff).parse()
        assert segments[0].file_path == "w.txt"
        assert (segments[0].insertions, segments[0].deletions) == (1, 1)

    def test_empty_section_skipped(self, section):
        diff = "diff --git \n" + section("a.py")
        assert [s.file_path for s in DiffParser(diff).parse()] == ["a.py"]


class TestParseHeaderPath:
    def test_plain(self):
        assert parse_header_path("a/src/x.py b/src/x.py") == "src/x.py"

    def test_rename_prefers_new(self):
        assert parse_header_path("a/old.py b/new.py") == "new.py"

    def test_unrecognised(self):
        assert parse_header_path("x/old.py y/new.py") is None
        assert parse_header_path("a/only-one-path") is None


class TestCountChanges:
    def test_markers_not_counted(self):
        text = "--- a/f\n+++ b/f\n@@ -1 +1 @@\n-old\n+new\n"
        assert count_changes(text) == (1, 1)

    def test_counts_outside_hunks(self):
        # Any +/- prefixed line counts, hunk or not
        text = "diff --git a/f b/f\n+stray\n@@ -1 +1 @@\n+x\n"
        assert count_changes(text) == (2, 0)

    def test_marker_lookalike_content_skipped(self):
        # A removed line whose content starts with "-- " reads as a marker
        text = "@@ -1 +0,0 @@\n--- sql comment\n"
        assert count_changes(text) == (0, 0)


class TestMerge:
    def test_duplicate_sections_merged(self, sample_diff_concatenated):
        segments = DiffParser(sample_diff_concatenated).parse()
        assert [s.file_path for s in segments] == ["a.ts", "b.ts"]

        a = segments[0]
        assert "@@ -1,1 +1,2 @@" in a.text
        assert "@@ -10,2 +10,1 @@" in a.text
        assert a.text.count("diff --git") == 1
        assert "index 2222222..5555555" not in a.text
        assert (a.insertions, a.deletions) == (1, 1)

    def test_merged_hunks_follow_first_section(self, sample_diff_concatenated):
        a = DiffParser(sample_diff_concatenated).parse()[0]
        assert a.text.index("+const b = 2") < a.text.index("@@ -10,2 +10,1 @@")
        assert "+const b = 2\n@@ -10,2 +10,1 @@" in a.text

    def test_binary_appendix(self, sample_diff_binary):
        second = (
            "diff --git a/image.png b/image.png\n"
            "index abc1234..def5678 100644\n"
            "GIT binary patch\n"
            "literal 12\n"
            "zcmZ?wbhEHbRA6vm\n"
        )
        segments = DiffParser(sample_diff_binary + second).parse()
        assert len(segments) == 1
        text = segments[0].text
        assert text.count("diff --git") == 1
        assert text.endswith("GIT binary patch\nliteral 12\nzcmZ?wbhEHbRA6vm")
        assert "index abc1234..def5678" not in text

    def test_metadata_appendix(self, section, sample_diff_mode_only):
        segments = DiffParser(section("script.sh") + sample_diff_mode_only).parse()
        assert len(segments) == 1
        assert segments[0].text.endswith("+new line 0\nold mode 100644\nnew mode 100755")

    def test_empty_appendix_leaves_text(self):
        seg = DiffSegment(file_path="f", text="diff --git a/f b/f\n+x\n", insertions=1)
        merge_segment(seg, "diff --git a/f b/f\nindex 1..2 100644\n--- a/f\n+++ b/f\n")
        assert seg.text == "diff --git a/f b/f\n+x\n"
        assert seg.insertions == 1


class TestExtractAppendix:
    def test_hunk_wins_over_binary(self):
        text = "diff --git a/f b/f\nBinary files a/f and b/f differ\n@@ -1 +1 @@\n+x\n"
        assert extract_appendix(text) == "@@ -1 +1 @@\n+x"

    def test_binary_files_line(self):
        text = "diff --git a/f b/f\nindex 1..2\nBinary files a/f and b/f differ\n"
        assert extract_appendix(text) == "Binary files a/f and b/f differ"

    def test_only_header(self):
        assert extract_appendix("diff --git a/f b/f\nindex 1..2 100644\n--- a/f\n+++ b/f") == ""


class TestReparse:
    def test_output_reparses_to_same_counts(self, sample_diff_concatenated, sample_diff_deleted):
        first = process_diff_for_review(sample_diff_concatenated + sample_diff_deleted)
        second = process_diff_for_review(first.diff)
        assert (second.file_count, second.insertions, second.deletions) == (
            first.file_count,
            first.insertions,
            first.deletions,
        )
        assert second.diff == first.diff
