"""Tests for project tag extraction and insertion."""

from pathlib import Path

import pytest

from todox.repositories import CollectionRepository, FilesystemLineStore
from todox.services import TagService, extract_tags, insert_tags
from todox.services.tag_service import apply_tags, has_content


class TestExtractTags:
    """Tests for extract_tags."""

    def test_distinct_and_alphabetical(self):
        """Each tag appears once, sorted alphabetically."""
        lines = ["buy milk +errands", "call mom +family +errands"]
        assert extract_tags(lines) == ["errands", "family"]

    def test_no_tags(self):
        """Lines without projects give an empty list."""
        assert extract_tags(["a", "", "b @home"]) == []

    def test_completed_lines_count(self):
        """Tags on completed tasks are offered too."""
        assert extract_tags(["x 2024-01-01 done +old"]) == ["old"]


class TestInsertTags:
    """Tests for insert_tags."""

    def test_inserted_before_first_context(self):
        """Tags go before the first context token."""
        line = "write report @work due:2024-05-01"
        assert insert_tags(line, ["work-proj"]) == "write report +work-proj @work due:2024-05-01"

    def test_inserted_before_metadata(self):
        """Tags go before the first key:value token."""
        assert insert_tags("pay rent due:2024-06-01", ["home"]) == "pay rent +home due:2024-06-01"

    def test_appended_without_context_or_metadata(self):
        """Without contexts or metadata, tags go at the end."""
        assert insert_tags("buy milk", ["errands"]) == "buy milk +errands"

    def test_multiple_tags_keep_order(self):
        """Several tags are inserted as one block in the given order."""
        assert insert_tags("buy milk @store", ["a", "b"]) == "buy milk +a +b @store"

    def test_existing_tags_skipped(self):
        """Tags already on the line are not added again."""
        assert insert_tags("buy milk +errands", ["errands"]) == "buy milk +errands"
        assert insert_tags("buy milk +errands", ["errands", "home"]) == "buy milk +errands +home"

    def test_plus_prefix_accepted(self):
        """A leading + on a requested tag is ignored."""
        assert insert_tags("buy milk", ["+errands"]) == "buy milk +errands"

    def test_duplicate_requested_tags_added_once(self):
        """Repeated tags in the request are added once."""
        assert insert_tags("task", ["a", "a"]) == "task +a"

    def test_idempotent(self):
        """Inserting the same tags twice changes nothing the second time."""
        line = "(A) 2024-01-01 call @phone key:value"
        once = insert_tags(line, ["x", "y"])
        assert insert_tags(once, ["x", "y"]) == once

    def test_leading_markers_are_skipped(self):
        """Priority and creation date are not part of the description."""
        line = "(A) 2024-01-01 call @phone"
        assert insert_tags(line, ["x"]) == "(A) 2024-01-01 call +x @phone"

    def test_context_right_after_priority(self):
        """A context directly after the priority still marks the insertion point."""
        assert insert_tags("(A) @phone call", ["x"]) == "(A) +x @phone call"

    def test_line_starting_with_context(self):
        """Tags go first when the line starts with a context."""
        assert insert_tags("@phone call", ["x"]) == "+x @phone call"

    def test_completed_line(self):
        """Completion and creation dates are skipped on done tasks."""
        line = "x 2024-02-01 2024-01-01 done @home"
        assert insert_tags(line, ["p"]) == "x 2024-02-01 2024-01-01 done +p @home"

    def test_url_is_not_an_insertion_point(self):
        """A URL is not a key:value token."""
        assert insert_tags("read https://example.com", ["web"]) == "read https://example.com +web"

    def test_whitespace_at_insertion_point_is_normalised(self):
        """Runs of spaces where the tags go become single spaces."""
        assert insert_tags("write report   @work", ["p"]) == "write report +p @work"
        assert insert_tags("buy milk  ", ["p"]) == "buy milk +p"

    def test_tabs_at_insertion_point_are_normalised(self):
        """Tabs where the tags go are replaced by single spaces."""
        assert insert_tags("task\t@home", ["t"]) == "task +t @home"
        assert insert_tags("task \t", ["t"]) == "task +t"

    def test_other_whitespace_is_preserved(self):
        """Whitespace away from the insertion point is kept."""
        assert insert_tags("a  b @c", ["p"]) == "a  b +p @c"

    def test_blank_line_unchanged(self):
        """Blank lines never get tags."""
        assert insert_tags("", ["p"]) == ""
        assert insert_tags("   ", ["p"]) == "   "

    def test_no_tags(self):
        """An empty request leaves the line alone."""
        assert insert_tags("task @c", []) == "task @c"


class TestApplyTags:
    """Tests for tagging a range of lines."""

    def test_range_is_half_open_and_skips_blanks(self):
        """Only non-blank lines in [start, end) change."""
        lines = ["a", "", "b @c", "d"]
        assert apply_tags(lines, 0, 3, ["p"]) == ["a +p", "", "b +p @c", "d"]

    def test_range_clamped(self):
        """Ranges past either end are clamped."""
        assert apply_tags(["a"], -1, 10, ["p"]) == ["a +p"]

    def test_has_content(self):
        """has_content is True only when the range holds a task."""
        assert has_content(["", "a"], 0, 2)
        assert not has_content(["", " ", "a"], 0, 2)
        assert not has_content(["a"], 3, 5)


class TestTagService:
    """Tests for TagService with files."""

    @pytest.fixture
    def todo(self, tmp_path: Path) -> Path:
        """Create a todo file with one project tag."""
        path = tmp_path / "todo.txt"
        path.write_text("buy milk +errands\ncall mom @phone\n")
        return path

    @pytest.fixture
    def service(self) -> TagService:
        """Create a TagService over the filesystem."""
        return TagService(CollectionRepository(FilesystemLineStore()))

    def test_available_tags(self, todo: Path, service: TagService):
        """available_tags lists the tags used in the file."""
        assert service.available_tags(todo) == ["errands"]

    def test_tag_rows(self, todo: Path, service: TagService):
        """tag_rows writes the tagged line and reports a change."""
        assert service.tag_rows(todo, 1, 2, ["errands"]) is True
        assert todo.read_text() == "buy milk +errands\ncall mom +errands @phone\n"

    def test_unchanged_file_not_rewritten(self, todo: Path, service: TagService):
        """Rows that already have the tags are left alone and reported unchanged."""
        before = todo.stat().st_mtime_ns
        assert service.tag_rows(todo, 0, 1, ["errands"]) is False
        assert todo.stat().st_mtime_ns == before

    def test_blank_rows_report_no_change(self, tmp_path: Path, service: TagService):
        """Tagging only blank rows changes nothing."""
        path = tmp_path / "todo.txt"
        path.write_text("task\n\n")
        assert service.tag_rows(path, 1, 2, ["p"]) is False
        assert path.read_text() == "task\n\n"
