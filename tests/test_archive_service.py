"""Tests for archiving completed tasks."""

from collections.abc import Sequence
from pathlib import Path

import pytest

from todox.errors import ArchiveCommitError, StorageError
from todox.repositories import CollectionRepository, FilesystemLineStore
from todox.services import ArchiveService, archive


class FailingStore(FilesystemLineStore):
    """Filesystem store that fails writes to chosen paths.

    ``fail_after`` maps a path to the number of writes that succeed before
    every further write to it fails.
    """

    def __init__(self, fail_after: dict[Path, int]) -> None:
        self.fail_after = fail_after
        self.writes: dict[Path, int] = {}

    def write_lines(self, path: Path, lines: Sequence[str]) -> None:
        count = self.writes.get(path, 0)
        self.writes[path] = count + 1
        if path in self.fail_after and count >= self.fail_after[path]:
            raise StorageError(path, "write", "disk full")
        super().write_lines(path, lines)


class FakeSurface:
    """In-memory surface whose saves can be made to fail.

    A save writes the surface's lines to ``path``. ``fail_after`` is the
    number of saves that succeed before every further save fails.
    """

    def __init__(self, path: Path, lines: list[str], fail_after: int | None = None) -> None:
        self.path = path
        self.lines = list(lines)
        self.fail_after = fail_after
        self.saved: list[list[str]] = []

    def get_lines(self) -> list[str]:
        return list(self.lines)

    def set_lines(self, lines: Sequence[str]) -> None:
        self.lines = list(lines)

    def save(self) -> None:
        if self.fail_after is not None and len(self.saved) >= self.fail_after:
            raise StorageError(self.path, "save", "read-only buffer")
        self.saved.append(list(self.lines))
        FilesystemLineStore().write_lines(self.path, self.lines)


class TestArchive:
    """Tests for the pure archive split."""

    def test_moves_completed_lines_to_end_of_done(self):
        """Completed lines are appended to the done list in order."""
        result = archive(
            ["a", "x 2024-01-01 b", "", "c", "x d"],
            ["x 2023-12-31 old"],
        )

        assert result.remaining == ["a", "", "c"]
        assert result.done == ["x 2023-12-31 old", "x 2024-01-01 b", "x d"]
        assert result.moved == ["x 2024-01-01 b", "x d"]
        assert result.moved_count == 2

    def test_nothing_completed(self):
        """Without completed lines both lists are unchanged."""
        result = archive(["a", "b"], ["x old"])
        assert result.remaining == ["a", "b"]
        assert result.done == ["x old"]
        assert result.moved_count == 0

    def test_x_prefix_without_space_stays(self):
        """Only "x " marks a completed task."""
        result = archive(["xmas shopping", "X upper"], [])
        assert result.remaining == ["xmas shopping", "X upper"]

    def test_conservation(self):
        """Every line ends up in exactly one output, order preserved."""
        todo = ["x 1", "a", "x 2", "b", "", "x 3"]
        done = ["x 0"]

        result = archive(todo, done)
        appended = result.done[len(done) :]

        assert len(result.remaining) + len(appended) == len(todo)
        assert [line for line in todo if line in appended] == appended
        assert [line for line in todo if line not in appended] == result.remaining

    def test_inputs_not_mutated(self):
        """archive returns new lists and leaves its inputs alone."""
        todo = ["x a", "b"]
        done = ["x c"]
        archive(todo, done)
        assert todo == ["x a", "b"]
        assert done == ["x c"]


class TestArchiveService:
    """Tests for ArchiveService.archive_file against the filesystem."""

    @pytest.fixture
    def todo(self, tmp_path: Path) -> Path:
        """Create a todo file with one completed task."""
        path = tmp_path / "todo.txt"
        path.write_text("a\nx 2024-01-01 b\nc\n")
        return path

    def test_archive_file(self, todo: Path):
        """Completed tasks move to the done file."""
        service = ArchiveService(CollectionRepository(FilesystemLineStore()))

        result = service.archive_file(todo)

        assert result.moved == ["x 2024-01-01 b"]
        assert todo.read_text() == "a\nc\n"
        assert (todo.parent / "todo.done.txt").read_text() == "x 2024-01-01 b\n"

    def test_appends_to_existing_done_file(self, todo: Path):
        """Archived tasks go after the existing done tasks."""
        done = todo.parent / "todo.done.txt"
        done.write_text("x 2023-01-01 old\n")
        service = ArchiveService(CollectionRepository(FilesystemLineStore()))

        service.archive_file(todo)

        assert done.read_text() == "x 2023-01-01 old\nx 2024-01-01 b\n"

    def test_nothing_to_archive_writes_nothing(self, tmp_path: Path):
        """No done file is created when nothing is completed."""
        todo = tmp_path / "todo.txt"
        todo.write_text("a\n")
        service = ArchiveService(CollectionRepository(FilesystemLineStore()))

        result = service.archive_file(todo)

        assert result.moved_count == 0
        assert not (tmp_path / "todo.done.txt").exists()

    def test_done_write_failure_changes_nothing(self, todo: Path):
        """If the done half fails the todo file is untouched."""
        done = todo.parent / "todo.done.txt"
        store = FailingStore({done: 0})
        service = ArchiveService(CollectionRepository(store))

        with pytest.raises(StorageError):
            service.archive_file(todo)

        assert todo.read_text() == "a\nx 2024-01-01 b\nc\n"
        assert not done.exists()

    def test_todo_write_failure_restores_done(self, todo: Path):
        """If the todo half fails, the done file goes back to its old content."""
        done = todo.parent / "todo.done.txt"
        done.write_text("x old\n")
        service = ArchiveService(CollectionRepository(FailingStore({todo: 0})))

        with pytest.raises(ArchiveCommitError) as exc_info:
            service.archive_file(todo)

        assert exc_info.value.todo_committed is False
        assert exc_info.value.done_committed is False
        assert "done list restored" in str(exc_info.value)
        assert todo.read_text() == "a\nx 2024-01-01 b\nc\n"
        assert done.read_text() == "x old\n"

    def test_failed_restore_reports_done_committed(self, todo: Path):
        """If restoring the done file fails too, the error says it was updated."""
        done = todo.parent / "todo.done.txt"
        service = ArchiveService(CollectionRepository(FailingStore({todo: 0, done: 1})))

        with pytest.raises(ArchiveCommitError) as exc_info:
            service.archive_file(todo)

        error = exc_info.value
        assert error.todo_committed is False
        assert error.done_committed is True
        assert f"done list {done} updated" in str(error)
        assert done.read_text() == "x 2024-01-01 b\n"


class TestArchiveWithSurface:
    """Tests for archiving collections that are open in a surface."""

    def test_archive_goes_through_surface(self, tmp_path: Path):
        """An open todo surface is updated and saved."""
        todo = tmp_path / "todo.txt"
        surface = FakeSurface(todo, ["unsaved", "x 2024-01-01 done"])
        repo = CollectionRepository(FilesystemLineStore(), {todo: surface}.get)

        ArchiveService(repo).archive_file(todo)

        assert surface.lines == ["unsaved"]
        assert surface.saved == [["unsaved"]]
        assert (tmp_path / "todo.done.txt").read_text() == "x 2024-01-01 done\n"

    def test_open_done_surface_is_updated(self, tmp_path: Path):
        """An open done surface receives the archived tasks and is saved."""
        todo = tmp_path / "todo.txt"
        todo.write_text("x a\n")
        done = tmp_path / "todo.done.txt"
        done_surface = FakeSurface(done, [])
        repo = CollectionRepository(FilesystemLineStore(), {done: done_surface}.get)

        ArchiveService(repo).archive_file(todo)

        assert done_surface.lines == ["x a"]
        assert done_surface.saved == [["x a"]]

    def test_unsaved_done_surface_edits_are_kept(self, tmp_path: Path):
        """Archiving appends to the done surface's lines, not the file on disk."""
        todo = tmp_path / "todo.txt"
        todo.write_text("x 2024-01-01 new\n")
        done = tmp_path / "todo.done.txt"
        done.write_text("x 2023-01-01 old\n")
        done_surface = FakeSurface(done, ["x 2023-01-01 old", "x 2023-06-01 unsaved edit"])
        repo = CollectionRepository(FilesystemLineStore(), {done: done_surface}.get)

        ArchiveService(repo).archive_file(todo)

        expected = ["x 2023-01-01 old", "x 2023-06-01 unsaved edit", "x 2024-01-01 new"]
        assert done_surface.lines == expected
        assert done.read_text().splitlines() == expected
        assert todo.read_text() == ""

    def test_failed_done_save_restores_done_surface(self, tmp_path: Path):
        """If the done surface cannot be saved, it gets its old lines back."""
        todo = tmp_path / "todo.txt"
        todo.write_text("a\nx b\n")
        done = tmp_path / "todo.done.txt"
        done_surface = FakeSurface(done, ["x unsaved"], fail_after=0)
        repo = CollectionRepository(FilesystemLineStore(), {done: done_surface}.get)

        with pytest.raises(StorageError):
            ArchiveService(repo).archive_file(todo)

        assert done_surface.lines == ["x unsaved"]
        assert todo.read_text() == "a\nx b\n"

    def test_todo_failure_restores_done_surface(self, tmp_path: Path):
        """Rolling back the done half goes through its open surface."""
        todo = tmp_path / "todo.txt"
        todo.write_text("a\nx b\n")
        done = tmp_path / "todo.done.txt"
        done_surface = FakeSurface(done, ["x unsaved"])
        store = FailingStore({todo: 0})
        repo = CollectionRepository(store, {done: done_surface}.get)

        with pytest.raises(ArchiveCommitError) as exc_info:
            ArchiveService(repo).archive_file(todo)

        assert exc_info.value.done_committed is False
        assert done_surface.lines == ["x unsaved"]
        assert done_surface.saved == [["x unsaved", "x b"], ["x unsaved"]]
        assert todo.read_text() == "a\nx b\n"

    def test_failed_save_restores_surface_and_done(self, tmp_path: Path):
        """A failed todo save restores the todo surface and the done file."""
        todo = tmp_path / "todo.txt"
        surface = FakeSurface(todo, ["a", "x b"], fail_after=0)
        repo = CollectionRepository(FilesystemLineStore(), {todo: surface}.get)

        with pytest.raises(ArchiveCommitError):
            ArchiveService(repo).archive_file(todo)

        assert surface.lines == ["a", "x b"]
        assert (tmp_path / "todo.done.txt").read_text() == ""
