"""Service for moving completed tasks to the done file."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import ArchiveCommitError, StorageError
from ..models import is_completed
from ..repositories import CollectionRepository
from ..utils import done_file_path

logger = logging.getLogger(__name__)


@dataclass
class ArchiveResult:
    """Outcome of splitting a todo collection."""

    remaining: list[str] = field(default_factory=list)  # New todo collection
    done: list[str] = field(default_factory=list)  # New done collection
    moved: list[str] = field(default_factory=list)  # Lines appended to done

    @property
    def moved_count(self) -> int:
        return len(self.moved)


def archive(todo_lines: Sequence[str], done_lines: Sequence[str]) -> ArchiveResult:
    """
    Split completed tasks out of a todo collection.

    Completed lines are appended, in their original order, to the end of the
    done collection. Everything else, blank lines included, stays in the todo
    collection in its original order. Neither input is mutated.
    """
    remaining: list[str] = []
    moved: list[str] = []
    for line in todo_lines:
        if is_completed(line):
            moved.append(line)
        else:
            remaining.append(line)
    return ArchiveResult(remaining=remaining, done=[*done_lines, *moved], moved=moved)


class ArchiveService:
    """Service for archiving completed tasks of a todo file."""

    def __init__(self, repository: CollectionRepository) -> None:
        self.repository = repository

    def archive_file(self, todo_path: Path) -> ArchiveResult:
        """
        Move completed tasks from ``todo_path`` to its done file.

        Both collections are read and written through their open surfaces when
        they have one, so unsaved edits in either are kept. The done half is
        committed first, then the todo half. If the todo half fails the done
        half is restored, so neither half stays committed. If that restore
        also fails, ArchiveCommitError says which half is on disk.

        Raises:
            StorageError: If either collection cannot be read, or the done half
                cannot be committed (nothing has changed in that case).
            ArchiveCommitError: If only part of the archive was committed, or
                the todo half failed and the done half was restored.
        """
        done_path = done_file_path(todo_path)
        todo_lines = self.repository.load(todo_path)
        done_lines = self.repository.load(done_path)

        result = archive(todo_lines, done_lines)
        if not result.moved:
            logger.info("Nothing to archive in %s", todo_path)
            return result

        # Done half first; a failure here leaves both collections untouched
        try:
            self.repository.store_lines(done_path, result.done, persist=True)
        except StorageError:
            self._restore_surface(done_path, done_lines)
            raise

        try:
            self.repository.store_lines(todo_path, result.remaining, persist=True)
        except StorageError as e:
            logger.warning("Todo half of archive failed for %s: %s", todo_path, e)
            self._restore_surface(todo_path, todo_lines)
            self._rollback_done(todo_path, done_path, done_lines, e)
            raise ArchiveCommitError(
                todo_path,
                done_path,
                todo_committed=False,
                done_committed=False,
                reason=f"{e}; done list restored",
            ) from e

        logger.info(
            "Archived %d task(s) from %s to %s", result.moved_count, todo_path, done_path
        )
        return result

    def _restore_surface(self, path: Path, lines: list[str]) -> None:
        """Put an open surface back to its lines from before the archive."""
        surface = self.repository.surface_for(path)
        if surface is not None:
            surface.set_lines(lines)

    def _rollback_done(
        self,
        todo_path: Path,
        done_path: Path,
        done_lines: list[str],
        cause: StorageError,
    ) -> None:
        """Restore the done collection after the todo half failed."""
        try:
            self.repository.store_lines(done_path, done_lines, persist=True)
        except StorageError as e:
            logger.error("Could not restore %s: %s", done_path, e)
            raise ArchiveCommitError(
                todo_path,
                done_path,
                todo_committed=False,
                done_committed=True,
                reason=f"{cause}; restoring done list failed: {e}",
            ) from e
