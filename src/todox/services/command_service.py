"""Service for the operations a host can trigger."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date
from pathlib import Path
from typing import Any, TypeVar

from ..errors import NoTodoFilesError, PickerUnavailableError, TodoxError
from ..host import HostProtocol, Severity
from ..models import PriorityConfig, SortMode, TodoxConfig
from ..repositories import CollectionRepository, FilesystemLineStore
from ..utils import done_file_path
from .archive_service import ArchiveService
from .sort_service import SortService
from .tag_service import TagService, extract_tags, has_content
from .task_service import TaskService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CommandService:
    """
    Entry points for host-triggered operations.

    Every operation resolves its target collection, runs prompts as
    continuations and reports the outcome through ``host.notify``. Errors
    never escape an operation: they are reported and the operation stops.
    """

    def __init__(
        self,
        config: TodoxConfig,
        host: HostProtocol,
        repository: CollectionRepository | None = None,
    ) -> None:
        self.config = config
        self.host = host
        self.repository = repository or CollectionRepository(
            FilesystemLineStore(), host.get_open_surface_for
        )
        self.task_service = TaskService(self.repository, config.capture_position)
        self.sort_service = SortService(self.repository)
        self.archive_service = ArchiveService(self.repository)
        self.tag_service = TagService(self.repository)

    # --- File resolution ---

    def current_todo_file(self, current: Path | None = None) -> Path | None:
        """
        Find the todo file the user is working in.

        ``current`` wins if it is a configured todo file; otherwise the first
        configured todo file that is open in a surface.
        """
        if current is not None:
            todo_file = self.config.find_todo_file(current)
            if todo_file is not None:
                return todo_file

        for todo_file in self.config.todo_files:
            if self.repository.is_open(todo_file):
                return todo_file
        return None

    # --- Operations ---

    def capture_todo(self, current: Path | None = None, on: date | None = None) -> None:
        """Prompt for a new task and add it to the current (or picked) todo file."""
        todo_files = self.config.todo_files
        if not todo_files:
            self._report(NoTodoFilesError())
            return

        todo_file = self.current_todo_file(current)
        if todo_file is None and len(todo_files) > 1:
            try:
                self.host.prompt_select(
                    todo_files,
                    lambda picked: picked and self._capture_with_file(picked[0], on),
                    title="Select Todo File",
                    display=_file_name,
                )
                return
            except PickerUnavailableError:
                self.host.notify(
                    "Interactive selection is required for todo file selection",
                    Severity.ERROR,
                )

        self._capture_with_file(todo_file or self.config.active_file, on)

    def open_todo(self) -> None:
        """Open a todo file, asking which one when several are configured."""
        todo_files = self.config.todo_files
        if not todo_files:
            self._report(NoTodoFilesError())
            return
        if len(todo_files) == 1:
            self.host.open_path(todo_files[0])
            return

        try:
            self.host.prompt_select(
                todo_files,
                lambda picked: picked and self.host.open_path(picked[0]),
                title="Select Todo File",
                display=_file_name,
            )
        except PickerUnavailableError:
            self.host.notify(
                "Interactive selection is required for todo file selection", Severity.ERROR
            )
            self.host.open_path(self.config.active_file)

    def open_done(self, current: Path | None = None) -> None:
        """Open the done file of the current todo file, or pick one."""
        todo_file = self.current_todo_file(current)
        if todo_file is not None:
            self.host.open_path(done_file_path(todo_file))
            return

        if not self.config.todo_files:
            self._report(NoTodoFilesError())
            return

        done_files = [done_file_path(path) for path in self.config.todo_files]
        try:
            self.host.prompt_select(
                done_files,
                lambda picked: picked and self.host.open_path(picked[0]),
                title="Select Done File",
                display=_file_name,
            )
        except PickerUnavailableError:
            self.host.notify(
                "Interactive selection is required for done file selection", Severity.ERROR
            )

    def move_done_tasks(self, current: Path | None) -> None:
        """Archive completed tasks of the todo file the user is in."""
        todo_file = self.config.find_todo_file(current) if current is not None else None
        if todo_file is None and current is not None and current.suffix == ".txt":
            readable, _ = self.repository.store.validate(current)
            if readable:
                todo_file = current

        if todo_file is None:
            self.host.notify("No todo file is open", Severity.WARNING)
            return

        result = self._run(self.archive_service.archive_file, todo_file)
        if result is None:
            return
        if result.moved_count:
            self.host.notify(
                f"Moved {result.moved_count} done task(s) to {done_file_path(todo_file).name}"
            )
        else:
            self.host.notify("No done tasks to move")

    def toggle_todo_state(self, path: Path, row: int, on: date | None = None) -> None:
        """Toggle completion of the task at ``row``."""
        self._run(self.task_service.toggle, path, row, on)

    def add_priority(self, path: Path, row: int) -> None:
        """Pick a priority for the task at ``row``."""
        line = self._run(self.task_service.get_line, path, row)
        if line is None:
            return

        # None clears the priority
        options: list[PriorityConfig | None] = [*self.config.priorities, None]

        def on_pick(picked: list[PriorityConfig | None] | None) -> None:
            if picked:
                self.apply_priority(path, row, picked[0].id if picked[0] else None)

        try:
            self.host.prompt_select(
                options,
                on_pick,
                title="Select Priority",
                display=lambda p: p.display if p else "None",
            )
        except PickerUnavailableError:
            self.host.notify(
                "Interactive selection is required for priority selection", Severity.ERROR
            )

    def apply_priority(self, path: Path, row: int, priority: str | None) -> None:
        """Set or clear the priority of the task at ``row``; the continuation of add_priority."""
        self._run(self.task_service.prioritise, path, row, priority)

    def add_project_tag(self, path: Path, start: int, end: int) -> None:
        """Pick existing project tags and add them to rows ``[start, end)``."""
        lines = self._run(self.repository.load, path)
        if lines is None:
            return
        if not has_content(lines, start, end):
            self.host.notify("No valid todos selected", Severity.WARNING)
            return

        tags = extract_tags(lines)
        if not tags:
            self.host.notify("No project tags found", Severity.WARNING)
            return

        try:
            self.host.prompt_select(
                tags,
                lambda picked: self.apply_project_tags(path, start, end, picked),
                title="Select Project Tags",
                multi=True,
                display=lambda tag: f"+{tag}",
            )
        except PickerUnavailableError:
            self.host.notify(
                "Interactive selection is required for project tag selection", Severity.ERROR
            )

    def apply_project_tags(
        self, path: Path, start: int, end: int, tags: Sequence[str] | None
    ) -> None:
        """Add ``tags`` to rows ``[start, end)``; the continuation of add_project_tag."""
        if tags is None:
            return
        if not tags:
            self.host.notify("No tags selected", Severity.WARNING)
            return
        lines = self._run(self.repository.load, path)
        if lines is None:
            return
        if not has_content(lines, start, end):
            self.host.notify("No valid todos selected", Severity.WARNING)
            return

        changed = self._run(self.tag_service.tag_rows, path, start, end, tags)
        if changed is None:
            return
        names = ", ".join(f"+{tag.lstrip('+')}" for tag in tags)
        if changed:
            self.host.notify(f"Added project tags: {names}")
        else:
            self.host.notify(f"Selected todos already have {names}", Severity.WARNING)

    def capture(self, todo_file: Path, text: str | None, on: date | None = None) -> None:
        """Add captured text to a todo file; the continuation of capture_todo."""
        if text is None:
            return
        if not text.strip():
            self.host.notify("Empty todo ignored", Severity.WARNING)
            return
        self._run(self.task_service.capture, todo_file, text, on)

    def sort_by(self, path: Path, mode: SortMode | str | None = None) -> None:
        """Sort a collection; defaults to date order."""
        self._run(self.sort_service.sort_file, path, mode or SortMode.DATE)

    # --- Private Methods ---

    def _capture_with_file(self, todo_file: Path | None, on: date | None) -> None:
        if todo_file is None:
            self._report(NoTodoFilesError())
            return
        self.host.prompt_text(
            "New Todo: ", lambda text: self.capture(todo_file, text, on)
        )

    def _run(self, action: Callable[..., T], *args: Any) -> T | None:
        """Run an operation step, reporting a TodoxError instead of raising it."""
        try:
            return action(*args)
        except TodoxError as e:
            self._report(e)
            return None

    def _report(self, error: TodoxError) -> None:
        logger.warning("Operation failed: %s", error)
        self.host.notify(str(error), Severity.ERROR)


def _file_name(path: Path) -> str:
    return path.name
