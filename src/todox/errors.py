"""Exceptions raised by todox operations."""

from pathlib import Path


class TodoxError(Exception):
    """Base exception for todox errors."""

    pass


class StorageError(TodoxError):
    """Raised when a collection cannot be read or written."""

    def __init__(self, path: Path, action: str, reason: str) -> None:
        self.path = path
        self.action = action
        self.reason = reason
        super().__init__(f"Failed to {action} {path}: {reason}")


class InvalidSortModeError(TodoxError, ValueError):
    """Raised when an unknown sort mode is requested."""

    def __init__(self, mode: str) -> None:
        self.mode = mode
        super().__init__(f"Unknown sort type: {mode}")


class NoTodoFilesError(TodoxError):
    """Raised when an operation needs configured todo files but there are none."""

    def __init__(self) -> None:
        super().__init__("No todo files configured")


class PickerUnavailableError(TodoxError):
    """Raised by a host that cannot present a selection prompt."""

    pass


class ArchiveCommitError(TodoxError):
    """Raised when the two halves of an archive could not be committed together.

    The flags record what is durably on disk so the user can reconcile.
    """

    def __init__(
        self,
        todo_path: Path,
        done_path: Path,
        *,
        todo_committed: bool,
        done_committed: bool,
        reason: str,
    ) -> None:
        self.todo_path = todo_path
        self.done_path = done_path
        self.todo_committed = todo_committed
        self.done_committed = done_committed
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        todo_state = "updated" if self.todo_committed else "not updated"
        done_state = "updated" if self.done_committed else "not updated"
        return (
            f"Archive incomplete: todo list {self.todo_path} {todo_state}, "
            f"done list {self.done_path} {done_state} ({self.reason})"
        )


class InvalidRowError(TodoxError, IndexError):
    """Raised when a row number does not exist in a collection."""

    def __init__(self, path: Path, row: int, line_count: int) -> None:
        self.path = path
        self.row = row
        self.line_count = line_count
        super().__init__(f"Row {row + 1} is out of range for {path} ({line_count} lines)")
