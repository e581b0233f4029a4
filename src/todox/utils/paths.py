"""Utilities for todo/done file naming."""

from pathlib import Path

DONE_MARKER = ".done"


def done_file_path(todo_file: Path) -> Path:
    """
    Get the done file path for a todo file.

    ``.done`` goes before the last extension of the file name, or at the end
    when the name has no extension. Directory names are never touched.

    Examples:
        todo.txt -> todo.done.txt
        work.todo.txt -> work.todo.done.txt
        tasks -> tasks.done
    """
    name = todo_file.name
    stem, dot, ext = name.rpartition(".")
    if not dot:
        return todo_file.with_name(f"{name}{DONE_MARKER}")
    return todo_file.with_name(f"{stem}{DONE_MARKER}.{ext}")
