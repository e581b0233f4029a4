"""Service for editing individual task lines."""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path

from ..errors import InvalidRowError
from ..models import CapturePosition, Task
from ..repositories import CollectionRepository
from ..utils import to_iso, today

logger = logging.getLogger(__name__)

COMPLETION_PREFIX_PATTERN = re.compile(r"^x \d{4}-\d{2}-\d{2}(?: |$)")
PRIORITY_PREFIX_PATTERN = re.compile(r"^\([A-Za-z]\)\s*")


def toggle_completion(line: str, on: date | None = None) -> str:
    """
    Toggle the completion state of a line.

    A leading ``x YYYY-MM-DD `` marker is removed; otherwise
    ``x <today> `` is prepended.
    """
    if COMPLETION_PREFIX_PATTERN.match(line):
        return COMPLETION_PREFIX_PATTERN.sub("", line, count=1)
    return f"x {to_iso(on or today())} {line}"


def set_priority(line: str, priority: str | None) -> str:
    """
    Set, replace or clear the leading ``(X)`` priority marker.

    ``None`` or an empty string clears it. Completed lines are returned
    unchanged since todo.txt does not prioritise finished tasks.
    """
    if Task.parse(line).completed:
        return line

    has_priority = PRIORITY_PREFIX_PATTERN.match(line) is not None
    if not priority:
        return PRIORITY_PREFIX_PATTERN.sub("", line, count=1) if has_priority else line
    marker = f"({priority.upper()}) "
    if has_priority:
        return PRIORITY_PREFIX_PATTERN.sub(marker, line, count=1)
    return f"{marker}{line}"


def format_capture(text: str, on: date | None = None) -> str:
    """Format captured text as a new task line with a creation date."""
    # A task is exactly one line
    clean_text = " ".join(text.splitlines()).strip()
    return f"{to_iso(on or today())} {clean_text}"


class TaskService:
    """Service for task line mutations within a collection."""

    def __init__(
        self,
        repository: CollectionRepository,
        capture_position: CapturePosition = CapturePosition.TOP,
    ) -> None:
        self.repository = repository
        self.capture_position = capture_position

    def capture(self, path: Path, text: str, on: date | None = None) -> str:
        """
        Add a new dated task to a collection.

        Returns the line that was added.
        """
        new_line = format_capture(text, on)
        lines = self.repository.load(path)
        if self.capture_position is CapturePosition.TOP:
            lines.insert(0, new_line)
        else:
            lines.append(new_line)
        self.repository.store_lines(path, lines)
        logger.info("Task captured in %s: %s", path, new_line)
        return new_line

    def toggle(self, path: Path, row: int, on: date | None = None) -> str:
        """Toggle completion of the task at ``row``. Returns the new line."""
        return self._update_row(path, row, lambda line: toggle_completion(line, on))

    def prioritise(self, path: Path, row: int, priority: str | None) -> str:
        """Set the priority of the task at ``row``. Returns the new line."""
        return self._update_row(path, row, lambda line: set_priority(line, priority))

    def get_line(self, path: Path, row: int) -> str:
        """
        Get the line at ``row``.

        Raises:
            InvalidRowError: If the collection has no such row.
        """
        lines = self.repository.load(path)
        return lines[self._check_row(path, row, lines)]

    def _update_row(self, path: Path, row: int, update) -> str:
        lines = self.repository.load(path)
        self._check_row(path, row, lines)

        new_line = update(lines[row])
        if new_line != lines[row]:
            lines[row] = new_line
            self.repository.store_lines(path, lines)
            logger.info("Task updated in %s (row %d): %s", path, row, new_line)
        return new_line

    def _check_row(self, path: Path, row: int, lines: list[str]) -> int:
        if not 0 <= row < len(lines):
            logger.debug("Row %d out of range for %s", row, path)
            raise InvalidRowError(path, row, len(lines))
        return row
