"""Service for sorting todo collections."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from pathlib import Path
from typing import Any

from ..errors import InvalidSortModeError
from ..models import SortMode, Task, is_blank
from ..repositories import CollectionRepository

logger = logging.getLogger(__name__)

SEPARATOR = ""

# --- Sort keys ---
#
# Each key orders lines ascending; ``sorted`` is stable so equal keys keep
# their input order.


def date_sort_key(task: Task) -> tuple[Any, ...]:
    """Newest effective date first, dated before undated, then raw text."""
    effective = task.effective_date
    if effective is not None:
        return (0, -effective.toordinal(), "")
    return (1, 0, task.raw_text)


def project_sort_key(task: Task) -> str:
    return task.first_project


def context_sort_key(task: Task) -> str:
    return task.first_context


def due_sort_key(task: Task) -> tuple[int, date | str]:
    """Earliest due date first; lines without one last, by raw text."""
    due_date = task.due_date
    if due_date is not None:
        return (0, due_date)
    return (1, task.raw_text)


# --- Group keys ---


def project_group_key(task: Task) -> str:
    return task.first_project


def context_group_key(task: Task) -> str:
    return task.first_context


def due_group_key(task: Task) -> str:
    return task.due or ""


SortKey = Callable[[Task], Any]
GroupKey = Callable[[Task], str]

GROUPED_SORTS: dict[SortMode, tuple[SortKey, GroupKey]] = {
    SortMode.PROJECT: (project_sort_key, project_group_key),
    SortMode.CONTEXT: (context_sort_key, context_group_key),
    SortMode.DUE: (due_sort_key, due_group_key),
}


def _parse_content(lines: Iterable[str]) -> list[Task]:
    """Parse every non-blank line; blank lines never take part in sorting."""
    return [Task.parse(line) for line in lines if not is_blank(line)]


def with_separators(tasks: Sequence[Task], group_key: GroupKey) -> list[str]:
    """
    Join sorted tasks into lines, separating runs of differing group key.

    A single blank line goes before every task whose group differs from the
    previously emitted task's group. Nothing before the first task or after
    the last one.
    """
    result: list[str] = []
    current_group: str | None = None
    for task in tasks:
        group = group_key(task)
        if result and group != current_group:
            result.append(SEPARATOR)
        result.append(task.raw_text)
        current_group = group
    return result


def sort_by_date(lines: Iterable[str]) -> list[str]:
    """Sort by completion/creation date, most recent first, no grouping."""
    tasks = sorted(_parse_content(lines), key=date_sort_key)
    return [task.raw_text for task in tasks]


def sort_by_priority(lines: Iterable[str]) -> list[str]:
    """
    Sort by priority in three tiers.

    Unprioritised tasks come first in their input order and run straight into
    the priority groups. Each priority letter forms a group whose lines are
    sorted lexically, with one blank line between letters. Completed tasks
    come last, in input order, after a blank line.
    """
    unprioritised: list[str] = []
    by_letter: dict[str, list[str]] = {}
    completed: list[str] = []

    for task in _parse_content(lines):
        if task.completed:
            completed.append(task.raw_text)
        elif task.priority is None:
            unprioritised.append(task.raw_text)
        else:
            by_letter.setdefault(task.priority, []).append(task.raw_text)

    result = list(unprioritised)
    for index, letter in enumerate(sorted(by_letter)):
        if index > 0:
            result.append(SEPARATOR)
        result.extend(sorted(by_letter[letter]))

    if completed:
        if result:
            result.append(SEPARATOR)
        result.extend(completed)
    return result


def sort_grouped(lines: Iterable[str], sort_key: SortKey, group_key: GroupKey) -> list[str]:
    """Stable sort by ``sort_key`` with separators between groups."""
    tasks = sorted(_parse_content(lines), key=sort_key)
    return with_separators(tasks, group_key)


def sort_lines(lines: Sequence[str], mode: SortMode | str) -> list[str]:
    """
    Sort a collection and return the new line sequence.

    The input is never mutated. Blank input lines are dropped; grouped modes
    insert their own separators.

    Raises:
        InvalidSortModeError: If ``mode`` is not a known sort mode.
    """
    resolved = SortMode.resolve(mode)
    if resolved is None:
        raise InvalidSortModeError(str(mode))

    if resolved is SortMode.DATE:
        return sort_by_date(lines)
    if resolved is SortMode.PRIORITY:
        return sort_by_priority(lines)

    sort_key, group_key = GROUPED_SORTS[resolved]
    return sort_grouped(lines, sort_key, group_key)


class SortService:
    """Service for sorting collections in place."""

    def __init__(self, repository: CollectionRepository) -> None:
        self.repository = repository

    def sort_file(self, path: Path, mode: SortMode | str) -> list[str]:
        """
        Sort a collection and store the result.

        Validates the mode before touching storage, so an unknown mode leaves
        the collection untouched.
        """
        resolved = SortMode.resolve(mode)
        if resolved is None:
            raise InvalidSortModeError(str(mode))

        lines = self.repository.load(path)
        sorted_lines = sort_lines(lines, resolved)
        self.repository.store_lines(path, sorted_lines)
        logger.info("Sorted %s by %s (%d lines)", path, resolved.value, len(sorted_lines))
        return sorted_lines
