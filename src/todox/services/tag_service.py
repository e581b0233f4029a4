"""Service for project tags."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from ..models import is_blank
from ..models.task import (
    COMPLETION_DATE_PATTERN,
    DATE_PATTERN,
    PRIORITY_PATTERN,
    PROJECT_PATTERN,
)
from ..repositories import CollectionRepository

logger = logging.getLogger(__name__)

# Tokens that end the description: contexts and key:value metadata
FIELD_TOKEN_PATTERN = re.compile(r"(?<!\S)(?:@\S|[A-Za-z0-9_-]+:(?!//)\S)")


def extract_tags(lines: Iterable[str]) -> list[str]:
    """Return the distinct project tags in ``lines``, alphabetically."""
    seen: dict[str, None] = {}
    for line in lines:
        for tag in PROJECT_PATTERN.findall(line):
            seen.setdefault(tag, None)
    return sorted(seen)


def _description_start(line: str) -> int:
    """Offset just past the leading completion/priority/date markers."""
    pos = 0
    completion = COMPLETION_DATE_PATTERN.match(line)
    if completion:
        pos = completion.end()
    else:
        priority = PRIORITY_PATTERN.match(line)
        if priority:
            pos = priority.end()

    rest = line[pos:].lstrip(" ")
    pos = len(line) - len(rest)
    created = DATE_PATTERN.match(rest)
    if created:
        pos += created.end()
    return pos


def insert_tags(line: str, tags: Iterable[str]) -> str:
    """
    Insert ``+tag`` tokens into a line.

    Tags already on the line are skipped. The new tags go before the first
    context or metadata token after the leading markers, or at the end of the
    line. Only the whitespace at the insertion point is normalised.
    """
    if is_blank(line):
        return line

    existing = set(PROJECT_PATTERN.findall(line))
    new_tags: list[str] = []
    for tag in tags:
        tag = tag.lstrip("+")
        if tag and tag not in existing and tag not in new_tags:
            new_tags.append(tag)

    if not new_tags:
        return line

    block = " ".join(f"+{tag}" for tag in new_tags)
    match = FIELD_TOKEN_PATTERN.search(line, _description_start(line))
    if match is None:
        return f"{line.rstrip()} {block}"

    before = line[: match.start()].rstrip()
    after = line[match.start() :]
    if not before:
        return f"{block} {after}"
    return f"{before} {block} {after}"


def apply_tags(lines: Sequence[str], start: int, end: int, tags: Sequence[str]) -> list[str]:
    """Insert tags into the non-blank lines in ``[start, end)``."""
    result = list(lines)
    for index in range(max(start, 0), min(end, len(result))):
        result[index] = insert_tags(result[index], tags)
    return result


def has_content(lines: Sequence[str], start: int, end: int) -> bool:
    """Return True if any line in ``[start, end)`` is a task."""
    return any(not is_blank(line) for line in lines[max(start, 0) : end])


class TagService:
    """Service for tagging lines of a collection."""

    def __init__(self, repository: CollectionRepository) -> None:
        self.repository = repository

    def available_tags(self, path: Path) -> list[str]:
        """Project tags already used in a collection."""
        return extract_tags(self.repository.load(path))

    def tag_rows(self, path: Path, start: int, end: int, tags: Sequence[str]) -> bool:
        """
        Add tags to rows ``[start, end)`` of a collection and store it.

        Returns:
            True if any line changed, False if every row is blank or already
            carries the tags (nothing is written then).
        """
        lines = self.repository.load(path)
        updated = apply_tags(lines, start, end, tags)
        if updated == lines:
            logger.debug("Rows %d-%d of %s already tagged", start, end, path)
            return False
        self.repository.store_lines(path, updated)
        logger.info("Tagged rows %d-%d of %s with %s", start, end, path, ", ".join(tags))
        return True
