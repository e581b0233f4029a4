"""Task line model for todo.txt files."""

import re
from datetime import date

from pydantic import BaseModel, Field

# Leading markers, anchored at the start of the line
COMPLETED_PATTERN = re.compile(r"^x ")
COMPLETION_DATE_PATTERN = re.compile(r"^x (\d{4}-\d{2}-\d{2})(?=\s|$)")
PRIORITY_PATTERN = re.compile(r"^\(([A-Z])\) ")
DATE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})(?=\s|$)")

# Tokens found anywhere in the line
PROJECT_PATTERN = re.compile(r"(?<!\S)\+(\S+)")
CONTEXT_PATTERN = re.compile(r"(?<!\S)@(\S+)")
METADATA_PATTERN = re.compile(r"(?<!\S)([A-Za-z0-9_-]+):(?!//)(\S+)")

DUE_KEY = "due"


class Task(BaseModel):
    """A single todo.txt line and the fields derived from it.

    ``raw_text`` is authoritative. Every other field is a view computed by
    :meth:`parse` and is never used to rebuild the line.
    """

    raw_text: str
    completed: bool = False
    completion_date: date | None = None
    priority: str | None = None
    creation_date: date | None = None
    projects: list[str] = Field(default_factory=list)
    contexts: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def due_date(self) -> date | None:
        """Value of the ``due`` key when it is a valid date."""
        return _parse_date(self.metadata.get(DUE_KEY))

    @property
    def due(self) -> str | None:
        """Raw ``due`` value, only when it is a valid date."""
        if self.due_date is None:
            return None
        return self.metadata[DUE_KEY]

    @property
    def is_blank(self) -> bool:
        return is_blank(self.raw_text)

    @property
    def effective_date(self) -> date | None:
        """Completion date for completed tasks, creation date otherwise."""
        if self.completed:
            return self.completion_date
        return self.creation_date

    @property
    def first_project(self) -> str:
        return self.projects[0] if self.projects else ""

    @property
    def first_context(self) -> str:
        return self.contexts[0] if self.contexts else ""

    def serialize(self) -> str:
        """Return the line this task was parsed from."""
        return self.raw_text

    @classmethod
    def parse(cls, line: str) -> "Task":
        """Parse a line. Never fails; malformed lines have no optional fields."""
        completed = COMPLETED_PATTERN.match(line) is not None
        completion_date: date | None = None
        priority: str | None = None
        prefix_end = 0

        if completed:
            prefix_end = 2
            completion_match = COMPLETION_DATE_PATTERN.match(line)
            if completion_match:
                completion_date = _parse_date(completion_match.group(1))
                prefix_end = _skip_space(line, completion_match.end())
        else:
            priority_match = PRIORITY_PATTERN.match(line)
            if priority_match:
                priority = priority_match.group(1)
                prefix_end = priority_match.end()

        # Creation date follows the completion date or the priority marker
        creation_date: date | None = None
        if not completed or completion_date is not None:
            date_match = DATE_PATTERN.match(line[prefix_end:])
            if date_match:
                creation_date = _parse_date(date_match.group(1))

        metadata: dict[str, str] = {}
        for match in METADATA_PATTERN.finditer(line):
            key, value = match.groups()
            metadata.setdefault(key, value)

        return cls(
            raw_text=line,
            completed=completed,
            completion_date=completion_date,
            priority=priority,
            creation_date=creation_date,
            projects=_unique(PROJECT_PATTERN.findall(line)),
            contexts=_unique(CONTEXT_PATTERN.findall(line)),
            metadata=metadata,
        )


def parse_task(line: str) -> Task:
    """Parse a todo.txt line into a Task."""
    return Task.parse(line)


def is_blank(line: str) -> bool:
    """Return True for empty or whitespace-only lines."""
    return not line.strip()


def is_completed(line: str) -> bool:
    """Return True if the line carries the ``x `` completion marker."""
    return COMPLETED_PATTERN.match(line) is not None


def _parse_date(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD string, returning None for anything else."""
    if value is None or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _skip_space(line: str, pos: int) -> int:
    if pos < len(line) and line[pos] == " ":
        return pos + 1
    return pos


def _unique(values: list[str]) -> list[str]:
    """Drop duplicates while keeping first-seen order."""
    return list(dict.fromkeys(values))
