"""Configuration models for todox.yml."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .enums import CapturePosition

DEFAULT_TODO_FILE = "~/Documents/todo.txt"


class PriorityConfig(BaseModel):
    """A selectable priority letter and its display label."""

    id: str = Field(..., min_length=1, max_length=1)
    label: str = Field(..., min_length=1, description="Display label")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate priority ID is a single uppercase letter."""
        if not ("A" <= v <= "Z"):
            raise ValueError(f"Priority '{v}' must be a single uppercase letter A-Z")
        return v

    @property
    def display(self) -> str:
        return f"({self.id}) {self.label}"


def _default_priorities() -> list[PriorityConfig]:
    return [
        PriorityConfig(id="A", label="Today"),
        PriorityConfig(id="B", label="This Week"),
        PriorityConfig(id="C", label="This Month"),
        PriorityConfig(id="D", label="Later"),
        PriorityConfig(id="E", label="Never"),
    ]


class TodoxConfig(BaseModel):
    """Root configuration from todox.yml."""

    version: int = 1
    todo_files: list[Path] = Field(default_factory=lambda: [Path(DEFAULT_TODO_FILE).expanduser()])
    capture_position: CapturePosition = CapturePosition.TOP
    priorities: list[PriorityConfig] = Field(default_factory=_default_priorities)

    @field_validator("todo_files")
    @classmethod
    def validate_todo_files(cls, v: list[Path]) -> list[Path]:
        """Expand user paths and reject duplicates."""
        expanded = [path.expanduser() for path in v]
        if len(expanded) != len(set(expanded)):
            raise ValueError("todo_files must be unique")
        return expanded

    @field_validator("priorities")
    @classmethod
    def validate_priorities(cls, v: list[PriorityConfig]) -> list[PriorityConfig]:
        """Validate priority letters are unique."""
        ids = [p.id for p in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Priority IDs must be unique")
        return v

    @property
    def active_file(self) -> Path | None:
        """The fallback todo file (first configured)."""
        return self.todo_files[0] if self.todo_files else None

    def find_todo_file(self, path: Path) -> Path | None:
        """Return the configured todo file that ``path`` refers to, if any."""
        target = path.expanduser().resolve()
        for todo_file in self.todo_files:
            if todo_file.resolve() == target:
                return todo_file
        return None

    def is_todo_file(self, path: Path) -> bool:
        return self.find_todo_file(path) is not None

    def get_priority(self, priority_id: str) -> PriorityConfig | None:
        """Get priority config by ID."""
        for p in self.priorities:
            if p.id == priority_id:
                return p
        return None

    @classmethod
    def default(cls) -> "TodoxConfig":
        """Return default configuration."""
        return cls()
