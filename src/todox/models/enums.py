"""Enums for sort modes and capture placement."""

from enum import Enum


class SortMode(str, Enum):
    """Orderings supported by the sort engine."""

    DATE = "date"
    PRIORITY = "priority"
    PROJECT = "project"
    CONTEXT = "context"
    DUE = "due"

    @classmethod
    def resolve(cls, value: "str | SortMode") -> "SortMode | None":
        """Resolve a mode name (or the legacy ``name`` alias) to a SortMode."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name == "name":
            return cls.DATE
        try:
            return cls(name)
        except ValueError:
            return None


class CapturePosition(str, Enum):
    """Where newly captured tasks are placed in a collection."""

    TOP = "top"
    BOTTOM = "bottom"
