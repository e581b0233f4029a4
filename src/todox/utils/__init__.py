"""Utility functions."""

from .datetime import to_iso, today
from .paths import done_file_path

__all__ = [
    "done_file_path",
    "to_iso",
    "today",
]
