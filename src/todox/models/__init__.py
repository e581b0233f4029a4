"""Data models."""

from .enums import CapturePosition, SortMode
from .task import Task, is_blank, is_completed, parse_task
from .todox_config import PriorityConfig, TodoxConfig

__all__ = [
    "CapturePosition",
    "PriorityConfig",
    "SortMode",
    "Task",
    "TodoxConfig",
    "is_blank",
    "is_completed",
    "parse_task",
]
