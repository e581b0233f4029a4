"""Service layer for business logic."""

from .archive_service import ArchiveResult, ArchiveService, archive
from .command_service import CommandService
from .config_service import ConfigService
from .sort_service import SortService, sort_lines
from .tag_service import TagService, extract_tags, insert_tags
from .task_service import TaskService, format_capture, set_priority, toggle_completion

__all__ = [
    "ArchiveResult",
    "ArchiveService",
    "CommandService",
    "ConfigService",
    "SortService",
    "TagService",
    "TaskService",
    "archive",
    "extract_tags",
    "format_capture",
    "insert_tags",
    "set_priority",
    "sort_lines",
    "toggle_completion",
]
