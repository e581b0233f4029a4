"""Storage protocols for todo collections."""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class LineStoreProtocol(Protocol):
    """Whole-file, line-oriented storage.

    Implementations raise ``StorageError`` when a file cannot be read or
    written; they never let an ``OSError`` escape.
    """

    def read_lines(self, path: Path) -> list[str]:
        """Read every line of a collection.

        Args:
            path: The collection file.

        Returns:
            The lines without their terminators. A missing file is an empty
            collection.
        """
        ...

    def write_lines(self, path: Path, lines: Sequence[str]) -> None:
        """Replace the contents of a collection.

        Args:
            path: The collection file.
            lines: Lines to write, each terminated by a newline on disk.
        """
        ...

    def validate(self, path: Path) -> tuple[bool, str | None]:
        """Check that a collection file exists and is readable.

        Returns:
            (True, None) if readable, otherwise (False, reason).
        """
        ...


class SurfaceProtocol(Protocol):
    """An in-memory editable view of a collection (e.g. an editor buffer).

    When a collection is open in a surface, mutations go through the surface
    and persistence is the surface's own save operation.
    """

    def get_lines(self) -> list[str]:
        """Return the current lines of the surface."""
        ...

    def set_lines(self, lines: Sequence[str]) -> None:
        """Replace all lines of the surface."""
        ...

    def save(self) -> None:
        """Persist the surface to its file.

        Raises:
            StorageError: If the surface could not be written.
        """
        ...
