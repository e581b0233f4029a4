"""Filesystem-based line storage for todo collections."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from ..errors import StorageError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class FilesystemLineStore:
    """
    Line store for todo.txt files on disk.

    Files are UTF-8 with one newline-terminated line per task. Writes go to a
    temporary file in the same directory which then replaces the target, so a
    failed write never leaves a half-written collection behind.
    """

    def read_lines(self, path: Path) -> list[str]:
        """Read all lines of a file. A missing file reads as empty."""
        if not path.exists():
            logger.debug("read_lines: %s does not exist, treating as empty", path)
            return []
        try:
            with path.open(encoding=ENCODING, newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(path, "read", str(e)) from e
        if not text:
            return []
        # Only "\n" ends a line; CRLF endings lose their "\r", a lone "\r" stays in the text
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return [line.removesuffix("\r") for line in lines]

    def write_lines(self, path: Path, lines: Sequence[str]) -> None:
        """Atomically replace a file with the given lines."""
        content = "".join(f"{line}\n" for line in lines)
        tmp_path: Path | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding=ENCODING,
                delete=False,
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp",
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
        except OSError as e:
            raise StorageError(path, "write", str(e)) from e
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
        logger.debug("Wrote %d lines to %s", len(lines), path)

    def validate(self, path: Path) -> tuple[bool, str | None]:
        """Check that a collection file is readable.

        Returns:
            (True, None) if the file exists and can be read, otherwise
            (False, reason).
        """
        if not path.is_file():
            return (False, f"{path} is not a file")
        if not os.access(path, os.R_OK):
            return (False, f"{path} is not readable")
        return (True, None)
