"""Terminal host used by the todox CLI."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from ..cli import output
from ..errors import PickerUnavailableError
from ..repositories import SurfaceProtocol
from .protocol import SelectCallback, Severity, TextCallback

logger = logging.getLogger(__name__)


class TerminalHost:
    """
    Host backed by a plain terminal session.

    Nothing is ever open in a surface, so every collection is read and written
    on disk. Prompts are answered synchronously through stdin; when stdin is
    not a TTY text prompts are cancelled and selection is unavailable.
    """

    def __init__(self, interactive: bool | None = None) -> None:
        if interactive is None:
            interactive = sys.stdin.isatty()
        self.interactive = interactive
        self.error_count = 0

    def get_open_surface_for(self, path: Path) -> SurfaceProtocol | None:  # noqa: ARG002
        return None

    def prompt_text(self, label: str, on_done: TextCallback) -> None:
        """Read one line from stdin; EOF or a non-interactive session cancels."""
        if not self.interactive:
            on_done(None)
            return
        try:
            answer = input(label)
        except EOFError:
            answer = None
        on_done(answer)

    def prompt_select(
        self,
        items: Sequence[Any],
        on_done: SelectCallback,
        *,
        title: str,
        multi: bool = False,
        display: Callable[[Any], str] = str,
    ) -> None:
        """Numbered menu. Multi-select takes space or comma separated numbers."""
        if not self.interactive:
            raise PickerUnavailableError("Interactive selection needs a terminal")

        output.header(title)
        for index, item in enumerate(items, start=1):
            print(f"  {index}. {display(item)}")

        hint = "numbers" if multi else "number"
        try:
            answer = input(f"Select {hint} (empty to cancel): ").strip()
        except EOFError:
            answer = ""
        if not answer:
            on_done(None)
            return

        picked: list[Any] = []
        for token in answer.replace(",", " ").split():
            if token.isdigit() and 1 <= int(token) <= len(items):
                picked.append(items[int(token) - 1])
            if picked and not multi:
                break
        on_done(picked or None)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        if severity is Severity.ERROR:
            self.error_count += 1
            output.error(message)
        elif severity is Severity.WARNING:
            output.warning(message)
        else:
            output.success(message)

    def open_path(self, path: Path) -> None:
        """Open a file in the user's editor."""
        if not self._run_editor(path):
            self.notify(f"Could not open {path} in an editor", Severity.ERROR)

    def _run_editor(self, filepath: Path) -> bool:
        """Run the user's editor on a file."""
        # Try $EDITOR, then common fallbacks
        editor = os.environ.get("EDITOR") or os.environ.get("VISUAL")
        if not editor:
            for candidate in ["nvim", "vim", "vi", "nano"]:
                if shutil.which(candidate) is not None:
                    editor = candidate
                    break
            else:
                return False

        # Handle editors with arguments (e.g., "code --wait")
        editor_cmd = [*shlex.split(editor), str(filepath.absolute())]
        logger.debug("Running editor: %s", editor_cmd)
        try:
            result = subprocess.run(editor_cmd, check=False)
            return result.returncode == 0
        except FileNotFoundError:
            return False
