"""Protocol for the environment that hosts todox."""

from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from ..repositories import SurfaceProtocol


class Severity(str, Enum):
    """Notification levels."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


TextCallback = Callable[[str | None], None]
SelectCallback = Callable[[list[Any] | None], None]


class HostProtocol(Protocol):
    """Capabilities todox needs from its host (editor, terminal, ...).

    Prompts are continuations: the host calls ``on_done`` once the user has
    answered, either before the prompt method returns or at any later time.
    A ``None`` answer means the user cancelled.
    """

    def get_open_surface_for(self, path: Path) -> SurfaceProtocol | None:
        """Return the editable surface showing ``path``, if one is open."""
        ...

    def prompt_text(self, label: str, on_done: TextCallback) -> None:
        """Ask for a single line of text."""
        ...

    def prompt_select(
        self,
        items: Sequence[Any],
        on_done: SelectCallback,
        *,
        title: str,
        multi: bool = False,
        display: Callable[[Any], str] = str,
    ) -> None:
        """Ask the user to pick one (or, with ``multi``, several) items.

        ``on_done`` receives the picked items as a list.

        Raises:
            PickerUnavailableError: If the host cannot show a selection.
        """
        ...

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Show a message to the user. Never raises."""
        ...

    def open_path(self, path: Path) -> None:
        """Open a collection for the user to edit."""
        ...
