"""Host environment adapters."""

from .protocol import HostProtocol, SelectCallback, Severity, TextCallback
from .terminal import TerminalHost

__all__ = [
    "HostProtocol",
    "SelectCallback",
    "Severity",
    "TerminalHost",
    "TextCallback",
]
