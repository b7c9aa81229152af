"""Console output abstraction.

Services print through ConsoleProtocol so the release flow never depends on
Rich directly. RichConsole renders the `[INFO]` / `[SUCCESS]` / `[WARNING]`
/ `[ERROR]` prefixes in color; MockConsole records everything for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()


_PREFIXES = {
    Style.INFO: "[INFO]",
    Style.SUCCESS: "[SUCCESS]",
    Style.WARNING: "[WARNING]",
    Style.ERROR: "[ERROR]",
}


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling.

        Args:
            message: The text to print (never interpreted as markup)
            style: The style to apply
        """
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def newline(self) -> None: ...


class RichConsole:
    """Console implementation using Rich.

    Messages are passed as Text so that commit subjects or tool output
    containing square brackets are printed verbatim.
    """

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console(highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "blue",
            Style.DIM: "dim",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        from rich.text import Text

        self._console.print(Text(message, style=self._style_map.get(style, "")))

    def success(self, message: str) -> None:
        self._prefixed(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._prefixed(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._prefixed(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._prefixed(Style.INFO, message)

    def newline(self) -> None:
        self._console.print()

    def _prefixed(self, style: Style, message: str) -> None:
        from rich.text import Text

        line = Text.assemble((_PREFIXES[style], self._style_map[style]), " ", message)
        self._console.print(line)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._prefixed(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._prefixed(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._prefixed(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._prefixed(Style.INFO, message)

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    def _prefixed(self, style: Style, message: str) -> None:
        self.outputs.append(OutputRecord(f"{_PREFIXES[style]} {message}", style))

    # Test helpers

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """All output as a single newline-separated string."""
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]
