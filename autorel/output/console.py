"""Console output abstraction.

Status, warnings and errors go to stderr; stdout is reserved for the run's
single result line (the new tag, or an empty line when nothing was
published) so CI jobs can capture it with ``$(autorel publish)``.

Services depend on ``ConsoleProtocol`` only. ``RichConsole`` is the
production backend, ``MockConsole`` records output for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()  # verbose only
    HINT = auto()
    BOLD = auto()
    RESULT = auto()  # stdout

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a status line to stderr with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def result(self, value: str) -> None:
        """Write the machine-readable result line to stdout."""
        ...


class RichConsole:
    """Console implementation using Rich, writing status to stderr."""

    def __init__(self, *, verbose: bool = False) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self.verbose = verbose
        self._err = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)
        self._out = Console(highlight=False, emoji=False, soft_wrap=True)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "bright_red",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.HINT: "dim",
            Style.BOLD: "bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        if style == Style.DIM and not self.verbose:
            return
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._err.print(message, style=rich_style, markup=False)
        else:
            self._err.print(message, markup=False)

    def success(self, message: str) -> None:
        self._err.print(message, style="green", markup=False)

    def error(self, message: str) -> None:
        self._err.print(f"ERROR: {message}", style="bright_red", markup=False)

    def warning(self, message: str) -> None:
        self._err.print(f"warning: {message}", style="yellow", markup=False)

    def info(self, message: str) -> None:
        self._err.print(message, style="cyan", markup=False)

    def result(self, value: str) -> None:
        self._out.print(value, markup=False)


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
        self.outputs.append(OutputRecord(message, Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"ERROR: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.INFO))

    def result(self, value: str) -> None:
        self.outputs.append(OutputRecord(value, Style.RESULT))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs if o.style != Style.RESULT]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    @property
    def results(self) -> list[str]:
        """Everything written to stdout."""
        return [o.message for o in self.outputs if o.style == Style.RESULT]

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
