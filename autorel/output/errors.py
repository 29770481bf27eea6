"""Error presentation utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorel.output.console import Style

if TYPE_CHECKING:
    from autorel.output.console import ConsoleProtocol
    from autorel.services.release.errors import ReleaseError

__all__ = ["print_release_error"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a fatal release error, with its hint when there is one."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.HINT)
