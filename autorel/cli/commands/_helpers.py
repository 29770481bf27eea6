"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from autorel.core.errors import ErrorCode
from autorel.output.errors import print_release_error

if TYPE_CHECKING:
    from autorel.output.console import ConsoleProtocol
    from autorel.services.release.errors import ReleaseError


def exit_with_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    """Report a fatal release error and exit 1."""
    print_release_error(error, console)
    raise typer.Exit(code=int(ErrorCode.RELEASE_ERROR))


def exit_without_release(
    reason: str,
    console: ConsoleProtocol,
    *,
    strict_exit: bool,
) -> NoReturn:
    """Nothing to publish: explain on stderr, write an empty result line.

    Exits 0 unless ``strict_exit`` asks for a distinct code.
    """
    console.print(f"{reason}; nothing to publish.")
    console.result("")
    code = ErrorCode.NOTHING_TO_PUBLISH if strict_exit else ErrorCode.OK
    raise typer.Exit(code=int(code))
