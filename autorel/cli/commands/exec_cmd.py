"""Run a command with the registry token injected into its environment."""

from __future__ import annotations

from pathlib import Path

import typer

from autorel.cli.commands._helpers import exit_with_error
from autorel.cli.context import build_context
from autorel.core.errors import ErrorCode
from autorel.core.result import Err
from autorel.platform.process import run_passthrough
from autorel.services.release.errors import ReleaseError


def exec_with_token(
    command: list[str] = typer.Argument(..., help="Command to run, after `--`."),
    root: Path | None = typer.Option(None, "--root", help="Working directory for the command."),
) -> None:
    """Run COMMAND with the auth token set, e.g. `autorel exec -- npm ci`."""
    ctx = build_context(root=root)
    if ctx.credential is None:
        exit_with_error(
            ReleaseError(
                kind="token_missing",
                message=f"{ctx.config.token_env} is not set",
                hint=f"Export {ctx.config.token_env} or write the token to {ctx.config.secret_path()}",
            ),
            ctx.console,
        )

    result = run_passthrough(command, cwd=ctx.root, env=ctx.env)
    if isinstance(result, Err):
        if result.error.returncode < 0:
            ctx.console.error(result.error.stderr or str(result.error))
            raise typer.Exit(code=int(ErrorCode.RELEASE_ERROR))
        raise typer.Exit(code=result.error.returncode)
