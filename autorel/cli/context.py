from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import typer

from autorel.core.config import ReleaseConfig, load_config_or_default
from autorel.core.errors import ErrorCode
from autorel.core.result import Err, Ok
from autorel.output.console import ConsoleProtocol, RichConsole
from autorel.services.release.credentials import Credential, inject_token, resolve_token


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: ReleaseConfig
    console: ConsoleProtocol
    credential: Credential | None
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def has_token(self) -> bool:
        return self.credential is not None


def build_context(
    *,
    root: Path | None,
    verbose: bool = False,
    **overrides: str | None,
) -> CLIContext:
    """Resolve the repository root, config and token once per invocation."""
    console = RichConsole(verbose=verbose)
    try:
        resolved = (root or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --root: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USAGE_ERROR))

    loaded = load_config_or_default(resolved)
    if isinstance(loaded, Err):
        typer.echo(f"error: {loaded.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USAGE_ERROR))
    config = loaded.value.with_overrides(**overrides)

    base_env = dict(os.environ)
    token = resolve_token(
        env=base_env,
        token_env=config.token_env,
        secret_file=config.secret_path(),
    )
    credential: Credential | None = None
    env: Mapping[str, str] = base_env
    if isinstance(token, Ok):
        credential = token.value
        env = inject_token(base_env, token_env=config.token_env, credential=credential)

    return CLIContext(
        root=resolved,
        config=config,
        console=console,
        credential=credential,
        env=env,
    )
