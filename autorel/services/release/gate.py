from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from autorel.core.config import ReleaseConfig
from autorel.core.result import Err, Ok, Result
from autorel.platform.process import which
from autorel.services.release.errors import ReleaseError
from autorel.services.release.model import GateDecision, GateResult, RunContext
from autorel.services.release.ports import VcsPort


def collect_run_context(
    *,
    root: Path,
    config: ReleaseConfig,
    vcs: VcsPort,
    has_token: bool,
    find_tool: Callable[[str], str | None] = which,
) -> RunContext:
    """Gather everything the gate decides on. Read-only."""
    missing = tuple(tool for tool in config.required_tools if find_tool(tool) is None)
    return RunContext(
        branch=vcs.current_branch(),
        has_token=has_token,
        is_clean=vcs.is_clean(),
        git_user_name=vcs.config_value("user.name"),
        git_user_email=vcs.config_value("user.email"),
        build_present=(root / config.build_artifact).is_file(),
        missing_tools=missing,
    )


def check_preconditions(
    ctx: RunContext, *, config: ReleaseConfig
) -> Result[GateResult, ReleaseError]:
    """Decide whether a run may go on.

    Fatal problems are errors; being on another branch is a successful
    skip, since there is simply nothing to publish from there.
    """
    if not ctx.has_token:
        return Err(
            ReleaseError(
                kind="token_missing",
                message=f"{config.token_env} is not set",
                hint=f"Export {config.token_env} or write it to {config.secret_file}",
            )
        )
    if not ctx.build_present:
        return Err(
            ReleaseError(
                kind="build_missing",
                message=f"Package not built ({config.build_artifact} is missing)",
                hint=f"try '{config.registry_tool} run build'",
            )
        )
    if ctx.missing_tools:
        return Err(
            ReleaseError(
                kind="tool_missing",
                message=f"{', '.join(ctx.missing_tools)} is not installed",
            )
        )
    if not ctx.is_clean:
        return Err(
            ReleaseError(
                kind="dirty_tree",
                message="working directory is not clean",
                hint="Commit or stash local changes, then retry.",
            )
        )
    if not ctx.has_identity:
        return Err(
            ReleaseError(
                kind="identity_missing",
                message="git user.name and user.email are not configured",
            )
        )

    if ctx.branch != config.release_branch:
        return Ok(
            GateResult(
                decision=GateDecision.SKIP,
                reason=f"Not in '{config.release_branch}' branch (HEAD is {ctx.branch})",
            )
        )
    return Ok(GateResult(decision=GateDecision.PROCEED))
