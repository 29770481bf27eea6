from __future__ import annotations

from pathlib import Path

import typer

from autorel.cli.commands._helpers import exit_with_error, exit_without_release
from autorel.cli.context import CLIContext, build_context
from autorel.core.result import Err
from autorel.git.repository import Repository
from autorel.output.console import Style
from autorel.services.release.gate import check_preconditions, collect_run_context
from autorel.services.release.manifest import open_manifest
from autorel.services.release.model import GateDecision, ReleasePlan, Skipped
from autorel.services.release.registry import NpmRegistry
from autorel.services.release.service import ReleasePorts, plan_release, run_release


_ROOT_OPTION = typer.Option(None, "--root", help="Package root (defaults to the current directory).")
_BRANCH_OPTION = typer.Option(None, "--branch", help="Release branch (default: main).")
_MANIFEST_OPTION = typer.Option(None, "--manifest", help="Manifest path relative to the root.")
_BUILD_OPTION = typer.Option(None, "--build", help="Build artifact that must exist.")
_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Echo external commands.")


def _context(
    *,
    root: Path | None,
    branch: str | None,
    manifest: str | None,
    build: str | None,
    verbose: bool,
) -> CLIContext:
    return build_context(
        root=root,
        verbose=verbose,
        release_branch=branch,
        manifest=manifest,
        build_artifact=build,
    )


def _ports(ctx: CLIContext, repo: Repository) -> ReleasePorts:
    return ReleasePorts(
        vcs=repo,
        registry=NpmRegistry(
            root=ctx.root,
            env=ctx.env,
            console=ctx.console,
            tool=ctx.config.registry_tool,
        ),
        manifest=open_manifest(root=ctx.root, config=ctx.config),
    )


def publish(
    root: Path | None = _ROOT_OPTION,
    branch: str | None = _BRANCH_OPTION,
    manifest: str | None = _MANIFEST_OPTION,
    build: str | None = _BUILD_OPTION,
    dry_run: bool = typer.Option(False, "--dry-run", help="Decide, but do not bump/publish/push."),
    strict_exit: bool = typer.Option(
        False,
        "--strict-exit",
        help="Exit 3 instead of 0 when there is nothing to publish.",
    ),
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Publish a new release if the packed contents changed.

    Prints the new tag on stdout, or an empty line when nothing was published
    (including with --dry-run).
    """
    ctx = _context(root=root, branch=branch, manifest=manifest, build=build, verbose=verbose)
    repo = Repository(ctx.root)
    run_ctx = collect_run_context(
        root=ctx.root, config=ctx.config, vcs=repo, has_token=ctx.has_token
    )

    outcome = run_release(
        run_ctx,
        config=ctx.config,
        ports=_ports(ctx, repo),
        console=ctx.console,
        dry_run=dry_run,
    )
    if isinstance(outcome, Err):
        exit_with_error(outcome.error, ctx.console)

    result = outcome.value
    if isinstance(result, Skipped):
        exit_without_release(result.reason, ctx.console, strict_exit=strict_exit)

    if result.dry_run:
        # No tag exists yet, so the result line stays empty.
        ctx.console.info(f"dry-run: would release {result.tag}")
        ctx.console.result("")
        return
    ctx.console.result(result.tag)


def plan(
    root: Path | None = _ROOT_OPTION,
    branch: str | None = _BRANCH_OPTION,
    manifest: str | None = _MANIFEST_OPTION,
    build: str | None = _BUILD_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Show what `publish` would do, without changing anything.

    The next tag is reported on stderr; stdout gets an empty line.
    """
    ctx = _context(root=root, branch=branch, manifest=manifest, build=build, verbose=verbose)
    repo = Repository(ctx.root)
    run_ctx = collect_run_context(
        root=ctx.root, config=ctx.config, vcs=repo, has_token=ctx.has_token
    )

    gate = check_preconditions(run_ctx, config=ctx.config)
    if isinstance(gate, Err):
        exit_with_error(gate.error, ctx.console)
    if gate.value.decision is GateDecision.SKIP:
        exit_without_release(gate.value.reason or "skipped", ctx.console, strict_exit=False)

    planned = plan_release(config=ctx.config, ports=_ports(ctx, repo), console=ctx.console)
    if isinstance(planned, Err):
        exit_with_error(planned.error, ctx.console)
    if isinstance(planned.value, Skipped):
        exit_without_release(planned.value.reason, ctx.console, strict_exit=False)

    _print_plan(ctx, planned.value)
    ctx.console.result("")


def _print_plan(ctx: CLIContext, rp: ReleasePlan) -> None:
    console = ctx.console
    console.print("")
    console.print(f"package:      {rp.package.spec}", Style.BOLD)
    console.print(f"last release: {rp.last_release_sha}")
    console.print(f"commits:      {len(rp.summaries)}")
    for summary in rp.summaries:
        console.print(f"  - {summary}", Style.DIM)
    console.print(f"bump:         {rp.bump}")
    console.info(f"next:         {rp.package.version} -> {rp.next_version}")
