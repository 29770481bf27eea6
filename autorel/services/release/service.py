"""Release decision engine.

One run moves strictly forward:

    gate -> (skip: wrong branch | change detection)
         -> (skip: unchanged | classify) -> bump -> publish -> push

Nothing is mutated before ``apply_release``; every earlier step is a read.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from autorel.core.config import ReleaseConfig
from autorel.core.result import Err, Ok, Result
from autorel.output.console import ConsoleProtocol, Style
from autorel.services.release.classify import bump_for_counts, count_commits
from autorel.services.release.detect import detect_change
from autorel.services.release.errors import ReleaseError
from autorel.services.release.gate import check_preconditions
from autorel.services.release.manifest import find_version_line, read_package
from autorel.services.release.model import (
    GateDecision,
    Published,
    ReleaseOutcome,
    ReleasePlan,
    RunContext,
    Skipped,
)
from autorel.services.release.ports import ManifestPort, RegistryPort, VcsPort
from autorel.services.release.semver import SemVer, parse_version


@dataclass(frozen=True, slots=True)
class ReleasePorts:
    vcs: VcsPort
    registry: RegistryPort
    manifest: ManifestPort


def _unchanged_reason(config: ReleaseConfig) -> str:
    build_dir = PurePosixPath(config.build_artifact).parent.as_posix()
    if build_dir in ("", "."):
        return "package is unchanged from latest release"
    return f"{build_dir}/ is unchanged from latest release"


def plan_release(
    *,
    config: ReleaseConfig,
    ports: ReleasePorts,
    console: ConsoleProtocol,
) -> Result[ReleasePlan | Skipped, ReleaseError]:
    """Run change detection and classification without touching anything."""
    package = read_package(ports.manifest)
    if isinstance(package, Err):
        return package
    pkg = package.value
    console.print(f"{pkg.name}: {pkg.version}")

    fingerprints = detect_change(pkg, registry=ports.registry, tool=config.registry_tool)
    if isinstance(fingerprints, Err):
        return fingerprints
    pair = fingerprints.value
    console.print(f"Remote shasum for {pkg.version}: {pair.remote}")
    console.print(f"  Local shasum at {pkg.version}: {pair.local}")

    if not pair.changed:
        return Ok(Skipped(_unchanged_reason(config)))

    text = ports.manifest.text()
    if isinstance(text, Err):
        return text
    line = find_version_line(text.value)
    if line is None:
        return Err(
            ReleaseError(
                kind="version_line_missing",
                message=f"Couldn't find version line number in {config.manifest}",
            )
        )
    console.print(f"version number is on line {line} of {config.manifest}")

    blamed = ports.vcs.blame_line(config.manifest, line)
    if isinstance(blamed, Err):
        return Err(
            ReleaseError(
                kind="attribution_failed",
                message=f"Couldn't get commit hash of last change to 'version' in {config.manifest}",
                hint=blamed.error.message,
            )
        )
    last_sha = blamed.value
    console.print(f"git blame for line {line} shows version last changed at {last_sha}")

    summaries = ports.vcs.log_summaries(last_sha)
    if isinstance(summaries, Err):
        return Err(
            ReleaseError(
                kind="attribution_failed",
                message=f"Couldn't list commits since {last_sha}",
                hint=summaries.error.message,
            )
        )

    counts = count_commits(summaries.value)
    console.print(f"Num 'BREAKING' commits since last release: {counts.breaking}")
    if not counts.breaking:
        console.print(f"Num 'feat:' or 'feat(*):' commits since last release: {counts.feat}")

    return Ok(
        ReleasePlan(
            package=pkg,
            fingerprints=pair,
            version_line=line,
            last_release_sha=last_sha,
            summaries=tuple(summaries.value),
            counts=counts,
            bump=bump_for_counts(counts),
        )
    )


def _reported_version(output: str, *, expected: SemVer) -> SemVer:
    lines = [ln for ln in output.splitlines() if ln.strip()]
    reported = parse_version(lines[-1]) if lines else None
    return reported if reported is not None else expected


def apply_release(
    plan: ReleasePlan,
    *,
    config: ReleaseConfig,
    ports: ReleasePorts,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[Published, ReleaseError]:
    """Bump, publish, push.

    A push failure after a successful publish is reported but not undone:
    the registry then holds a version the remote history does not.
    """
    tool = config.registry_tool
    console.print(f"Bumping {plan.bump} version and committing change to {config.manifest}...")
    if dry_run:
        console.print(f"dry-run: {tool} version {plan.bump} -m {config.commit_message!r}", Style.INFO)
        console.print(f"dry-run: {tool} publish", Style.INFO)
        console.print("dry-run: git push --follow-tags", Style.INFO)
        return Ok(Published(version=plan.next_version, dry_run=True, plan=plan))

    bumped = ports.registry.version_bump(plan.bump, config.commit_message)
    if isinstance(bumped, Err):
        return bumped
    version = _reported_version(bumped.value, expected=plan.next_version)
    if version != plan.next_version:
        console.warning(f"{tool} reported {version}, expected {plan.next_version}")

    console.print(f"Publishing {plan.package.name} to registry...")
    published = ports.registry.publish()
    if isinstance(published, Err):
        return published

    console.print("Pushing version bump commit (with tags)...")
    pushed = ports.vcs.push_follow_tags()
    if isinstance(pushed, Err):
        return Err(
            ReleaseError(
                kind="push_failed",
                message=f"published {plan.package.name}@{version} but git push failed",
                hint=f"Push the release commit and tag {version.to_tag()} by hand: "
                f"git push --follow-tags ({pushed.error.message})",
            )
        )

    console.success("OK.")
    return Ok(Published(version=version, plan=plan))


def run_release(
    ctx: RunContext,
    *,
    config: ReleaseConfig,
    ports: ReleasePorts,
    console: ConsoleProtocol,
    dry_run: bool = False,
) -> Result[ReleaseOutcome, ReleaseError]:
    gate = check_preconditions(ctx, config=config)
    if isinstance(gate, Err):
        return gate
    if gate.value.decision is GateDecision.SKIP:
        return Ok(Skipped(gate.value.reason or "release gate skipped"))

    planned = plan_release(config=config, ports=ports, console=console)
    if isinstance(planned, Err):
        return planned
    if isinstance(planned.value, Skipped):
        return Ok(planned.value)

    return apply_release(
        planned.value,
        config=config,
        ports=ports,
        console=console,
        dry_run=dry_run,
    )
