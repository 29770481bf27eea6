from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from autorel.services.release.semver import SemVer


BumpKind = Literal["major", "minor", "patch"]


@dataclass(frozen=True, slots=True)
class RunContext:
    """Environment and repository state checked before anything is touched."""

    branch: str | None
    has_token: bool
    is_clean: bool
    git_user_name: str | None
    git_user_email: str | None
    build_present: bool
    missing_tools: tuple[str, ...] = ()

    @property
    def has_identity(self) -> bool:
        return bool(self.git_user_name) and bool(self.git_user_email)


class GateDecision(Enum):
    PROCEED = "proceed"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class GateResult:
    decision: GateDecision
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """Package name and version as read once from the manifest."""

    name: str
    version: SemVer

    @property
    def spec(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True, slots=True)
class PackOutput:
    """What a dry-run pack printed, and why it failed if it did.

    The digest line can be present even when the tool exits non-zero, so a
    failure is only reported once parsing also comes up empty.
    """

    text: str
    failure: str | None = None


@dataclass(frozen=True, slots=True)
class FingerprintPair:
    """Published vs. local package shasum.

    ``remote`` is empty when the version was never published.
    """

    remote: str
    local: str

    @property
    def changed(self) -> bool:
        return self.remote != self.local


@dataclass(frozen=True, slots=True)
class CommitCounts:
    breaking: int
    feat: int


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Everything decided before the first mutation."""

    package: PackageDescriptor
    fingerprints: FingerprintPair
    version_line: int
    last_release_sha: str
    summaries: tuple[str, ...]
    counts: CommitCounts
    bump: BumpKind

    @property
    def next_version(self) -> SemVer:
        return self.package.version.bump(self.bump)


@dataclass(frozen=True, slots=True)
class Skipped:
    reason: str


@dataclass(frozen=True, slots=True)
class Published:
    version: SemVer
    dry_run: bool = False
    plan: ReleasePlan | None = field(default=None, compare=False)

    @property
    def tag(self) -> str:
        return self.version.to_tag()


ReleaseOutcome = Skipped | Published
