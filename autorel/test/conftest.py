"""In-memory stand-ins for git, the registry client and the manifest."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import pytest

from autorel.core.config import ReleaseConfig
from autorel.core.result import Err, Ok, Result
from autorel.git.repository import GitError
from autorel.output.console import MockConsole
from autorel.services.release.errors import ReleaseError
from autorel.services.release.model import BumpKind, PackOutput, RunContext
from autorel.services.release.semver import parse_version
from autorel.services.release.service import ReleasePorts

LOCAL_SHA = "a" * 40
REMOTE_SHA = "b" * 40
RELEASE_SHA = "c0ffee0000000000000000000000000000000000"


def _manifest_text(name: str, version: str) -> str:
    return json.dumps({"name": name, "version": version, "main": "dist/index.js"}, indent=2) + "\n"


@dataclass
class FakeManifest:
    name: str = "@acme/weaver"
    version: str = "1.2.3"
    raw: str | None = None

    def text(self) -> Result[str, ReleaseError]:
        return Ok(self.raw if self.raw is not None else _manifest_text(self.name, self.version))

    def read_field(self, key: str) -> Result[str, ReleaseError]:
        raw = self.raw if self.raw is not None else _manifest_text(self.name, self.version)
        data = json.loads(raw)
        value = data.get(key)
        if not isinstance(value, str) or not value:
            return Err(ReleaseError(kind="manifest_invalid", message=f"'{key}' is missing"))
        return Ok(value)


@dataclass
class FakeVcs:
    branch: str | None = "main"
    clean: bool = True
    user_name: str | None = "Release Bot"
    user_email: str | None = "bot@example.com"
    summaries: list[str] = field(default_factory=list)
    blame_sha: str | None = RELEASE_SHA
    push_error: str | None = None
    calls: list[str] = field(default_factory=list)

    def current_branch(self) -> str | None:
        return self.branch

    def is_clean(self) -> bool:
        return self.clean

    def config_value(self, key: str) -> str | None:
        return {"user.name": self.user_name, "user.email": self.user_email}.get(key)

    def blame_line(self, path: str, line: int) -> Result[str, GitError]:
        self.calls.append(f"blame {path}:{line}")
        if self.blame_sha is None:
            return Err(GitError(command="blame", message="no such path"))
        return Ok(self.blame_sha)

    def log_summaries(self, since: str) -> Result[list[str], GitError]:
        self.calls.append(f"log {since}..HEAD")
        return Ok(list(self.summaries))

    def push_follow_tags(self) -> Result[str, GitError]:
        self.calls.append("push")
        if self.push_error is not None:
            return Err(GitError(command="push --follow-tags", message=self.push_error))
        return Ok("")


@dataclass
class FakeRegistry:
    """Registry that publishes by recording the local shasum as remote."""

    manifest: FakeManifest
    vcs: FakeVcs
    local: str = LOCAL_SHA
    published: dict[str, str] = field(default_factory=dict)
    pack_text: str | None = None
    pack_failure: str | None = None
    publish_error: str | None = None
    calls: list[str] = field(default_factory=list)

    def published_fingerprint(self, name: str, version: str) -> str:
        self.calls.append(f"show {name}@{version}")
        return self.published.get(f"{name}@{version}", "")

    def pack_output(self) -> PackOutput:
        self.calls.append("pack")
        if self.pack_text is not None:
            return PackOutput(text=self.pack_text, failure=self.pack_failure)
        return PackOutput(
            "npm notice @acme/weaver@1.2.3\n"
            "npm notice package size: 1.2 kB\n"
            f"npm notice shasum:        {self.local}\n"
            "npm notice total files:   3\n"
        )

    def version_bump(self, kind: BumpKind, message: str) -> Result[str, ReleaseError]:
        self.calls.append(f"version {kind}")
        current = parse_version(self.manifest.version)
        assert current is not None
        new = current.bump(kind)
        self.manifest.version = str(new)
        self.vcs.calls.append(f"commit {message % new}")
        # The release commit now owns the version line; nothing since.
        self.vcs.summaries = []
        self.vcs.blame_sha = "d" * 40
        return Ok(new.to_tag() + "\n")

    def publish(self) -> Result[None, ReleaseError]:
        self.calls.append("publish")
        if self.publish_error is not None:
            return Err(ReleaseError(kind="publish_failed", message=self.publish_error))
        self.published[f"{self.manifest.name}@{self.manifest.version}"] = self.local
        return Ok(None)

    @property
    def mutations(self) -> list[str]:
        return [c for c in self.calls if c.startswith(("version", "publish"))]


@dataclass
class ReleaseWorld:
    config: ReleaseConfig
    manifest: FakeManifest
    vcs: FakeVcs
    registry: FakeRegistry
    console: MockConsole

    @property
    def ports(self) -> ReleasePorts:
        return ReleasePorts(vcs=self.vcs, registry=self.registry, manifest=self.manifest)

    def run_context(self, **changes: object) -> RunContext:
        values: dict[str, object] = {
            "branch": self.vcs.branch,
            "has_token": True,
            "is_clean": self.vcs.clean,
            "git_user_name": self.vcs.user_name,
            "git_user_email": self.vcs.user_email,
            "build_present": True,
            "missing_tools": (),
        }
        values.update(changes)
        return RunContext(**values)  # type: ignore[arg-type]


@pytest.fixture
def world() -> ReleaseWorld:
    manifest = FakeManifest()
    vcs = FakeVcs()
    registry = FakeRegistry(manifest=manifest, vcs=vcs)
    return ReleaseWorld(
        config=ReleaseConfig(),
        manifest=manifest,
        vcs=vcs,
        registry=registry,
        console=MockConsole(),
    )
