"""Collaborator interfaces of the release engine.

The engine only talks to git, the package registry client and the manifest
through these protocols. Production implementations live in
``autorel.git.Repository``, ``registry.NpmRegistry`` and ``manifest``;
tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from autorel.core.result import Result
from autorel.git.repository import GitError
from autorel.services.release.errors import ReleaseError
from autorel.services.release.model import BumpKind, PackOutput


class VcsPort(Protocol):
    def current_branch(self) -> str | None: ...

    def is_clean(self) -> bool: ...

    def config_value(self, key: str) -> str | None: ...

    def blame_line(self, path: str, line: int) -> Result[str, GitError]: ...

    def log_summaries(self, since: str) -> Result[list[str], GitError]: ...

    def push_follow_tags(self) -> Result[str, GitError]: ...


class RegistryPort(Protocol):
    def published_fingerprint(self, name: str, version: str) -> str:
        """Shasum published for ``name@version``, empty when there is none."""
        ...

    def pack_output(self) -> PackOutput:
        """Combined output of a dry-run pack of the working tree."""
        ...

    def version_bump(self, kind: BumpKind, message: str) -> Result[str, ReleaseError]:
        """Bump the manifest version, commit with ``message`` and tag.

        ``message`` contains one ``%s`` the tool replaces with the new version.
        Returns the tool's output (the new tag for npm).
        """
        ...

    def publish(self) -> Result[None, ReleaseError]: ...


class ManifestPort(Protocol):
    def read_field(self, key: str) -> Result[str, ReleaseError]:
        """Return a string field, failing if absent or the document is invalid."""
        ...

    def text(self) -> Result[str, ReleaseError]:
        """Raw manifest text, used to locate the version line."""
        ...
