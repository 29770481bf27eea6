from __future__ import annotations

import json
import re
from pathlib import Path

from autorel.core.config import ReleaseConfig
from autorel.core.result import Err, Ok, Result
from autorel.core.structured import as_str_dict, get_str
from autorel.platform.process import run as run_process
from autorel.services.release.errors import ReleaseError
from autorel.services.release.model import PackageDescriptor
from autorel.services.release.ports import ManifestPort
from autorel.services.release.semver import parse_version
from autorel.services.release.timeouts import MANIFEST_QUERY_TIMEOUT_SECONDS


# An indented top-level "version" key, as written by npm
_VERSION_LINE_RE = re.compile(r'^\s+"version": "')


def _read_text(path: Path) -> Result[str, ReleaseError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ReleaseError(kind="manifest_invalid", message=f"missing manifest: {path}"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError(kind="manifest_invalid", message=f"failed to read {path}: {e}"))


class JsonManifest:
    """Reads manifest fields in-process."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def text(self) -> Result[str, ReleaseError]:
        return _read_text(self.path)

    def read_field(self, key: str) -> Result[str, ReleaseError]:
        raw = self.text()
        if isinstance(raw, Err):
            return raw

        try:
            obj: object = json.loads(raw.value)
        except json.JSONDecodeError as e:
            return Err(
                ReleaseError(
                    kind="manifest_invalid",
                    message=f"invalid JSON in {self.path.name}: {e}",
                )
            )

        data = as_str_dict(obj)
        value = get_str(data, key) if data is not None else None
        if value is None:
            return Err(
                ReleaseError(
                    kind="manifest_invalid",
                    message=f"'{key}' is missing from {self.path.name}",
                )
            )
        return Ok(value)


class JqManifest:
    """Reads manifest fields through ``jq -er``, like the shell release flow did."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def text(self) -> Result[str, ReleaseError]:
        return _read_text(self.path)

    def read_field(self, key: str) -> Result[str, ReleaseError]:
        result = run_process(
            ["jq", "-er", f".{key}", self.path.name],
            cwd=self.path.parent,
            timeout=MANIFEST_QUERY_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="manifest_invalid",
                    message=f"jq could not read '{key}' from {self.path.name}",
                    hint=result.error.detail,
                )
            )
        value = result.value.strip()
        if not value:
            return Err(
                ReleaseError(
                    kind="manifest_invalid",
                    message=f"'{key}' is empty in {self.path.name}",
                )
            )
        return Ok(value)


def open_manifest(*, root: Path, config: ReleaseConfig) -> ManifestPort:
    path = root / config.manifest
    if config.manifest_reader == "jq":
        return JqManifest(path)
    return JsonManifest(path)


def read_package(manifest: ManifestPort) -> Result[PackageDescriptor, ReleaseError]:
    name = manifest.read_field("name")
    if isinstance(name, Err):
        return name
    raw_version = manifest.read_field("version")
    if isinstance(raw_version, Err):
        return raw_version

    version = parse_version(raw_version.value)
    if version is None or raw_version.value.startswith("v"):
        return Err(
            ReleaseError(
                kind="manifest_invalid",
                message=f"version is not MAJOR.MINOR.PATCH: {raw_version.value}",
            )
        )
    return Ok(PackageDescriptor(name=name.value, version=version))


def find_version_line(text: str) -> int | None:
    """1-based line number of the manifest's ``"version"`` entry."""
    for number, line in enumerate(text.splitlines(), start=1):
        if _VERSION_LINE_RE.match(line):
            return number
    return None
