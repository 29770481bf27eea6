from __future__ import annotations

import re

from autorel.core.result import Err, Ok, Result
from autorel.services.release.errors import ReleaseError
from autorel.services.release.model import FingerprintPair, PackageDescriptor
from autorel.services.release.ports import RegistryPort


def _shasum_line_re(tool: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(tool)} [a-z]+ shasum:[ \t]+([0-9a-f]{{40}})", re.MULTILINE)


def parse_pack_fingerprint(output: str, *, tool: str = "npm") -> str | None:
    """Extract the tarball shasum from dry-run pack output.

    npm prints e.g. ``npm notice shasum:        0a1b...`` (40 hex chars).
    """
    m = _shasum_line_re(tool).search(output)
    if m is None:
        return None
    return m.group(1)


def detect_change(
    package: PackageDescriptor,
    *,
    registry: RegistryPort,
    tool: str = "npm",
) -> Result[FingerprintPair, ReleaseError]:
    remote = registry.published_fingerprint(package.name, str(package.version))

    packed = registry.pack_output()
    local = parse_pack_fingerprint(packed.text, tool=tool)
    if local is None:
        return Err(
            ReleaseError(
                kind="fingerprint_unparsable",
                message=f"Failed to parse shasum value from '{tool} pack' output",
                hint=packed.failure,
            )
        )

    return Ok(FingerprintPair(remote=remote, local=local))
