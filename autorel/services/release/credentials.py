"""Registry token resolution.

The token comes from the environment when set there, otherwise from a
local secret file. Resolution happens once at startup; the resulting
``Credential`` is injected into child process environments explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from autorel.core.result import Err, Ok, Result
from autorel.platform.files import read_secret
from autorel.services.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class Credential:
    value: str = ""
    source: Literal["env", "file"] = "env"

    def __repr__(self) -> str:
        return f"Credential(source={self.source!r}, value=<redacted>)"


def resolve_token(
    *,
    env: Mapping[str, str],
    token_env: str,
    secret_file: Path,
) -> Result[Credential, ReleaseError]:
    value = env.get(token_env, "").strip()
    if value:
        return Ok(Credential(value=value, source="env"))

    from_file = read_secret(secret_file)
    if from_file:
        return Ok(Credential(value=from_file, source="file"))

    return Err(
        ReleaseError(
            kind="token_missing",
            message=f"{token_env} is not set",
            hint=f"Export {token_env} or write the token to {secret_file}",
        )
    )


def inject_token(
    env: Mapping[str, str],
    *,
    token_env: str,
    credential: Credential,
) -> dict[str, str]:
    """Return a copy of ``env`` with the token variable set."""
    out = dict(env)
    out[token_env] = credential.value
    return out
