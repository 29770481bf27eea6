from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ReleaseErrorKind = Literal[
    "token_missing",
    "build_missing",
    "tool_missing",
    "dirty_tree",
    "identity_missing",
    "manifest_invalid",
    "version_line_missing",
    "attribution_failed",
    "fingerprint_unparsable",
    "bump_failed",
    "publish_failed",
    "push_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
