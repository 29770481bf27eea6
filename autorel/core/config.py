"""Typed release configuration.

A run is driven by a single ``ReleaseConfig`` built once at startup from
``autorel.toml`` (optional) and CLI overrides, then passed explicitly into
the release engine. Nothing below reads the process environment.

Example ``autorel.toml``:

    release_branch = "main"
    manifest = "package.json"
    build_artifact = "dist/index.js"
    token_env = "NODE_AUTH_TOKEN"
    secret_file = "~/.config/autorel/token"
    commit_message = "chore(npm): Release v%s"
    manifest_reader = "json"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ManifestReaderKind",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "autorel.toml"

DEFAULT_RELEASE_BRANCH = "main"
DEFAULT_MANIFEST = "package.json"
DEFAULT_BUILD_ARTIFACT = "dist/index.js"
DEFAULT_TOKEN_ENV = "NODE_AUTH_TOKEN"
DEFAULT_SECRET_FILE = "~/.config/autorel/token"
DEFAULT_COMMIT_MESSAGE = "chore(npm): Release v%s"
DEFAULT_REGISTRY_TOOL = "npm"

ManifestReaderKind = Literal["json", "jq"]

_STRING_KEYS = (
    "release_branch",
    "manifest",
    "build_artifact",
    "token_env",
    "secret_file",
    "commit_message",
    "registry_tool",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Settings for one release attempt.

    Attributes:
        release_branch: The only branch publishing is allowed from.
        manifest: Package manifest path, relative to the repository root.
        build_artifact: File that must exist before packing.
        token_env: Environment variable carrying the registry token.
        secret_file: Fallback file the token is read from when unset.
        commit_message: Release commit template, exactly one ``%s``.
        manifest_reader: ``json`` reads in-process, ``jq`` shells out.
        registry_tool: Package manager executable.
    """

    release_branch: str = DEFAULT_RELEASE_BRANCH
    manifest: str = DEFAULT_MANIFEST
    build_artifact: str = DEFAULT_BUILD_ARTIFACT
    token_env: str = DEFAULT_TOKEN_ENV
    secret_file: str = DEFAULT_SECRET_FILE
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    manifest_reader: ManifestReaderKind = "json"
    registry_tool: str = DEFAULT_REGISTRY_TOOL

    @property
    def required_tools(self) -> tuple[str, ...]:
        """External executables the run cannot do without."""
        tools = ["git", self.registry_tool]
        if self.manifest_reader == "jq":
            tools.append("jq")
        return tuple(tools)

    def secret_path(self) -> Path:
        return Path(self.secret_file).expanduser()

    def with_overrides(self, **overrides: str | None) -> ReleaseConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create a config from a parsed TOML table.

        Raises:
            ValueError: A key has the wrong type or an invalid value.
        """
        values: dict[str, str] = {}
        for key in _STRING_KEYS:
            if key not in data:
                continue
            value = get_str(data, key)
            if value is None:
                raise ValueError(f"'{key}' must be a non-empty string")
            values[key] = value

        reader = data.get("manifest_reader", "json")
        if reader not in ("json", "jq"):
            raise ValueError(f"'manifest_reader' must be 'json' or 'jq', got {reader!r}")

        config = cls(**values, manifest_reader=reader)  # type: ignore[arg-type]
        validate_commit_message(config.commit_message)
        return config


def validate_commit_message(template: str) -> None:
    """Raises ValueError unless the template has exactly one ``%s``."""
    if template.count("%s") != 1 or template.replace("%s", "").count("%") != 0:
        raise ValueError(
            f"'commit_message' must contain exactly one '%s' placeholder: {template!r}"
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and validate ``autorel.toml``.

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def load_config_or_default(root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load ``<root>/autorel.toml`` when present, defaults otherwise.

    A present but broken file is still an error.
    """
    path = root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
