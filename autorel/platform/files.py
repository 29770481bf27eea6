"""Filesystem helpers."""

from __future__ import annotations

from pathlib import Path

__all__ = ["read_secret"]


def read_secret(path: Path) -> str | None:
    """Return the stripped contents of a secret file, None if absent or empty."""
    try:
        value = path.read_text(encoding="utf-8").strip()
    except (FileNotFoundError, IsADirectoryError, PermissionError, UnicodeDecodeError):
        return None
    return value or None
