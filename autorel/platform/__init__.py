"""Process and filesystem boundary."""

from .files import read_secret
from .process import ProcessError, run, run_passthrough, which

__all__ = [
    "ProcessError",
    "read_secret",
    "run",
    "run_passthrough",
    "which",
]
