"""Process exit codes.

The values are part of the CLI contract used by CI jobs:
- 0: Success, or nothing to publish (default behaviour)
- 1: Release error (failed precondition, unparsable tool output, failed step)
- 2: Usage error (bad arguments, invalid autorel.toml)
- 3: Nothing to publish, only when ``--strict-exit`` is given
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for autorel commands."""

    OK = 0
    RELEASE_ERROR = 1
    USAGE_ERROR = 2
    NOTHING_TO_PUBLISH = 3
