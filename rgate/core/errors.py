"""Process exit codes for the release gate.

The values are part of the CLI contract and must stay stable:
- 0: release published, or the operator declined at a prompt
- 1: a precondition, quality gate or transport step failed
- 2: release.toml could not be loaded
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the release-gate command."""

    OK = 0
    RELEASE_FAILED = 1
    CONFIG_ERROR = 2
