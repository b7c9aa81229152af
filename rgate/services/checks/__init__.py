# SPDX-License-Identifier: MIT
"""Quality gates run before a release tag is created.

- QualityCheck: capability protocol (execute-and-report)
- CommandCheck: formatter, linter, tests, build and smoke tests as commands
"""

from rgate.services.checks.base import QualityCheck, QualityCheckResult
from rgate.services.checks.command import CommandCheck, checks_from_config

__all__ = [
    "QualityCheck",
    "QualityCheckResult",
    "CommandCheck",
    "checks_from_config",
]
