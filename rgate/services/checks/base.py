# SPDX-License-Identifier: MIT
"""Base types for quality checks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True, slots=True)
class QualityCheckResult:
    """Outcome of a single quality check.

    Attributes:
        name: Check identifier (e.g., "format", "lint")
        passed: Whether the check succeeded
        hint: Remediation shown when the check failed
        returncode: Exit status of the underlying tool, if it ran
    """

    name: str
    passed: bool
    hint: str | None = None
    returncode: int | None = None

    @classmethod
    def success(cls, name: str) -> QualityCheckResult:
        return cls(name=name, passed=True, returncode=0)

    @classmethod
    def failure(cls, name: str, hint: str, returncode: int | None = None) -> QualityCheckResult:
        return cls(name=name, passed=False, hint=hint, returncode=returncode)


class QualityCheck(Protocol):
    """A pass/fail gate run before a release is tagged."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str:
        """Progress line printed before the check runs."""
        ...

    def execute(self, cwd: Path) -> QualityCheckResult: ...
