# SPDX-License-Identifier: MIT
"""Quality checks backed by external commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rgate.core.config import CheckSpec
from rgate.core.result import Err
from rgate.platform.process import run_streaming
from rgate.services.checks.base import QualityCheckResult

_DESCRIPTIONS = {
    "format": "Checking code formatting...",
    "lint": "Running lints (warnings are errors)...",
    "test": "Running tests...",
    "build": "Checking release build...",
}


@dataclass(frozen=True, slots=True)
class CommandCheck:
    """Runs a command from the repository root; exit 0 means pass.

    Tool output streams to the terminal so the operator sees what failed.
    With `quiet`, stdout is discarded and only the exit status matters.
    """

    name: str
    command: tuple[str, ...]
    hint: str
    quiet: bool = False

    @property
    def description(self) -> str:
        default = f"Running {self.name}: {' '.join(self.command)}"
        return _DESCRIPTIONS.get(self.name, default)

    def execute(self, cwd: Path) -> QualityCheckResult:
        result = run_streaming(list(self.command), cwd, quiet=self.quiet)
        if isinstance(result, Err):
            hint = self.hint
            if result.error.returncode == -1 and result.error.stderr:
                hint = f"{self.hint} ({result.error.stderr})"
            return QualityCheckResult.failure(self.name, hint, result.error.returncode)
        return QualityCheckResult.success(self.name)

    @classmethod
    def from_spec(cls, spec: CheckSpec) -> CommandCheck:
        return cls(name=spec.name, command=spec.command, hint=spec.hint, quiet=spec.quiet)


def checks_from_config(specs: tuple[CheckSpec, ...]) -> list[CommandCheck]:
    """Build the quality gate battery, preserving configured order."""
    return [CommandCheck.from_spec(s) for s in specs]
