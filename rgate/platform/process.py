"""Subprocess execution with Result-based error handling.

Two flavors:
- run: capture stdout/stderr (git queries)
- run_streaming: let output reach the terminal (formatter, linter, tests,
  builds), optionally discarding stdout for smoke tests

Neither applies a timeout: a hanging tool blocks the release until the
operator interrupts it.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from rgate.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_streaming"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process could not be started.
        stdout: Standard output (empty when not captured).
        stderr: Standard error (empty when not captured).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def run(
    cmd: list[str],
    cwd: Path,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.

    Returns:
        Ok(stdout) on exit 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    *,
    quiet: bool = False,
) -> Result[None, ProcessError]:
    """Execute a command with output going straight to the terminal.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        quiet: Discard stdout; stderr still reaches the terminal.

    Returns:
        Ok(None) on exit 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            stdout=subprocess.DEVNULL if quiet else None,
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)
