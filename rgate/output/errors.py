"""Error presentation utilities.

Centralized gate error formatting: message, supporting details, hint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rgate.services.release.errors import GateError

if TYPE_CHECKING:
    from rgate.output.console import ConsoleProtocol

__all__ = ["print_gate_error"]


def print_gate_error(error: GateError, console: ConsoleProtocol) -> None:
    """Print a gate failure: message, supporting details, then the hint."""
    console.error(error.message)
    if error.details:
        if error.details_title:
            console.info(error.details_title)
        for line in error.details:
            console.print(f"  {line}")
    if error.hint:
        console.info(error.hint)
