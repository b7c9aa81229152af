from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from rgate.core.config import ReleaseConfig, load_config_or_default
from rgate.core.errors import ErrorCode
from rgate.core.result import Err
from rgate.git.repository import Repository
from rgate.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: ReleaseConfig
    repo: Repository
    console: ConsoleProtocol


def build_context(cwd: Path | None = None) -> CLIContext:
    root = (cwd or Path.cwd()).resolve()
    console = RichConsole()

    config_result = load_config_or_default(root)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(
        config=config_result.value,
        repo=Repository(root),
        console=console,
    )
