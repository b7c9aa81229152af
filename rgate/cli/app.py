from __future__ import annotations

import typer

from rgate import __version__
from rgate.cli.context import build_context
from rgate.core.errors import ErrorCode
from rgate.core.result import Err
from rgate.output.errors import print_gate_error
from rgate.services.release.gatekeeper import ReleaseGatekeeper


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


def _confirm(prompt: str) -> bool:
    """Ask a yes/no question; end of input counts as no."""
    try:
        return typer.confirm(prompt, default=False)
    except typer.Abort:
        return False


@app.command()
def release(
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Qualify the repository, then create and push the release tag."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    ctx = build_context()

    result = ReleaseGatekeeper(
        config=ctx.config,
        repo=ctx.repo,
        console=ctx.console,
        confirm=_confirm,
    ).run()

    if isinstance(result, Err):
        print_gate_error(result.error, ctx.console)
        raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))


def main() -> None:
    app()
