"""
Command resolver: turns the process arguments into a Command.

The typer app below only parses: each subcommand returns its Command value
and the resolver hands it back to the caller. No subcommand resolves to
None, which the entry point answers with the interactive menu.
"""
from __future__ import annotations

from typing import Optional, Sequence

import click
import typer

from .commands import COMMAND_TABLE, Command, Farm, Info, Init, OpenLogs, Wipe
from .config import APP_NAME, VERSION
from .errors import UsageError

_HELP = {spec.name: spec.help for spec in COMMAND_TABLE}

app = typer.Typer(
    name=APP_NAME,
    help="Subspace CLI",
    add_completion=False,
    no_args_is_help=False,
)


class ResolutionExit(Exception):
    """Parsing finished early (--help, --version) with this exit code."""

    def __init__(self, exit_code: int) -> None:
        super().__init__(exit_code)
        self.exit_code = exit_code


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {VERSION}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def _root(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Print version and exit",
    ),
) -> None:
    """Subspace CLI. Run without a command to pick one interactively."""
    return None


@app.command("init", help=_HELP["init"])
def _init() -> Init:
    return Init()


@app.command("farm", help=_HELP["farm"])
def _farm(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to the console"),
    executor: bool = typer.Option(False, "--executor", "-e", help="Run the node as an executor"),
    no_rotation: bool = typer.Option(False, "--no-rotation", help="Disable log file rotation"),
) -> Farm:
    return Farm(verbose=verbose, executor=executor, no_rotation=no_rotation)


@app.command("wipe", help=_HELP["wipe"])
def _wipe(
    farmer: bool = typer.Option(False, "--farmer", help="Wipe only the farmer data"),
    node: bool = typer.Option(False, "--node", help="Wipe only the node data"),
) -> Wipe:
    return Wipe(farmer=farmer, node=node)


@app.command("info", help=_HELP["info"])
def _info() -> Info:
    return Info()


@app.command("open-logs", help=_HELP["open-logs"])
def _open_logs() -> OpenLogs:
    return OpenLogs()


def resolve_command(argv: Sequence[str]) -> Command | None:
    """
    Parse *argv* (without the program name).

    Returns the Command, or None when no subcommand was given.
    Raises UsageError for malformed input and ResolutionExit when an eager
    option such as --help already handled the invocation.
    """
    command = typer.main.get_command(app)
    try:
        result = command.main(args=list(argv), prog_name=APP_NAME, standalone_mode=False)
    except click.UsageError as exc:
        raise UsageError(exc.format_message()) from exc
    if isinstance(result, int):
        raise ResolutionExit(result)
    return result
