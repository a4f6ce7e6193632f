"""
CLI entry point.

    subspace                 pick a command from the interactive menu
    subspace <command> ...   run it directly (init, farm, wipe, info, open-logs)
"""
from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Sequence

from rich.console import Console

from subspace_tui import MenuKeybindingsManager, TerminalIOError

from .commands import Command
from .config import ENV_HOME_DIR, get_home_dir, load_env_files, load_keybindings_config
from .dispatch import ActionTable, dispatch
from .errors import EXIT_FAILURE, EXIT_OK, SUPPORT_MESSAGE, SubspaceCliError
from .logging_setup import reset_logging, setup_logging
from .menu import choose_command
from .resolver import ResolutionExit, resolve_command

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)

EXIT_INTERRUPTED = 130


def _report(message: str, hint: str | None) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}", highlight=False)
    if hint:
        err_console.print(f"[yellow]Suggestion:[/yellow] {hint}", highlight=False)


def _start_logging() -> None:
    try:
        setup_logging()
    except OSError as exc:
        raise SubspaceCliError(
            f"Cannot write logs under {get_home_dir()}: {exc}",
            hint=f"Check its permissions or point {ENV_HOME_DIR} at a writable directory.",
        ) from exc


def _menu_keybindings() -> MenuKeybindingsManager:
    try:
        return MenuKeybindingsManager(load_keybindings_config())
    except ValueError as exc:
        raise SubspaceCliError(str(exc), hint="Fix `keybindings` in settings.json.") from exc


async def run(command: Command | None, table: ActionTable | None = None) -> int:
    """Resolve the missing command interactively if needed, then dispatch it."""
    if command is None:
        command = await choose_command(keybindings=_menu_keybindings())
        if command is None:
            return EXIT_OK
    await dispatch(command, table)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    """Main CLI entrypoint."""
    args = list(sys.argv[1:] if argv is None else argv)
    load_env_files(os.getcwd())

    try:
        command = resolve_command(args)
        _start_logging()
        code = asyncio.run(run(command))
    except ResolutionExit as exc:
        code = exc.exit_code
    except SubspaceCliError as exc:
        logger.error("%s: %s", type(exc).__name__, exc.message)
        _report(exc.message, exc.hint)
        code = exc.exit_code
    except TerminalIOError as exc:
        logger.error("terminal failure: %s", exc)
        _report(str(exc), SUPPORT_MESSAGE)
        code = EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("interrupted")
        code = EXIT_INTERRUPTED
    finally:
        reset_logging()
    sys.exit(code)


if __name__ == "__main__":
    main()
