"""
Interactive menu engine.

Shown when the CLI runs without a subcommand: the user picks a command
from the list (Rendering), answers any follow-up questions that command
needs (AwaitingDetails) and gets back a fully resolved Command ready for
dispatch. Cancelling the list yields None.
"""
from __future__ import annotations

import logging
import sys
from typing import IO

from subspace_tui import MenuKeybindingsManager, ProcessTerminal, Terminal, run_select

from .commands import COMMAND_TABLE, Command, Farm, menu_labels
from .errors import UsageError
from .prompts import prompt_yes_no

logger = logging.getLogger(__name__)

FARM_QUESTIONS = (
    "Do you want to initialize farmer in verbose mode? [y/n]: ",
    "Do you want to be an executor? [y/n]: ",
    "Do you want to disable rotation for logs? [y/n]: ",
)


async def collect_details(
    command_cls: type,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> Command:
    """Ask the follow-up questions for *command_cls* and build the command."""
    if command_cls is Farm:
        verbose, executor, no_rotation = [
            await prompt_yes_no(question, stdin=stdin, stdout=stdout)
            for question in FARM_QUESTIONS
        ]
        return Farm(verbose=verbose, executor=executor, no_rotation=no_rotation)
    # Every other command runs with its defaults when chosen from the menu
    return command_cls()


async def choose_command(
    terminal: Terminal | None = None,
    keybindings: MenuKeybindingsManager | None = None,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> Command | None:
    """
    Run the interactive selection and return the resolved command.

    Returns None when the user cancelled with ctrl+c.
    Raises UsageError when there is no terminal to draw on,
    TerminalIOError on terminal failures and PromptParseError on a bad
    yes/no answer.
    """
    if terminal is None:
        if not (sys.stdin.isatty() and sys.stdout.isatty()):
            raise UsageError(
                "No command given and no terminal to show the menu on. "
                "Pass one of: " + ", ".join(spec.name for spec in COMMAND_TABLE)
            )
        terminal = ProcessTerminal()

    index = await run_select(terminal, menu_labels(), keybindings=keybindings)
    if index is None:
        logger.info("interactive menu cancelled")
        return None

    spec = COMMAND_TABLE[index]
    logger.info("interactive menu selected %s", spec.name)
    return await collect_details(spec.command_cls, stdin=stdin, stdout=stdout)
