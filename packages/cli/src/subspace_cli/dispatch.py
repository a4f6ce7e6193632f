"""Dispatch: run the one action that belongs to a resolved command."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from . import actions
from .commands import Command, Farm, Info, Init, OpenLogs, Wipe, label_of
from .errors import SUPPORT_MESSAGE, ActionError, SubspaceCliError

logger = logging.getLogger(__name__)


@dataclass
class ActionTable:
    init: Callable[[], Awaitable[None]] = actions.init
    farm: Callable[[bool, bool, bool], Awaitable[None]] = actions.farm
    wipe: Callable[[bool, bool], Awaitable[None]] = actions.wipe
    info: Callable[[], Awaitable[None]] = actions.info
    open_logs: Callable[[], Awaitable[None]] = actions.open_logs


def _invoke(command: Command, table: ActionTable) -> Awaitable[None]:
    if isinstance(command, Init):
        return table.init()
    if isinstance(command, Farm):
        return table.farm(command.verbose, command.executor, command.no_rotation)
    if isinstance(command, Wipe):
        return table.wipe(command.farmer, command.node)
    if isinstance(command, Info):
        return table.info()
    if isinstance(command, OpenLogs):
        return table.open_logs()
    raise TypeError(f"Not a command: {command!r}")


async def dispatch(command: Command, table: ActionTable | None = None) -> None:
    """
    Run the action for *command* exactly once.

    CLI errors propagate as they are (gaining the support hint if they have
    none); any other exception is wrapped in ActionError.
    """
    table = table or ActionTable()
    logger.info("dispatching %s", command)
    pending = _invoke(command, table)
    try:
        await pending
    except SubspaceCliError as exc:
        if exc.hint is None:
            exc.hint = SUPPORT_MESSAGE
        raise
    except Exception as exc:
        logger.exception("%s failed", label_of(command))
        raise ActionError(str(exc) or type(exc).__name__) from exc
