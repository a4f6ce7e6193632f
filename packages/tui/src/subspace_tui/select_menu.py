"""
Interactive single-choice menu drawn in place below the current cursor.

run_select() owns the terminal for the duration of one choice: it enters
raw mode once, anchors the option block at the cursor row, redraws the
block whenever the selection changes and leaves raw mode on every exit
path before returning or raising.
"""
from __future__ import annotations

import logging
from typing import Sequence

from .components.select_list import DEFAULT_TITLE, SelectList, SelectListTheme
from .keybindings import MenuKeybindingsManager
from .keys import parse_key
from .terminal import Terminal
from .utils import move_to

logger = logging.getLogger(__name__)


def _reserve_rows(terminal: Terminal, select_list: SelectList) -> None:
    """Scroll once so the whole block fits below the anchor row."""
    rows = terminal.rows
    overflow = select_list.anchor_row + select_list.height - (rows - 1)
    if overflow <= 0:
        return
    terminal.write(move_to(0, rows - 1) + "\n" * overflow)
    select_list.anchor_row = max(select_list.anchor_row - overflow, 0)
    logger.debug("scrolled %d rows, anchor row now %d", overflow, select_list.anchor_row)


async def run_select(
    terminal: Terminal,
    options: Sequence[str],
    *,
    title: str = DEFAULT_TITLE,
    keybindings: MenuKeybindingsManager | None = None,
    theme: SelectListTheme | None = None,
) -> int | None:
    """
    Let the user pick one of *options*.

    Returns the selected index, or None when the user cancelled.
    Raises whatever the terminal raises (TerminalIOError) after raw mode
    has been released.
    """
    kb = keybindings or MenuKeybindingsManager()
    select_list = SelectList(options, title=title, theme=theme)
    cancelled = False

    with terminal.raw_mode():
        _, select_list.anchor_row = await terminal.cursor_position()
        _reserve_rows(terminal, select_list)
        terminal.write(select_list.render(terminal.columns))

        while True:
            data = await terminal.read_key()
            action = kb.action_for(data)
            if action == "selectUp":
                changed = select_list.move_up()
            elif action == "selectDown":
                changed = select_list.move_down()
            elif action == "selectConfirm":
                break
            elif action == "selectCancel":
                cancelled = True
                break
            else:
                logger.debug("ignored key %s", parse_key(data) or repr(data))
                continue
            if changed:
                terminal.write(select_list.render(terminal.columns))

    # Leave the block on screen and continue below it
    col, row = select_list.end_position()
    terminal.write(move_to(col, row))

    if cancelled:
        logger.debug("selection cancelled")
        return None
    logger.debug("selected option %d (%s)", select_list.selected_index, select_list.get_selected_item())
    return select_list.selected_index
