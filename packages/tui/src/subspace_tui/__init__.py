"""
subspace_tui: raw-mode terminal input and in-place select menus.
"""
from .components import DEFAULT_TITLE, SelectList, SelectListTheme
from .keybindings import (
    DEFAULT_MENU_KEYBINDINGS,
    MenuAction,
    MenuKeybindingsManager,
)
from .keys import KEY, matches_key, parse_key
from .select_menu import run_select
from .stdin_buffer import StdinBuffer
from .terminal import ProcessTerminal, Terminal, TerminalIOError

__all__ = [
    # Components
    "DEFAULT_TITLE",
    "SelectList",
    "SelectListTheme",
    # Keybindings
    "DEFAULT_MENU_KEYBINDINGS",
    "MenuAction",
    "MenuKeybindingsManager",
    # Keys
    "KEY",
    "matches_key",
    "parse_key",
    # Menu
    "run_select",
    # Input
    "StdinBuffer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "TerminalIOError",
]
