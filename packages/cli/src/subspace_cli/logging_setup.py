"""Log handlers for the CLI: a file under the logs directory, rich console output when verbose."""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler

from .config import get_log_path

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_installed: list[logging.Handler] = []


def setup_logging(verbose: bool = False, rotation: bool = True) -> str:
    """
    (Re)configure root logging and return the log file path.

    Calling it again replaces the handlers installed by the previous call.
    """
    reset_logging()
    root = logging.getLogger()

    path = get_log_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    if rotation:
        file_handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
    else:
        file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    file_handler.setLevel(logging.DEBUG)
    _installed.append(file_handler)

    if verbose:
        console_handler = RichHandler(console=Console(stderr=True), show_path=False)
        console_handler.setLevel(logging.DEBUG)
        _installed.append(console_handler)

    for handler in _installed:
        root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    return path


def reset_logging() -> None:
    """Detach and close the handlers installed by setup_logging()."""
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()
