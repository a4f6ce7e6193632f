"""
subspace_cli: command-line front end for farming on the Subspace network.
"""
import logging

from .commands import COMMAND_TABLE, Command, CommandSpec, Farm, Info, Init, OpenLogs, Wipe
from .config import APP_NAME, VERSION
from .dispatch import ActionTable, dispatch
from .errors import ActionError, PromptParseError, SubspaceCliError, UsageError
from .menu import choose_command
from .resolver import resolve_command

__version__ = VERSION

# Records logged before setup_logging() runs are dropped
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "APP_NAME",
    "COMMAND_TABLE",
    "ActionError",
    "ActionTable",
    "Command",
    "CommandSpec",
    "Farm",
    "Info",
    "Init",
    "OpenLogs",
    "PromptParseError",
    "SubspaceCliError",
    "UsageError",
    "VERSION",
    "Wipe",
    "choose_command",
    "dispatch",
    "resolve_command",
]
