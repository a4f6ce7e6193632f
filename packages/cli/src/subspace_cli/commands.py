"""
Command model.

Every way of invoking the CLI resolves to exactly one of five commands.
COMMAND_TABLE fixes their order, which is both the help order and the
order of the interactive menu.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Init:
    pass


@dataclass(frozen=True)
class Farm:
    verbose: bool = False
    executor: bool = False
    no_rotation: bool = False


@dataclass(frozen=True)
class Wipe:
    farmer: bool = False
    node: bool = False


@dataclass(frozen=True)
class Info:
    pass


@dataclass(frozen=True)
class OpenLogs:
    pass


Command = Union[Init, Farm, Wipe, Info, OpenLogs]


@dataclass(frozen=True)
class CommandSpec:
    name: str
    label: str
    help: str
    command_cls: type


COMMAND_TABLE: tuple[CommandSpec, ...] = (
    CommandSpec(
        "init", "init",
        "initializes the config file required for the farming",
        Init,
    ),
    CommandSpec(
        "farm", "farm",
        "starting the farming process (along with node in the background)",
        Farm,
    ),
    CommandSpec(
        "wipe", "wipe",
        "wipes the node and farm instance (along with your plots)",
        Wipe,
    ),
    CommandSpec(
        "info", "info",
        "displays info about the farmer instance (i.e. total amount of rewards, "
        "and status of initial plotting)",
        Info,
    ),
    CommandSpec(
        "open-logs", "open logs directory",
        "opens the directory holding the log files",
        OpenLogs,
    ),
)


def menu_labels() -> list[str]:
    return [spec.label for spec in COMMAND_TABLE]


def spec_for(command: Command) -> CommandSpec:
    for spec in COMMAND_TABLE:
        if isinstance(command, spec.command_cls):
            return spec
    raise TypeError(f"Not a command: {command!r}")


def label_of(command: Command) -> str:
    return spec_for(command).label
