"""Error types surfaced by the CLI and their exit codes."""
from __future__ import annotations

from subspace_tui import TerminalIOError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

SUPPORT_MESSAGE = (
    "If this keeps happening, run `subspace open-logs` and attach the latest "
    "log file when asking for help on the Subspace forum or Discord."
)


class SubspaceCliError(Exception):
    """Base class for errors reported to the user."""

    exit_code = EXIT_FAILURE

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class UsageError(SubspaceCliError):
    """The command line could not be turned into a command."""

    exit_code = EXIT_USAGE


class PromptParseError(SubspaceCliError):
    """An answer to a yes/no question was neither yes nor no."""

    def __init__(self, answer: str, question: str) -> None:
        shown = answer.strip() or "<empty>"
        super().__init__(f"expected 'y' or 'n' for {question!r}, got {shown!r}")
        self.answer = answer
        self.question = question


class ActionError(SubspaceCliError):
    """An action failed; carries the support hint unless another is given."""

    def __init__(self, message: str, hint: str | None = SUPPORT_MESSAGE) -> None:
        super().__init__(message, hint)


__all__ = [
    "EXIT_FAILURE",
    "EXIT_OK",
    "EXIT_USAGE",
    "SUPPORT_MESSAGE",
    "ActionError",
    "PromptParseError",
    "SubspaceCliError",
    "TerminalIOError",
    "UsageError",
]
