"""
Root conftest.py: isolates the CLI home directory and registers custom markers.

Markers:
  @pytest.mark.tty  : needs a POSIX pseudo-terminal; skipped where pty/termios are missing
"""
from __future__ import annotations

import importlib.util

import pytest

from subspace_tui import Terminal, TerminalIOError


# ---------------------------------------------------------------------------
# Custom markers
# ---------------------------------------------------------------------------

def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "tty: mark test as requiring a POSIX pseudo-terminal (pty + termios)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip @pytest.mark.tty tests on platforms without pty/termios."""
    has_pty = all(importlib.util.find_spec(name) is not None for name in ("pty", "termios", "tty"))
    if has_pty:
        return
    skip_tty = pytest.mark.skip(reason="Needs pty/termios (POSIX only)")
    for item in items:
        if "tty" in item.keywords:
            item.add_marker(skip_tty)


# ---------------------------------------------------------------------------
# Scripted terminal
# ---------------------------------------------------------------------------

class ScriptedTerminal(Terminal):
    """
    Terminal double that replays a fixed list of key sequences.

    Items that are exceptions are raised from read_key() instead of being
    returned. Running out of keys raises TerminalIOError, like a closed tty.
    """

    def __init__(
        self,
        keys: list[str | BaseException],
        anchor_row: int = 5,
        rows: int = 40,
        columns: int = 80,
    ) -> None:
        self._keys = list(keys)
        self._anchor_row = anchor_row
        self._rows = rows
        self._columns = columns
        self.raw = False
        self.enable_count = 0
        self.disable_count = 0
        self.writes: list[tuple[bool, str]] = []
        self.events: list[str] = []

    def enable_raw_mode(self) -> None:
        self.enable_count += 1
        self.raw = True
        self.events.append("enable")

    def disable_raw_mode(self) -> None:
        self.disable_count += 1
        self.raw = False
        self.events.append("disable")

    async def read_key(self) -> str:
        if not self._keys:
            raise TerminalIOError("terminal input closed")
        item = self._keys.pop(0)
        if isinstance(item, BaseException):
            raise item
        self.events.append(f"key:{item!r}")
        return item

    async def cursor_position(self) -> tuple[int, int]:
        return 0, self._anchor_row

    def write(self, data: str) -> None:
        self.writes.append((self.raw, data))
        self.events.append("write")

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def frames(self) -> list[str]:
        """Every full option-block frame written, in order."""
        return [data for _, data in self.writes if "\x1b7" in data]


@pytest.fixture
def scripted_terminal():
    return ScriptedTerminal


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def cli_home(tmp_path, monkeypatch):
    """Point the CLI home directory at a per-test temp dir."""
    home = tmp_path / "subspace-home"
    monkeypatch.setenv("SUBSPACE_CLI_DIR", str(home))
    monkeypatch.delenv("SUBSPACE_FARMER_BIN", raising=False)
    return home
