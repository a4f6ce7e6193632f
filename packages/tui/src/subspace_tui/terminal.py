"""
Terminal abstraction.

Provides:
- Terminal: abstract base class (interface)
- ProcessTerminal: real terminal on the process's stdin/stdout + raw mode
- TerminalIOError: raised for any failure talking to the terminal
"""
from __future__ import annotations

import asyncio
import logging
import os
import re
import select
import sys
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import IO, Iterator

from .stdin_buffer import StdinBuffer
from .utils import query_cursor_position

logger = logging.getLogger(__name__)

_CURSOR_REPORT_RE = re.compile(r"^\x1b\[(\d+);(\d+)R$")


class TerminalIOError(OSError):
    """Reading from or writing to the terminal failed."""


# ─────────────────────────────────────────────────────────────────────────────
# Terminal ABC
# ─────────────────────────────────────────────────────────────────────────────

class Terminal(ABC):
    """
    Minimal terminal interface used by the select menu.

    Raw mode is a scoped acquisition: use ``raw_mode()`` so that it is
    released on every exit path.
    """

    @abstractmethod
    def enable_raw_mode(self) -> None:
        """Switch input to raw mode and start delivering key sequences."""

    @abstractmethod
    def disable_raw_mode(self) -> None:
        """Restore the terminal mode saved by enable_raw_mode()."""

    @abstractmethod
    async def read_key(self) -> str:
        """Wait for the next complete input sequence."""

    @abstractmethod
    async def cursor_position(self) -> tuple[int, int]:
        """Return the current (col, row) of the cursor, 0-based."""

    @abstractmethod
    def write(self, data: str) -> None:
        """Write output to the terminal and flush it."""

    @property
    @abstractmethod
    def columns(self) -> int:
        """Terminal width in columns."""

    @property
    @abstractmethod
    def rows(self) -> int:
        """Terminal height in rows."""

    @contextmanager
    def raw_mode(self) -> Iterator[Terminal]:
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()


# ─────────────────────────────────────────────────────────────────────────────
# ProcessTerminal
# ─────────────────────────────────────────────────────────────────────────────

class ProcessTerminal(Terminal):
    """
    Real terminal using the process's stdin/stdout.

    While raw mode is on, a daemon thread reads the input fd, splits the
    bytes into key sequences and hands them to the event loop through an
    asyncio.Queue, so read_key() processes exactly one event at a time.
    """

    def __init__(
        self,
        input_fd: int | None = None,
        output: IO[str] | None = None,
        cursor_report_timeout: float = 1.0,
    ) -> None:
        self._input_fd = input_fd
        self._output = output
        self._cursor_report_timeout = cursor_report_timeout
        self._old_termios: list | None = None
        self._queue: asyncio.Queue[str | BaseException] | None = None
        self._pending: list[str] = []
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_reading: threading.Event | None = None
        self._read_thread: threading.Thread | None = None
        self._stdin_buffer: StdinBuffer | None = None

    @property
    def input_fd(self) -> int:
        return self._input_fd if self._input_fd is not None else sys.stdin.fileno()

    @property
    def output(self) -> IO[str]:
        return self._output if self._output is not None else sys.stdout

    @property
    def is_raw(self) -> bool:
        return self._old_termios is not None

    # -- raw mode ------------------------------------------------------------

    def enable_raw_mode(self) -> None:
        """Put the input fd in raw mode (no echo, no line buffering)."""
        if self._old_termios is not None:
            raise RuntimeError("raw mode is already enabled")
        try:
            import termios
            import tty
        except ImportError as exc:
            raise TerminalIOError("raw terminal mode is not supported on this platform") from exc

        fd = self.input_fd
        try:
            self._old_termios = termios.tcgetattr(fd)
            tty.setraw(fd)
        except (termios.error, OSError) as exc:
            self._old_termios = None
            raise TerminalIOError(f"could not enable raw mode: {exc}") from exc
        logger.debug("raw mode enabled on fd %d", fd)

        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._pending = []
        self._start_reader(fd)

    def disable_raw_mode(self) -> None:
        if self._old_termios is None:
            raise RuntimeError("raw mode is not enabled")
        self._stop_reader()

        import termios

        fd = self.input_fd
        saved = self._old_termios
        self._old_termios = None
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError) as exc:
            raise TerminalIOError(f"could not restore terminal mode: {exc}") from exc
        logger.debug("raw mode disabled on fd %d", fd)

    # -- input -----------------------------------------------------------------

    def _deliver(self, item: str | BaseException) -> None:
        """Hand an item from the reader thread to the event loop."""
        loop, queue = self._loop, self._queue
        if loop is None or queue is None:
            return
        try:
            loop.call_soon_threadsafe(queue.put_nowait, item)
        except RuntimeError:
            # Event loop already closed; nobody is waiting for input any more
            if self._stop_reading is not None:
                self._stop_reading.set()

    def _start_reader(self, fd: int) -> None:
        stop = threading.Event()
        self._stop_reading = stop
        self._stdin_buffer = StdinBuffer(timeout_ms=10, on_data=self._deliver)
        buf = self._stdin_buffer

        def _read_loop() -> None:
            while not stop.is_set():
                try:
                    r, _, _ = select.select([fd], [], [], 0.05)
                    if not r:
                        continue
                    data = os.read(fd, 1024)
                except (OSError, ValueError) as exc:
                    self._deliver(TerminalIOError(f"reading terminal input failed: {exc}"))
                    return
                if not data:
                    self._deliver(TerminalIOError("terminal input closed"))
                    return
                buf.process(data)

        t = threading.Thread(target=_read_loop, name="terminal-reader", daemon=True)
        t.start()
        self._read_thread = t

    def _stop_reader(self) -> None:
        if self._stop_reading is not None:
            self._stop_reading.set()
        if self._read_thread is not None:
            self._read_thread.join(timeout=0.5)
        if self._stdin_buffer is not None:
            self._stdin_buffer.destroy()
        self._stop_reading = None
        self._read_thread = None
        self._stdin_buffer = None
        self._queue = None
        self._loop = None

    async def _next_item(self) -> str:
        if self._queue is None:
            raise RuntimeError("raw mode is not enabled")
        item = await self._queue.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def read_key(self) -> str:
        if self._pending:
            return self._pending.pop(0)
        return await self._next_item()

    async def cursor_position(self) -> tuple[int, int]:
        """Ask the terminal where the cursor is (DSR 6) and wait for the report."""
        self.write(query_cursor_position())
        deferred: list[str] = []
        try:
            while True:
                seq = await asyncio.wait_for(self._next_item(), self._cursor_report_timeout)
                m = _CURSOR_REPORT_RE.match(seq)
                if m:
                    return int(m.group(2)) - 1, int(m.group(1)) - 1
                # Keys typed before the report arrived are replayed later
                deferred.append(seq)
        except asyncio.TimeoutError as exc:
            raise TerminalIOError("terminal did not report the cursor position") from exc
        finally:
            self._pending.extend(deferred)

    # -- output ----------------------------------------------------------------

    def write(self, data: str) -> None:
        try:
            self.output.write(data)
            self.output.flush()
        except (OSError, ValueError) as exc:
            raise TerminalIOError(f"writing to terminal failed: {exc}") from exc

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self.output.fileno()).columns
        except (OSError, ValueError):
            return int(os.environ.get("COLUMNS", "80"))

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self.output.fileno()).lines
        except (OSError, ValueError):
            return int(os.environ.get("LINES", "24"))
