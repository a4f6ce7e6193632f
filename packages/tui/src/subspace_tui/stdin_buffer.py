"""
StdinBuffer: splits raw terminal input into complete key sequences.

A single read from stdin may carry several keys ("jjk" from key repeat) or
only part of an escape sequence. The buffer holds partial sequences until
they complete, or until a short timeout proves a lone ESC was meant.
"""
from __future__ import annotations

import re
import threading
from typing import Callable

ESC = "\x1b"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


# ─────────────────────────────────────────────────────────────────────────────
# Sequence completeness detection
# ─────────────────────────────────────────────────────────────────────────────

def _is_complete_csi(data: str) -> str:
    """Returns 'complete' or 'incomplete' for a CSI sequence."""
    if len(data) < 3:
        return "incomplete"
    payload = data[2:]
    last = payload[-1]
    if 0x40 <= ord(last) <= 0x7e:
        if payload.startswith("<"):
            return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
        return "complete"
    return "incomplete"


def _is_complete_sequence(data: str) -> str:
    """Returns 'complete', 'incomplete', or 'not-escape'."""
    if not data.startswith(ESC):
        return "not-escape"
    if len(data) == 1:
        return "incomplete"
    after = data[1:]

    if after.startswith("["):
        # "ESC [ [ 5 ~" is the linux console page-up variant
        if after.startswith("[["):
            return "complete" if len(after) >= 3 and after[-1] in "~ABCDE" else "incomplete"
        return _is_complete_csi(data)

    if after.startswith("]"):
        if data.endswith(ESC + "\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    if after.startswith("O"):
        return "complete" if len(after) >= 2 else "incomplete"

    return "complete"


def extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """
    Split buffer into complete sequences.
    Returns (sequences, remainder).
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if remaining.startswith(ESC):
            seq_end = 1
            while seq_end <= len(remaining):
                candidate = remaining[:seq_end]
                status = _is_complete_sequence(candidate)
                if status == "incomplete":
                    seq_end += 1
                    continue
                sequences.append(candidate)
                pos += seq_end
                break
            else:
                # Ran off end: incomplete sequence
                return sequences, remaining
        else:
            sequences.append(remaining[0])
            pos += 1

    return sequences, ""


# ─────────────────────────────────────────────────────────────────────────────
# StdinBuffer
# ─────────────────────────────────────────────────────────────────────────────

class StdinBuffer:
    """
    Buffers stdin input and hands complete sequences to *on_data*.
    Handles partial escape sequences that arrive across multiple chunks.
    """

    def __init__(
        self,
        timeout_ms: int = 10,
        on_data: Callable[[str], None] | None = None,
    ) -> None:
        self._timeout_ms = timeout_ms
        self._buffer = ""
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()
        self._on_data = on_data

    def _emit_data(self, seq: str) -> None:
        if self._on_data is not None:
            self._on_data(seq)

    def _cancel_timer(self) -> None:
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def process(self, data: str | bytes) -> None:
        """Feed input data into the buffer."""
        if isinstance(data, bytes):
            # Meta-sends-high-bit terminals deliver alt+x as one byte >= 128
            if len(data) == 1 and data[0] > 127:
                s = ESC + chr(data[0] - 128)
            else:
                s = data.decode("utf-8", errors="replace")
        else:
            s = data

        with self._lock:
            self._cancel_timer()
            self._buffer += s
            seqs, self._buffer = extract_complete_sequences(self._buffer)
            if self._buffer:
                self._timer = threading.Timer(self._timeout_ms / 1000.0, self._flush_timer)
                self._timer.daemon = True
                self._timer.start()

        for seq in seqs:
            self._emit_data(seq)

    def _flush_timer(self) -> None:
        for seq in self.flush():
            self._emit_data(seq)

    def flush(self) -> list[str]:
        """Flush the buffer, returning any pending sequences."""
        with self._lock:
            self._cancel_timer()
            if not self._buffer:
                return []
            seqs = [self._buffer]
            self._buffer = ""
            return seqs

    def destroy(self) -> None:
        """Clear buffer and cancel pending timer."""
        with self._lock:
            self._cancel_timer()
            self._buffer = ""
