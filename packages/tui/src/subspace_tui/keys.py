"""
Keyboard input handling for raw-mode terminals.

Decodes the legacy sequences a terminal sends when no extended keyboard
protocol is negotiated: CSI/SS3 cursor keys, CR/LF for enter, and C0
control characters for ctrl chords.

API:
- matches_key(data, key_id): check if input matches a key identifier
- parse_key(data): parse input and return the key identifier string
- KEY: helper constants for common keys
"""
from __future__ import annotations

# ─────────────────────────────────────────────────────────────────────────────
# KeyId type alias: key identifiers are plain strings like "up" or "ctrl+c"
# ─────────────────────────────────────────────────────────────────────────────

KeyId = str


class _KeyHelper:
    """Helper object for building key identifier strings."""

    enter = "enter"
    up = "up"
    down = "down"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


KEY = _KeyHelper()

# ─────────────────────────────────────────────────────────────────────────────
# Legacy sequence tables
# ─────────────────────────────────────────────────────────────────────────────

_LEGACY_KEY_SEQS: dict[str, list[str]] = {
    "up":       ["\x1b[A", "\x1bOA"],
    "down":     ["\x1b[B", "\x1bOB"],
    "right":    ["\x1b[C", "\x1bOC"],
    "left":     ["\x1b[D", "\x1bOD"],
    "home":     ["\x1b[H", "\x1bOH", "\x1b[1~", "\x1b[7~"],
    "end":      ["\x1b[F", "\x1bOF", "\x1b[4~", "\x1b[8~"],
    "delete":   ["\x1b[3~"],
    "pageUp":   ["\x1b[5~", "\x1b[[5~"],
    "pageDown": ["\x1b[6~", "\x1b[[6~"],
}

_LEGACY_SEQ_KEY_IDS: dict[str, str] = {
    seq: key_id
    for key_id, seqs in _LEGACY_KEY_SEQS.items()
    for seq in seqs
}

_ENTER_SEQS = ("\r", "\n", "\x1bOM")
_BACKSPACE_SEQS = ("\x7f", "\x08")


def _parse_key_id(key_id: str) -> tuple[str, bool, bool] | None:
    """Return (key, ctrl, alt) or None."""
    parts = key_id.lower().split("+")
    key = parts[-1] if parts else ""
    if not key:
        return None
    return key, "ctrl" in parts, "alt" in parts


def _raw_ctrl_char(key: str) -> str | None:
    """Get control character for key (ctrl+a → chr(1), etc.)."""
    if len(key) != 1:
        return None
    code = ord(key)
    if 97 <= code <= 122 or key in ("[", "\\", "]", "_"):
        return chr(code & 0x1f)
    return None


# ─────────────────────────────────────────────────────────────────────────────
# matches_key
# ─────────────────────────────────────────────────────────────────────────────

def matches_key(data: str, key_id: KeyId) -> bool:
    """Check if *data* (one raw input sequence) matches the given key identifier."""
    parsed = _parse_key_id(key_id)
    if not parsed:
        return False
    key, ctrl, alt = parsed

    if key in ("escape", "esc"):
        return not ctrl and not alt and data == "\x1b"

    if key in ("enter", "return"):
        if alt and not ctrl:
            return data == "\x1b\r"
        return not ctrl and not alt and data in _ENTER_SEQS

    if key == "tab":
        return not ctrl and not alt and data == "\t"

    if key == "space":
        if ctrl and not alt:
            return data == "\x00"
        return not ctrl and not alt and data == " "

    if key == "backspace":
        if alt and not ctrl:
            return data in ("\x1b\x7f", "\x1b\x08")
        return not ctrl and not alt and data in _BACKSPACE_SEQS

    for name, seqs in _LEGACY_KEY_SEQS.items():
        if key == name.lower():
            return not ctrl and not alt and data in seqs

    if len(key) == 1:
        raw_ctrl = _raw_ctrl_char(key)
        if ctrl and alt:
            return raw_ctrl is not None and data == f"\x1b{raw_ctrl}"
        if ctrl:
            return raw_ctrl is not None and data == raw_ctrl
        if alt:
            return data == f"\x1b{key}"
        return data == key

    return False


# ─────────────────────────────────────────────────────────────────────────────
# parse_key
# ─────────────────────────────────────────────────────────────────────────────

def parse_key(data: str) -> str | None:
    """Parse one raw input sequence and return a key identifier string, or None."""
    seq_id = _LEGACY_SEQ_KEY_IDS.get(data)
    if seq_id:
        return seq_id

    if data == "\x1b":
        return "escape"
    if data == "\t":
        return "tab"
    if data in _ENTER_SEQS:
        return "enter"
    if data == "\x00":
        return "ctrl+space"
    if data == " ":
        return "space"
    if data in _BACKSPACE_SEQS:
        return "backspace"
    if data == "\x1b\r":
        return "alt+enter"
    if data in ("\x1b\x7f", "\x1b\x08"):
        return "alt+backspace"

    if len(data) == 2 and data[0] == "\x1b":
        code = ord(data[1])
        if 1 <= code <= 26:
            return f"ctrl+alt+{chr(code + 96)}"
        if 32 < code <= 126:
            return f"alt+{data[1]}"

    if len(data) == 1:
        code = ord(data)
        if 1 <= code <= 26:
            return f"ctrl+{chr(code + 96)}"
        if 32 < code <= 126:
            return data

    return None
