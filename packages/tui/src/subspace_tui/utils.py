"""
Terminal text utilities.

Provides:
- cursor/erase sequence builders (move_to, save_cursor, restore_cursor, ...)
- green(): SGR colour for the selected option
- visible_width(): terminal column width of a string, ANSI-aware
- truncate_to_width(): truncate plain text with an ellipsis
"""
from __future__ import annotations

import re

from wcwidth import wcswidth, wcwidth

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]|\x1b[78]")

# ─────────────────────────────────────────────────────────────────────────────
# Cursor and erase sequences
# ─────────────────────────────────────────────────────────────────────────────


def move_to(col: int, row: int) -> str:
    """Absolute cursor move; col/row are 0-based, CUP is 1-based."""
    return f"\x1b[{row + 1};{col + 1}H"


def save_cursor() -> str:
    return "\x1b7"


def restore_cursor() -> str:
    return "\x1b8"


def clear_line_tail() -> str:
    return "\x1b[K"


def query_cursor_position() -> str:
    return "\x1b[6n"


# ─────────────────────────────────────────────────────────────────────────────
# Styles
# ─────────────────────────────────────────────────────────────────────────────


def green(s: str) -> str:
    return f"\x1b[32m{s}\x1b[39m"


# ─────────────────────────────────────────────────────────────────────────────
# Width
# ─────────────────────────────────────────────────────────────────────────────


def strip_ansi(s: str) -> str:
    return _ANSI_RE.sub("", s)


def visible_width(s: str) -> int:
    """Column width of *s* once escape sequences are removed."""
    clean = strip_ansi(s)
    if all(0x20 <= ord(c) <= 0x7e for c in clean):
        return len(clean)
    width = wcswidth(clean)
    if width >= 0:
        return width
    # Non-printable characters make wcswidth bail out; count them as zero
    return sum(max(wcwidth(c), 0) for c in clean)


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate plain *text* to max_width columns, adding ellipsis if needed."""
    if visible_width(text) <= max_width:
        return text
    target = max_width - len(ellipsis)
    if target <= 0:
        return ellipsis[:max(max_width, 0)]

    result = ""
    current = 0
    for ch in text:
        w = max(wcwidth(ch), 0)
        if current + w > target:
            break
        result += ch
        current += w
    return result + ellipsis
