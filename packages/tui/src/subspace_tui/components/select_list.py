"""SelectList component: fixed option list redrawn in place at an anchor row."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..utils import clear_line_tail, green, move_to, restore_cursor, save_cursor, truncate_to_width

DEFAULT_TITLE = "Please select an option below using arrow keys (or `j` and `k`):"

# Row offsets from the anchor row
TITLE_OFFSET = 2
OPTIONS_OFFSET = 4
# Blank lines left between the last option and the cursor after confirming
TRAILING_GAP = 2
LEFT_MARGIN = 1


@dataclass
class SelectListTheme:
    selected_text: Callable[[str], str] = field(default=green)
    title: Callable[[str], str] = field(default=lambda x: x)


class SelectList:
    """
    Navigable option list.

    Navigation clamps at both ends; moving past the first or last option is
    a no-op. ``render()`` returns one complete frame that repositions the
    cursor relative to ``anchor_row`` and restores it afterwards, so writing
    successive frames replaces the block rather than scrolling.
    """

    def __init__(
        self,
        options: Sequence[str],
        anchor_row: int = 0,
        title: str = DEFAULT_TITLE,
        theme: SelectListTheme | None = None,
    ) -> None:
        if not options:
            raise ValueError("SelectList needs at least one option")
        self._options = tuple(options)
        self._selected_index = 0
        self.anchor_row = anchor_row
        self._title = title
        self._theme = theme or SelectListTheme()

    @property
    def options(self) -> tuple[str, ...]:
        return self._options

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def height(self) -> int:
        """Rows the block occupies below the anchor, including the gap after it."""
        return OPTIONS_OFFSET + len(self._options) + TRAILING_GAP

    def move_up(self) -> bool:
        """Select the previous option; returns False at the top."""
        if self._selected_index > 0:
            self._selected_index -= 1
            return True
        return False

    def move_down(self) -> bool:
        """Select the next option; returns False at the bottom."""
        if self._selected_index < len(self._options) - 1:
            self._selected_index += 1
            return True
        return False

    def get_selected_item(self) -> str:
        return self._options[self._selected_index]

    def render(self, width: int = 80) -> str:
        anchor = self.anchor_row
        max_w = max(width - LEFT_MARGIN - 4, 1)
        parts = [
            move_to(LEFT_MARGIN, anchor + TITLE_OFFSET),
            save_cursor(),
            self._theme.title(truncate_to_width(self._title, max_w)),
            clear_line_tail(),
        ]
        for i, option in enumerate(self._options):
            label = truncate_to_width(option, max_w)
            if i == self._selected_index:
                line = " " + self._theme.selected_text(f" > {label} ")
            else:
                line = f"   {label} "
            parts.append(move_to(LEFT_MARGIN, anchor + OPTIONS_OFFSET + i))
            parts.append(line)
            parts.append(clear_line_tail())
        parts.append(restore_cursor())
        return "".join(parts)

    def end_position(self) -> tuple[int, int]:
        """Where the cursor goes once a choice is confirmed: (col, row)."""
        return 0, self.anchor_row + len(self._options) + OPTIONS_OFFSET + TRAILING_GAP
