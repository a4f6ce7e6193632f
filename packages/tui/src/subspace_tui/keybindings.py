"""
Menu keybindings.

Provides MenuAction type, DEFAULT_MENU_KEYBINDINGS, and the
MenuKeybindingsManager class.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Literal, Union

from .keys import KEY, KeyId, matches_key

# ─────────────────────────────────────────────────────────────────────────────
# MenuAction type
# ─────────────────────────────────────────────────────────────────────────────

MenuAction = Literal[
    "selectUp",
    "selectDown",
    "selectConfirm",
    "selectCancel",
]

MENU_ACTIONS: tuple[str, ...] = ("selectUp", "selectDown", "selectConfirm", "selectCancel")

MenuKeybindingsConfig = Mapping[str, Union[KeyId, "list[KeyId]", None]]

DEFAULT_MENU_KEYBINDINGS: dict[str, list[KeyId]] = {
    "selectUp":      [KEY.up, "k"],
    "selectDown":    [KEY.down, "j"],
    "selectConfirm": [KEY.enter],
    "selectCancel":  [KEY.ctrl("c")],
}


# ─────────────────────────────────────────────────────────────────────────────
# MenuKeybindingsManager
# ─────────────────────────────────────────────────────────────────────────────

class MenuKeybindingsManager:
    """Maps raw key sequences to menu actions, defaults overridden by config."""

    def __init__(self, config: MenuKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[str, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: MenuKeybindingsConfig) -> None:
        if not isinstance(config, Mapping):
            raise ValueError(
                f"Menu keybindings must map actions to keys, got {type(config).__name__}"
            )
        self._action_to_keys.clear()
        for action, keys in DEFAULT_MENU_KEYBINDINGS.items():
            self._action_to_keys[action] = list(keys)
        for action, keys in config.items():
            if action not in MENU_ACTIONS:
                raise ValueError(f"Unknown menu action: {action}")
            if keys is None:
                continue
            key_list = list(keys) if isinstance(keys, list) else [keys]
            for key in key_list:
                if not isinstance(key, str) or not key:
                    raise ValueError(f"Invalid key for {action}: {key!r}")
            self._action_to_keys[action] = key_list

    def matches(self, data: str, action: str) -> bool:
        """Check if input data matches a specific action."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        return any(matches_key(data, k) for k in keys)

    def action_for(self, data: str) -> str | None:
        """Return the first action bound to *data*, or None for unbound keys."""
        for action in MENU_ACTIONS:
            if self.matches(data, action):
                return action
        return None

    def get_keys(self, action: str) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])
