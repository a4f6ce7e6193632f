"""
Configuration paths and the farmer config file.

Layout under the home directory (default ~/.subspace-cli, override with
SUBSPACE_CLI_DIR):

    settings.json   farmer config written by `subspace init`
    logs/           log files, opened by `subspace open-logs`
    data/           node and farmer data, farming summary
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any

from dotenv import load_dotenv

from .errors import ActionError

logger = logging.getLogger(__name__)

# App metadata
APP_NAME: str = "subspace"
VERSION: str = "0.1.0"
CONFIG_DIR_NAME: str = ".subspace-cli"

ENV_HOME_DIR: str = "SUBSPACE_CLI_DIR"
ENV_FARMER_BIN: str = "SUBSPACE_FARMER_BIN"

DEFAULT_PLOT_SIZE: str = "100G"


# ============================================================================
# Paths
# ============================================================================


def get_home_dir() -> str:
    """Get the CLI home directory (e.g., ~/.subspace-cli/)."""
    env_dir = os.environ.get(ENV_HOME_DIR)
    if env_dir:
        return os.path.expanduser(env_dir)
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def get_config_path() -> str:
    """Get path to settings.json."""
    return os.path.join(get_home_dir(), "settings.json")


def get_logs_dir() -> str:
    return os.path.join(get_home_dir(), "logs")


def get_log_path() -> str:
    return os.path.join(get_logs_dir(), f"{APP_NAME}.log")


def get_data_dir() -> str:
    return os.path.join(get_home_dir(), "data")


def get_summary_path() -> str:
    """Get path to the farming summary written by the farmer."""
    return os.path.join(get_data_dir(), "summary.json")


def load_env_files(cwd: str) -> None:
    """Load .env from the working directory without overriding the environment."""
    load_dotenv(os.path.join(cwd, ".env"), override=False)


# ============================================================================
# Config file
# ============================================================================


@dataclass
class CliConfig:
    reward_address: str = ""
    plot_size: str = DEFAULT_PLOT_SIZE
    node_dir: str = field(default_factory=lambda: os.path.join(get_data_dir(), "node"))
    farmer_dir: str = field(default_factory=lambda: os.path.join(get_data_dir(), "farmer"))
    farmer_bin: str = "subspace-farmer"
    keybindings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CliConfig:
        known = {f for f in cls.__dataclass_fields__}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ActionError(
                f"Unknown config keys in {get_config_path()}: {', '.join(unknown)}",
                hint="Fix the keys by hand or recreate the file with `subspace wipe` and `subspace init`.",
            )
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def resolved_farmer_bin(self) -> str:
        return os.environ.get(ENV_FARMER_BIN) or self.farmer_bin


def config_exists() -> bool:
    return os.path.exists(get_config_path())


def load_config() -> CliConfig:
    """Read settings.json; raises ActionError when missing or malformed."""
    path = get_config_path()
    if not os.path.exists(path):
        raise ActionError(
            f"Config file not found at {path}",
            hint="Run `subspace init` first.",
        )
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ActionError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ActionError(f"Config file {path} must contain a JSON object")
    return CliConfig.from_dict(data)


def save_config(config: CliConfig) -> str:
    """Write settings.json, creating the home directory; returns its path."""
    path = get_config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
        f.write("\n")
    return path


def load_keybindings_config() -> dict[str, Any]:
    """
    Keybinding overrides from settings.json.

    Empty when there is no config yet or when it cannot be loaded.
    """
    if not config_exists():
        return {}
    try:
        config = load_config()
    except ActionError as exc:
        logger.warning("ignoring keybindings, config unreadable: %s", exc.message)
        return {}
    return config.keybindings
