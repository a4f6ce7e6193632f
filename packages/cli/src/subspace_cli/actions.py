"""
Actions run once a command is resolved.

Each action is an async callable taking the command's flags. Failures are
raised as ActionError; anything else escaping an action is wrapped by
dispatch().
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import (
    ENV_FARMER_BIN,
    CliConfig,
    config_exists,
    get_config_path,
    get_logs_dir,
    get_summary_path,
    load_config,
    save_config,
)
from .errors import ActionError
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)

console = Console()

_READ_CHUNK = 4096
_MAX_LINE_BYTES = 64 * 1024


async def init() -> None:
    """Write a default settings.json and create the data directories."""
    if config_exists():
        raise ActionError(
            f"Config file already exists at {get_config_path()}",
            hint="Run `subspace wipe` to start over, or edit the file directly.",
        )
    config = CliConfig()
    path = save_config(config)
    os.makedirs(config.node_dir, exist_ok=True)
    os.makedirs(config.farmer_dir, exist_ok=True)
    logger.info("wrote default config to %s", path)
    console.print(f"[green]Config written to[/green] {path}")
    console.print("Set [bold]reward_address[/bold] in it before running [bold]subspace farm[/bold].")


def _farmer_args(config: CliConfig, executor: bool) -> list[str]:
    args = [
        config.resolved_farmer_bin(),
        "farm",
        "--reward-address", config.reward_address,
        "--plot-size", config.plot_size,
        "--node-dir", config.node_dir,
        "--farmer-dir", config.farmer_dir,
        "--summary-path", get_summary_path(),
    ]
    if executor:
        args.append("--executor")
    return args


def _log_farmer_line(raw: bytes) -> None:
    logger.info("farmer: %s", raw.decode("utf-8", errors="replace").rstrip())


async def _stream_output(proc: asyncio.subprocess.Process) -> None:
    """Log the farmer's output line by line until it closes stdout."""
    assert proc.stdout is not None
    pending = b""
    while True:
        chunk = await proc.stdout.read(_READ_CHUNK)
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split(b"\n")
        for line in lines:
            _log_farmer_line(line)
        # Unterminated output is logged in pieces
        if len(pending) > _MAX_LINE_BYTES:
            _log_farmer_line(pending)
            pending = b""
    if pending:
        _log_farmer_line(pending)


async def farm(verbose: bool = False, executor: bool = False, no_rotation: bool = False) -> None:
    """Start the farmer process and stream its output into the log."""
    config = load_config()
    if not config.reward_address:
        raise ActionError(
            f"No reward address configured in {get_config_path()}",
            hint="Set `reward_address` in the config file, then run `subspace farm` again.",
        )

    log_path = setup_logging(verbose=verbose, rotation=not no_rotation)
    args = _farmer_args(config, executor)
    logger.info("starting farmer: %s", " ".join(args))
    console.print(f"Farming started, logs are written to {log_path}")

    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError as exc:
        raise ActionError(
            f"Farmer executable {args[0]!r} not found",
            hint=f"Install the farmer or point {ENV_FARMER_BIN} / `farmer_bin` at it.",
        ) from exc

    try:
        await _stream_output(proc)
        code = await proc.wait()
    finally:
        if proc.returncode is None:
            logger.info("stopping farmer (pid %d)", proc.pid)
            try:
                proc.terminate()
            except ProcessLookupError:
                pass
            await proc.wait()

    if code != 0:
        raise ActionError(f"Farmer exited with code {code}")
    logger.info("farmer exited cleanly")


def _remove_path(path: str) -> bool:
    if os.path.isdir(path):
        shutil.rmtree(path)
        return True
    if os.path.exists(path):
        os.remove(path)
        return True
    return False


async def wipe(farmer: bool = False, node: bool = False) -> None:
    """
    Remove farmer and/or node data. With neither flag everything goes,
    including the config file and the farming summary.
    """
    config = CliConfig()
    if config_exists():
        try:
            config = load_config()
        except ActionError as exc:
            logger.warning("config unreadable, wiping default locations: %s", exc.message)
            console.print(f"[yellow]Config unreadable, using default data locations:[/yellow] {escape(exc.message)}")
    everything = not farmer and not node

    targets: list[str] = []
    if farmer or everything:
        targets.append(config.farmer_dir)
    if node or everything:
        targets.append(config.node_dir)
    if everything:
        targets.extend([get_summary_path(), get_config_path()])

    for path in targets:
        try:
            removed = _remove_path(path)
        except OSError as exc:
            raise ActionError(f"Could not remove {path}: {exc}") from exc
        if removed:
            logger.info("wiped %s", path)
            console.print(f"[yellow]Removed[/yellow] {path}")
        else:
            console.print(f"[dim]Nothing to remove at {path}[/dim]")


_SUMMARY_FIELDS = (
    ("initial_plotting_finished", "Initial plotting finished"),
    ("user_space_pledged", "Space pledged"),
    ("farmed_block_count", "Farmed blocks"),
    ("vote_count", "Votes"),
    ("total_rewards", "Total rewards"),
)


async def info() -> None:
    """Print the farming summary kept by the farmer."""
    path = get_summary_path()
    if not os.path.exists(path):
        console.print("[dim]No farming summary yet. Run `subspace farm` first.[/dim]")
        return
    try:
        with open(path, encoding="utf-8") as f:
            summary = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ActionError(f"Could not read farming summary {path}: {exc}") from exc

    table = Table(title="Farmer Info")
    table.add_column("Field")
    table.add_column("Value")
    for key, label in _SUMMARY_FIELDS:
        value = summary.get(key)
        if isinstance(value, bool):
            shown = "✓" if value else "✗"
        elif value is None:
            shown = "-"
        else:
            shown = str(value)
        table.add_row(label, shown)
    console.print(table)


async def open_logs() -> None:
    """Open the logs directory in the platform file manager."""
    logs_dir = get_logs_dir()
    os.makedirs(logs_dir, exist_ok=True)
    code = typer.launch(logs_dir)
    if code != 0:
        raise ActionError(f"Could not open {logs_dir} (launcher exited with code {code})")
    console.print(f"Opened {logs_dir}")
