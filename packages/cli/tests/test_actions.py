"""Tests for subspace_cli.actions"""
from __future__ import annotations

import asyncio
import json
import os
import stat
import sys

import pytest

from subspace_cli import actions
from subspace_cli.config import (
    CliConfig,
    get_config_path,
    get_log_path,
    get_summary_path,
    load_config,
    save_config,
)
from subspace_cli.errors import ActionError
from subspace_cli.logging_setup import reset_logging


@pytest.fixture
def configured():
    config = CliConfig(reward_address="st7QfRbHwTTi7yJsXSbqL5kQfr")
    save_config(config)
    return config


@pytest.fixture
def clean_logging():
    yield
    reset_logging()


# ============================================================================
# init
# ============================================================================


@pytest.mark.asyncio
async def test_init_writes_default_config(capsys) -> None:
    await actions.init()
    config = load_config()
    assert config == CliConfig()
    assert os.path.isdir(config.node_dir)
    assert os.path.isdir(config.farmer_dir)
    assert get_config_path() in capsys.readouterr().out.replace("\n", "")


@pytest.mark.asyncio
async def test_init_twice_fails() -> None:
    await actions.init()
    with pytest.raises(ActionError, match="already exists"):
        await actions.init()


# ============================================================================
# wipe
# ============================================================================


def _populate(config: CliConfig) -> None:
    os.makedirs(config.node_dir, exist_ok=True)
    os.makedirs(config.farmer_dir, exist_ok=True)
    with open(os.path.join(config.farmer_dir, "plot.bin"), "wb") as f:
        f.write(b"\0" * 16)
    with open(get_summary_path(), "w", encoding="utf-8") as f:
        json.dump({"farmed_block_count": 1}, f)


@pytest.mark.asyncio
async def test_wipe_without_flags_removes_everything(configured) -> None:
    _populate(configured)
    await actions.wipe()
    assert not os.path.exists(configured.node_dir)
    assert not os.path.exists(configured.farmer_dir)
    assert not os.path.exists(get_summary_path())
    assert not os.path.exists(get_config_path())


@pytest.mark.asyncio
async def test_wipe_farmer_only(configured) -> None:
    _populate(configured)
    await actions.wipe(farmer=True)
    assert not os.path.exists(configured.farmer_dir)
    assert os.path.isdir(configured.node_dir)
    assert os.path.exists(get_config_path())
    assert os.path.exists(get_summary_path())


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ['{"reward_address": "x", "stale_key": 1}', "{not json"])
async def test_wipe_recovers_from_unreadable_config(content, capsys) -> None:
    defaults = CliConfig()
    _populate(defaults)
    with open(get_config_path(), "w", encoding="utf-8") as f:
        f.write(content)

    await actions.wipe()

    assert not os.path.exists(defaults.node_dir)
    assert not os.path.exists(defaults.farmer_dir)
    assert not os.path.exists(get_summary_path())
    assert not os.path.exists(get_config_path())
    assert "Config unreadable" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_wipe_with_nothing_on_disk(capsys) -> None:
    await actions.wipe(node=True)
    assert "Nothing to remove" in capsys.readouterr().out


# ============================================================================
# info
# ============================================================================


@pytest.mark.asyncio
async def test_info_without_summary(capsys) -> None:
    await actions.info()
    assert "No farming summary yet" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_info_prints_summary_table(capsys) -> None:
    os.makedirs(os.path.dirname(get_summary_path()), exist_ok=True)
    with open(get_summary_path(), "w", encoding="utf-8") as f:
        json.dump({"initial_plotting_finished": True, "farmed_block_count": 42}, f)
    await actions.info()
    out = capsys.readouterr().out
    assert "Farmer Info" in out
    assert "Farmed blocks" in out
    assert "42" in out


@pytest.mark.asyncio
async def test_info_corrupt_summary() -> None:
    os.makedirs(os.path.dirname(get_summary_path()), exist_ok=True)
    with open(get_summary_path(), "w", encoding="utf-8") as f:
        f.write("{not json")
    with pytest.raises(ActionError, match="Could not read farming summary"):
        await actions.info()


# ============================================================================
# farm
# ============================================================================


def _fake_farmer(tmp_path, body: str) -> str:
    script = tmp_path / "fake-farmer"
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return str(script)


def _is_running(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    return True


async def _wait_for_pid(path) -> int:
    for _ in range(500):
        if path.exists() and path.read_text().strip():
            return int(path.read_text())
        await asyncio.sleep(0.01)
    raise AssertionError("farmer never started")


@pytest.mark.asyncio
async def test_farm_requires_config() -> None:
    with pytest.raises(ActionError) as exc_info:
        await actions.farm()
    assert exc_info.value.hint == "Run `subspace init` first."


@pytest.mark.asyncio
async def test_farm_requires_reward_address() -> None:
    save_config(CliConfig())
    with pytest.raises(ActionError, match="reward address"):
        await actions.farm()


@pytest.mark.asyncio
async def test_farm_missing_binary(configured, monkeypatch, clean_logging) -> None:
    monkeypatch.setenv("SUBSPACE_FARMER_BIN", os.path.join(os.getcwd(), "no-such-farmer"))
    with pytest.raises(ActionError, match="not found"):
        await actions.farm()


@pytest.mark.asyncio
async def test_farm_nonzero_exit(configured, monkeypatch, clean_logging) -> None:
    # the interpreter rejects the farmer arguments and exits non-zero
    monkeypatch.setenv("SUBSPACE_FARMER_BIN", sys.executable)
    with pytest.raises(ActionError, match="Farmer exited with code"):
        await actions.farm()


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
@pytest.mark.asyncio
async def test_farm_streams_output_to_log(configured, tmp_path, monkeypatch, clean_logging) -> None:
    farmer = _fake_farmer(tmp_path, 'echo "plotting sector 0"\necho "args: $*"\n')
    monkeypatch.setenv("SUBSPACE_FARMER_BIN", farmer)

    await actions.farm(executor=True, no_rotation=True)
    reset_logging()

    with open(get_log_path(), encoding="utf-8") as f:
        log = f.read()
    assert "farmer: plotting sector 0" in log
    assert "--reward-address st7QfRbHwTTi7yJsXSbqL5kQfr" in log
    assert "--executor" in log
    assert "farmer exited cleanly" in log


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
@pytest.mark.asyncio
async def test_farm_logs_unterminated_long_output(configured, tmp_path, monkeypatch, clean_logging) -> None:
    # 70000 bytes without a newline, longer than a StreamReader line
    farmer = _fake_farmer(tmp_path, "head -c 70000 /dev/zero | tr '\\0' x\n")
    monkeypatch.setenv("SUBSPACE_FARMER_BIN", farmer)

    await actions.farm()
    reset_logging()

    with open(get_log_path(), encoding="utf-8") as f:
        log = f.read()
    assert log.count("x") >= 70000
    assert "farmer exited cleanly" in log


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
@pytest.mark.asyncio
async def test_farm_stops_farmer_when_logging_fails(configured, tmp_path, monkeypatch, clean_logging) -> None:
    pid_file = tmp_path / "farmer.pid"
    farmer = _fake_farmer(tmp_path, f'echo $$ > "{pid_file}"\necho started\nexec sleep 30\n')
    monkeypatch.setenv("SUBSPACE_FARMER_BIN", farmer)

    def broken(raw: bytes) -> None:
        raise RuntimeError("log sink gone")

    monkeypatch.setattr(actions, "_log_farmer_line", broken)
    with pytest.raises(RuntimeError, match="log sink gone"):
        await actions.farm()
    assert not _is_running(int(pid_file.read_text()))


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
@pytest.mark.asyncio
async def test_farm_cancel_stops_farmer(configured, tmp_path, monkeypatch, clean_logging) -> None:
    pid_file = tmp_path / "farmer.pid"
    farmer = _fake_farmer(tmp_path, f'echo $$ > "{pid_file}"\nexec sleep 30\n')
    monkeypatch.setenv("SUBSPACE_FARMER_BIN", farmer)

    task = asyncio.ensure_future(actions.farm())
    pid = await _wait_for_pid(pid_file)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert not _is_running(pid)


# ============================================================================
# open_logs
# ============================================================================


@pytest.mark.asyncio
async def test_open_logs_launches_logs_dir(monkeypatch) -> None:
    launched: list[str] = []

    def fake_launch(url, *args, **kwargs):
        launched.append(url)
        return 0

    monkeypatch.setattr(actions.typer, "launch", fake_launch)
    await actions.open_logs()
    assert launched == [os.path.dirname(get_log_path())]
    assert os.path.isdir(launched[0])


@pytest.mark.asyncio
async def test_open_logs_launcher_failure(monkeypatch) -> None:
    monkeypatch.setattr(actions.typer, "launch", lambda *a, **k: 1)
    with pytest.raises(ActionError, match="launcher exited with code 1"):
        await actions.open_logs()
