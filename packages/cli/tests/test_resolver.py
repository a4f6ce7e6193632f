"""Tests for subspace_cli.resolver and the command table"""
from __future__ import annotations

import pytest

from subspace_cli.commands import COMMAND_TABLE, Farm, Info, Init, OpenLogs, Wipe, label_of, menu_labels
from subspace_cli.errors import UsageError
from subspace_cli.resolver import ResolutionExit, resolve_command


class TestCommandTable:
    def test_canonical_order_and_labels(self) -> None:
        assert menu_labels() == ["init", "farm", "wipe", "info", "open logs directory"]
        assert [spec.command_cls for spec in COMMAND_TABLE] == [Init, Farm, Wipe, Info, OpenLogs]

    def test_label_of(self) -> None:
        assert label_of(Farm(verbose=True)) == "farm"
        assert label_of(OpenLogs()) == "open logs directory"

    def test_label_of_rejects_non_command(self) -> None:
        with pytest.raises(TypeError):
            label_of("farm")  # type: ignore[arg-type]


class TestResolveCommand:
    def test_no_arguments_is_none(self) -> None:
        assert resolve_command([]) is None

    @pytest.mark.parametrize(
        ("argv", "expected"),
        [
            (["init"], Init()),
            (["info"], Info()),
            (["open-logs"], OpenLogs()),
            (["farm"], Farm()),
            (["farm", "--verbose"], Farm(verbose=True)),
            (["farm", "-v", "-e", "--no-rotation"], Farm(verbose=True, executor=True, no_rotation=True)),
            (["farm", "--executor"], Farm(executor=True)),
            (["wipe"], Wipe()),
            (["wipe", "--farmer"], Wipe(farmer=True)),
            (["wipe", "--farmer", "--node"], Wipe(farmer=True, node=True)),
        ],
    )
    def test_subcommands(self, argv: list[str], expected: object) -> None:
        assert resolve_command(argv) == expected

    def test_unknown_subcommand(self) -> None:
        with pytest.raises(UsageError) as exc_info:
            resolve_command(["plot"])
        assert "plot" in exc_info.value.message
        assert exc_info.value.exit_code == 2

    def test_unknown_flag(self) -> None:
        with pytest.raises(UsageError, match="--force"):
            resolve_command(["wipe", "--force"])

    def test_flag_of_another_command(self) -> None:
        with pytest.raises(UsageError):
            resolve_command(["init", "--verbose"])

    def test_unexpected_argument(self) -> None:
        with pytest.raises(UsageError):
            resolve_command(["info", "extra"])

    def test_help_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(ResolutionExit) as exc_info:
            resolve_command(["--help"])
        assert exc_info.value.exit_code == 0
        out = capsys.readouterr().out
        assert "farm" in out
        assert "open-logs" in out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(ResolutionExit) as exc_info:
            resolve_command(["--version"])
        assert exc_info.value.exit_code == 0
        assert "0.1.0" in capsys.readouterr().out
