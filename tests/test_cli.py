"""Tests for the command dispatcher and the play-session workflow."""

import itertools
import os
import textwrap

import pytest

from conftest import FakeExecutor, compile_catalog
from game_launcher import cli
from game_launcher.common import load_ssot
from game_launcher.game import (
    CommandReturnedFailure,
    CouldNotWriteStats,
    NoGameId,
    NoSuchGame,
)
from game_launcher.stats import read_ledger

CATALOG = """
games:
  morrowind:
    name: Morrowind
    cmd: openmw
    tags: [rpg, native]
  bg3:
    name: Baldur's Gate 3
    wine_exe: bg3.exe
    tags: [rpg]
  old:
    name: Old Game
    cmd: old
    installed: false
    tags: [retro]
"""


def _clock(*values):
    """Monotonic clock stub returning the given readings in order."""
    readings = itertools.chain(values, itertools.repeat(values[-1]))
    return lambda: next(readings)


@pytest.fixture
def games():
    return compile_catalog(CATALOG)


class TestPlayGame:
    def test_first_session_creates_ledger(self, games, tmp_path, capsys):
        ledger = tmp_path / "game_stats.tsv"
        executor = FakeExecutor()
        cli.play_game(games.find("bg3"), executor, ledger, _clock(100.0, 5515.9))

        assert executor.calls[0][0] == ["mangohud", "wine", "bg3.exe"]
        out = capsys.readouterr().out
        assert "Game: Baldur's Gate 3 (bg3)" in out
        assert "Play Time: 1h30m15s (5415sec)" in out
        records = read_ledger(ledger)
        assert [(s.id, s.play_time_seconds) for s in records] == [("bg3", 5415)]

    def test_second_session_accumulates(self, games, tmp_path):
        ledger = tmp_path / "game_stats.tsv"
        ledger.write_text(
            "morrowind\t10\t2025-11-03 19:07:00\nbg3\t60\t2025-11-01 10:00:00\n"
        )
        cli.play_game(games.find("bg3"), FakeExecutor(), ledger, _clock(0.0, 30.0))

        lines = ledger.read_text().splitlines()
        assert lines[0] == "morrowind\t10\t2025-11-03 19:07:00"
        assert lines[1].startswith("bg3\t90\t")
        assert len(lines) == 2

    def test_failed_launch_records_nothing(self, games, tmp_path):
        ledger = tmp_path / "game_stats.tsv"
        with pytest.raises(CommandReturnedFailure):
            cli.play_game(games.find("bg3"), FakeExecutor(exit_code=1), ledger)
        assert not ledger.exists()

    def test_ledger_write_failure_is_distinct(self, games, tmp_path, capsys):
        ledger = tmp_path / "missing" / "game_stats.tsv"
        with pytest.raises(CouldNotWriteStats):
            cli.play_game(games.find("bg3"), FakeExecutor(), ledger, _clock(0.0, 1.0))
        assert "Game: Baldur's Gate 3 (bg3)" in capsys.readouterr().out

    def test_corrupt_ledger_is_a_stats_error(self, games, tmp_path):
        ledger = tmp_path / "game_stats.tsv"
        ledger.write_text("not a ledger line\n")
        with pytest.raises(CouldNotWriteStats):
            cli.play_game(games.find("bg3"), FakeExecutor(), ledger, _clock(0.0, 1.0))

    def test_non_utf8_ledger_is_a_stats_error(self, games, tmp_path):
        ledger = tmp_path / "game_stats.tsv"
        ledger.write_bytes(b"\xff\xfe\tbad\n")
        with pytest.raises(CouldNotWriteStats):
            cli.play_game(games.find("bg3"), FakeExecutor(), ledger, _clock(0.0, 1.0))
        assert ledger.read_bytes() == b"\xff\xfe\tbad\n"


class TestCommands:
    def test_play_requires_id(self, games):
        with pytest.raises(NoGameId):
            cli.command_play(games, [])

    def test_play_unknown_game(self, games):
        with pytest.raises(NoSuchGame):
            cli.command_play(games, ["doom"])

    def test_list(self, games, capsys):
        cli.command_list(games, ["rpg,!native"])
        assert capsys.readouterr().out == "bg3 - Baldur's Gate 3\n"

    def test_tags(self, games, capsys):
        cli.command_tags(games, [])
        assert capsys.readouterr().out == "native\nretro\nrpg\n"

    def test_help_lists_sorted_commands(self, capsys):
        cli.command_help(None, [])
        out = capsys.readouterr().out
        assert out.startswith(cli.USAGE)
        commands = [
            line.strip().split(" ")[0]
            for line in out.splitlines()
            if line.startswith("\t")
        ]
        assert commands == sorted(cli.COMMANDS)

    def test_stats_single_game(self, games, tmp_path, capsys):
        ledger = tmp_path / "game_stats.tsv"
        ledger.write_text("morrowind\t2700\t2025-11-03 19:07:00\n")
        cli.command_stats(games, ["morrowind"], ledger)
        assert capsys.readouterr().out == (
            "Morrowind (morrowind) Statistics\n"
            "Play Time: 45m\n"
            "Last Played: 2025-11-03 19:07:00\n"
        )

    def test_stats_total(self, games, tmp_path, capsys):
        ledger = tmp_path / "game_stats.tsv"
        ledger.write_text(
            "morrowind\t2700\t2025-11-03 19:07:00\nbg3\t961\t2025-11-04 20:00:00\n"
        )
        cli.command_stats(games, ["morrowind", "bg3"], ledger)
        assert capsys.readouterr().out.endswith("\nTotal Play Time: 1h1m1s\n")

    def test_stats_total_ignores_other_games(self, games, tmp_path, capsys):
        ledger = tmp_path / "game_stats.tsv"
        ledger.write_text(
            "morrowind\t2700\t2025-11-03 19:07:00\n"
            "bg3\t961\t2025-11-04 20:00:00\n"
            "old\t5000\t2025-11-05 20:00:00\n"
        )
        cli.command_stats(games, ["morrowind", "bg3"], ledger)
        out = capsys.readouterr().out
        assert out.count("Statistics") == 2
        assert out.endswith("\nTotal Play Time: 1h1m1s\n")

    def test_stats_not_found(self, games, tmp_path, capsys):
        cli.command_stats(games, ["bg3"], tmp_path / "none.tsv")
        assert capsys.readouterr().out == "No stats found\n"

    def test_stats_with_non_utf8_ledger(self, games, tmp_path, capsys):
        ledger = tmp_path / "game_stats.tsv"
        ledger.write_bytes(b"\xff\xfe\tbad\n")
        cli.command_stats(games, ["bg3"], ledger)
        out = capsys.readouterr().out
        assert "ERROR: Ledger is not valid UTF-8" in out
        assert out.endswith("No stats found\n")

    def test_stats_unknown_game(self, games, tmp_path):
        with pytest.raises(NoSuchGame):
            cli.command_stats(games, ["doom"], tmp_path / "none.tsv")


class TestRun:
    def _write_catalog(self, path, text=CATALOG):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text), encoding="utf-8")

    def test_list(self, launcher_env, capsys):
        config_file, stats_file = launcher_env
        self._write_catalog(config_file)
        cli.run(["list"])
        assert capsys.readouterr().out == (
            "bg3 - Baldur's Gate 3\nmorrowind - Morrowind\n"
        )
        assert stats_file.parent.is_dir()

    def test_no_command(self, launcher_env, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.run([])
        assert exc.value.code == 1
        assert cli.USAGE in capsys.readouterr().out

    def test_unrecognized_command(self, launcher_env, capsys):
        with pytest.raises(SystemExit):
            cli.run(["launch"])
        assert "Unrecognized command: launch" in capsys.readouterr().out

    def test_missing_config(self, launcher_env, capsys):
        with pytest.raises(SystemExit):
            cli.run(["list"])
        assert "ERROR: No config file found" in capsys.readouterr().out

    def test_config_error_is_fatal(self, launcher_env, capsys):
        config_file, _ = launcher_env
        self._write_catalog(
            config_file, "games:\n  x:\n    name: X\n    cmd: x\n    bogus: 1\n"
        )
        with pytest.raises(SystemExit):
            cli.run(["list"])
        assert "ERROR: Unrecognized option: bogus" in capsys.readouterr().out

    def test_game_error_exits(self, launcher_env, capsys):
        config_file, _ = launcher_env
        self._write_catalog(config_file)
        with pytest.raises(SystemExit):
            cli.run(["play", "old"])
        assert "ERROR: Game is not installed: old" in capsys.readouterr().out

    def test_edit_without_editor(self, launcher_env, monkeypatch, capsys):
        config_file, _ = launcher_env
        self._write_catalog(config_file)
        monkeypatch.delenv("EDITOR", raising=False)
        with pytest.raises(SystemExit):
            cli.run(["edit"])
        assert "No default editor" in capsys.readouterr().out

    def test_edit_splits_editor_arguments(self, launcher_env, monkeypatch):
        config_file, _ = launcher_env
        self._write_catalog(config_file)
        calls = []
        monkeypatch.setenv("EDITOR", "code --wait")
        monkeypatch.setattr(
            cli.subprocess, "run", lambda argv, check: calls.append(argv)
        )
        cli.run(["edit"])
        assert calls == [["code", "--wait", str(config_file)]]

    def test_edit_with_missing_editor(self, launcher_env, monkeypatch, capsys):
        config_file, _ = launcher_env
        self._write_catalog(config_file)
        monkeypatch.setenv("EDITOR", "game-launcher-no-such-editor -w")
        with pytest.raises(SystemExit) as exc:
            cli.run(["edit"])
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "ERROR: Could not run editor: game-launcher-no-such-editor -w" in out

    def test_edit_with_unbalanced_quote(self, launcher_env, monkeypatch, capsys):
        config_file, _ = launcher_env
        self._write_catalog(config_file)
        monkeypatch.setenv("EDITOR", "\"vim")
        with pytest.raises(SystemExit):
            cli.run(["edit"])
        assert "ERROR: Could not run editor" in capsys.readouterr().out


def test_load_ssot_injects_environment(tmp_path, monkeypatch):
    conf = tmp_path / "game_launcher.conf"
    conf.write_text('# comment\nstats_file="/tmp/x.tsv"\nbin_extra = \'1\'\n')
    monkeypatch.setenv("SSOT_CONF", str(conf))
    monkeypatch.setenv("stats_file", "")
    monkeypatch.setenv("bin_extra", "")
    assert load_ssot()
    assert os.environ["stats_file"] == "/tmp/x.tsv"
    assert os.environ["bin_extra"] == "1"


def test_load_ssot_missing_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SSOT_CONF", str(tmp_path / "none.conf"))
    assert not load_ssot()
