"""Shared test fixtures for all test modules."""

import textwrap

import pytest

from game_launcher.config import parse_config


class FakeExecutor:
    """Stands in for run_process: records launches, returns a fixed code."""

    def __init__(self, exit_code=0, error=None):
        self.exit_code = exit_code
        self.error = error
        self.calls = []

    def __call__(self, argv, env, cwd):
        self.calls.append((list(argv), dict(env), cwd))
        if self.error is not None:
            raise self.error
        return self.exit_code


def compile_catalog(text):
    """Compile an indented YAML snippet."""
    return parse_config(textwrap.dedent(text))


@pytest.fixture
def catalog():
    return compile_catalog


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def launcher_env(tmp_path, monkeypatch):
    """Point the catalog, ledger and SSoT paths into a temp directory."""
    config_file = tmp_path / "config" / "games.yaml"
    stats_file = tmp_path / "data" / "game_stats.tsv"
    monkeypatch.setenv("user_config", str(config_file))
    monkeypatch.setenv("stats_file", str(stats_file))
    monkeypatch.setenv("SSOT_CONF", str(tmp_path / "missing.conf"))
    return config_file, stats_file
