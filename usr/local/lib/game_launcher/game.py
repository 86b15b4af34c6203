#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Game Record
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Resolved, immutable launch description of one catalog entry
#               and the runtime errors of a launch attempt.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/game.py
# LICENSE:      MIT
# =============================================================================

import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

EXIT_SUCCESS = 0


class GameError(Exception):
    """Base class for errors scoped to a single launch attempt."""


class NoGameId(GameError):
    def __str__(self):
        return "A game ID is required"


class NoSuchGame(GameError):
    def __init__(self, game_id):
        super().__init__(game_id)
        self.game_id = game_id

    def __str__(self):
        return f"No such game: {self.game_id}"


class CouldNotChangeDirectory(GameError):
    def __init__(self, directory):
        super().__init__(directory)
        self.directory = directory

    def __str__(self):
        return f"Could not change directory to: {self.directory}"


class CommandReturnedFailure(GameError):
    def __init__(self, command_line, exit_code):
        super().__init__(command_line, exit_code)
        self.command_line = command_line
        self.exit_code = exit_code

    def __str__(self):
        return f"Command failed (exit {self.exit_code}): {self.command_line}"


class ExecutionFailed(GameError):
    def __init__(self, command_line, reason):
        super().__init__(command_line, reason)
        self.command_line = command_line
        self.reason = reason

    def __str__(self):
        return f"Could not execute game: {self.command_line} ({self.reason})"


class NotInstalled(GameError):
    def __init__(self, game_id):
        super().__init__(game_id)
        self.game_id = game_id

    def __str__(self):
        return f"Game is not installed: {self.game_id}"


class NoEditor(GameError):
    def __str__(self):
        return "No default editor in $EDITOR"


class CouldNotRunEditor(GameError):
    def __init__(self, editor, reason):
        super().__init__(editor, reason)
        self.editor = editor
        self.reason = reason

    def __str__(self):
        return f"Could not run editor: {self.editor} ({self.reason})"


class NoMatchingGames(GameError):
    def __init__(self, queries):
        super().__init__(queries)
        self.queries = list(queries)

    def __str__(self):
        if not self.queries:
            return "No installed games"
        return f"No installed game matches: {' '.join(self.queries)}"


class CouldNotWriteStats(GameError):
    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason

    def __str__(self):
        return f"Could not write game stats: {self.reason}"


def run_process(argv, env, cwd):
    """
    Default executor: run argv with env layered over the inherited
    environment, inside cwd, and wait for the exit status.
    """
    full_env = os.environ.copy()
    full_env.update(env)
    proc = subprocess.run(list(argv), env=full_env, cwd=cwd, check=False)
    return proc.returncode


@dataclass(frozen=True)
class Game:
    id: str
    name: str
    command: tuple
    dir: str = None
    env: dict = field(default_factory=dict)
    tags: tuple = ()
    installed: bool = True

    def format(self):
        return f"{self.id} - {self.name}"

    def command_line(self):
        """Shell-quoted rendering of the argv, used in diagnostics."""
        return shlex.join(self.command)

    def is_installed(self):
        return self.installed

    def run(self, execute=run_process):
        """Launch the game through the given executor; raise GameError."""
        if not self.installed:
            raise NotInstalled(self.id)

        if self.dir is not None and not Path(self.dir).is_dir():
            raise CouldNotChangeDirectory(self.dir)

        try:
            code = execute(self.command, dict(self.env), self.dir)
        except OSError as e:
            raise ExecutionFailed(self.command_line(), e) from e

        if code != EXIT_SUCCESS:
            raise CommandReturnedFailure(self.command_line(), code)
