#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Configuration Errors
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Errors raised while compiling the games catalog. All of them
#               are fatal and are reported before any game is launched.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/parse_error.py
# LICENSE:      MIT
# =============================================================================


class ParseError(Exception):
    """Base class for catalog compilation errors."""


class MissingName(ParseError):
    def __init__(self, game_id):
        super().__init__(game_id)
        self.game_id = game_id

    def __str__(self):
        return f"Game missing name: {self.game_id}"


class MissingCommand(ParseError):
    def __init__(self, game_id):
        super().__init__(game_id)
        self.game_id = game_id

    def __str__(self):
        return f"Game missing cmd: {self.game_id}"


class NoSuchDirectoryPrefix(ParseError):
    def __init__(self, game_id, prefix):
        super().__init__(game_id, prefix)
        self.game_id = game_id
        self.prefix = prefix

    def __str__(self):
        return (
            f"Game {self.game_id} has nonexistent directory prefix: "
            f"{self.prefix}"
        )


class UnrecognizedOption(ParseError):
    def __init__(self, option):
        super().__init__(option)
        self.option = option

    def __str__(self):
        return f"Unrecognized option: {self.option}"


class ConflictingCommands(ParseError):
    """More than one of the command-setting keys in one game."""

    def __init__(self, game_id, keys):
        super().__init__(game_id, keys)
        self.game_id = game_id
        self.keys = sorted(keys)

    def __str__(self):
        return (
            f"Game {self.game_id} sets its command more than once: "
            f"{', '.join(self.keys)}"
        )


class BadCommand(ParseError):
    def __init__(self, game_id, key, reason):
        super().__init__(game_id, key, reason)
        self.game_id = game_id
        self.key = key
        self.reason = reason

    def __str__(self):
        return f"Game {self.game_id} has an unparsable {self.key}: {self.reason}"


class GameNotTable(ParseError):
    def __init__(self, game_id):
        super().__init__(game_id)
        self.game_id = game_id

    def __str__(self):
        return f"Game '{self.game_id}' must correspond to a table"


class MissingGameTable(ParseError):
    def __str__(self):
        return "A 'games' table is required"


class YamlError(ParseError):
    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message
