#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Catalog Compiler
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Turns the YAML games catalog into resolved Game records.
#               Every per-game key goes through a fixed option table; any
#               key outside that table is rejected.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/config.py
# LICENSE:      MIT
# =============================================================================

import random
import shlex

import yaml

from .common import load_yaml
from .game import NoMatchingGames
from .game_builder import WINE_BIN, GameBuilder
from .parse_error import (
    BadCommand,
    ConflictingCommands,
    GameNotTable,
    MissingGameTable,
    UnrecognizedOption,
    YamlError,
)
from .settings import load_settings
from .tag import game_matches_tags

# Keys that each set the base command on their own.
COMMAND_KEYS = ("cmd", "wine_exe", "dosbox_config", "scummvm_id")


def _split(game_id, key, value):
    try:
        return shlex.split(value)
    except ValueError as e:
        raise BadCommand(game_id, key, e) from e


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def parse_name(builder, value):
    if isinstance(value, str):
        builder.name(value)
    return builder


def parse_cmd(builder, value):
    if isinstance(value, str):
        builder.command(_split(builder.id, "cmd", value))
    return builder


def parse_wine_exe(builder, value):
    if isinstance(value, str):
        builder.command([WINE_BIN] + _split(builder.id, "wine_exe", value))
    return builder


def parse_dosbox_config(builder, value):
    if isinstance(value, str):
        builder.command(["dosbox", "-conf", value])
    return builder


def parse_scummvm_id(builder, value):
    if isinstance(value, str):
        builder.command(["scummvm", value])
    return builder


def parse_dir(builder, value):
    if isinstance(value, str):
        builder.dir(value)
    return builder


def parse_dir_prefix(builder, value):
    if isinstance(value, str) and value:
        builder.dir_prefix(value)
    return builder


def _env_value(value):
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def parse_env(builder, value):
    if isinstance(value, dict):
        builder.env(
            {
                str(k): _env_value(v)
                for k, v in value.items()
                if isinstance(v, (str, int, float))
            }
        )
    return builder


def parse_tags(builder, value):
    if isinstance(value, list):
        builder.tags(tag for tag in value if isinstance(tag, str))
    return builder


def parse_fps_limit(builder, value):
    if _is_int(value):
        builder.fps_limit(value)
    return builder


def parse_installed(builder, value):
    if isinstance(value, bool):
        builder.installed(value)
    return builder


def parse_use_gamescope(builder, value):
    if isinstance(value, bool):
        builder.gamescope(value)
    return builder


def parse_use_mangohud(builder, value):
    if isinstance(value, bool):
        builder.mangohud(value)
    return builder


def parse_use_vk(builder, value):
    if isinstance(value, bool):
        builder.use_vk(value)
    return builder


OPTION_PARSERS = {
    "cmd": parse_cmd,
    "dir": parse_dir,
    "dir_prefix": parse_dir_prefix,
    "dosbox_config": parse_dosbox_config,
    "env": parse_env,
    "fps_limit": parse_fps_limit,
    "installed": parse_installed,
    "name": parse_name,
    "scummvm_id": parse_scummvm_id,
    "tags": parse_tags,
    "use_gamescope": parse_use_gamescope,
    "use_mangohud": parse_use_mangohud,
    "use_vk": parse_use_vk,
    "wine_exe": parse_wine_exe,
}


def parse_game_config(game_id, game_config, directories, settings):
    """Compile one game's mapping into a Game; raise ParseError."""
    for key in game_config:
        if key not in OPTION_PARSERS:
            raise UnrecognizedOption(str(key))

    command_keys = [key for key in COMMAND_KEYS if key in game_config]
    if len(command_keys) > 1:
        raise ConflictingCommands(game_id, command_keys)

    builder = GameBuilder(game_id, directories, settings)
    for key, value in game_config.items():
        builder = OPTION_PARSERS[key](builder, value)
    return builder.build()


class Games:
    """The compiled catalog, keyed by game id."""

    def __init__(self, games):
        self.games = dict(games)

    def __len__(self):
        return len(self.games)

    def find(self, game_id):
        return self.games.get(game_id)

    def installed(self):
        """Installed games sorted by id."""
        return [
            self.games[game_id]
            for game_id in sorted(self.games)
            if self.games[game_id].is_installed()
        ]

    def matching(self, queries):
        """Installed games selected by any of the tag queries (all if none)."""
        if not queries:
            return self.installed()
        return [g for g in self.installed() if game_matches_tags(g, queries)]

    def list_games(self, queries=()):
        return [game.format() for game in self.matching(queries)]

    def all_tags(self):
        return sorted({tag for game in self.games.values() for tag in game.tags})

    def random(self, queries=(), rng=random):
        candidates = self.matching(queries)
        if not candidates:
            raise NoMatchingGames(queries)
        return rng.choice(candidates)


def parse_config(config_content):
    """Compile a whole YAML catalog; the first error aborts everything."""
    try:
        config = load_yaml(config_content)
    except yaml.YAMLError as e:
        raise YamlError(f"YAML parse error: {e}") from e

    if config is None:
        raise MissingGameTable()
    if not isinstance(config, dict):
        raise YamlError("The catalog must be a mapping at the top level")

    settings = load_settings(config.get("settings"))
    directories = config.get("directories")
    if not isinstance(directories, dict):
        directories = {}

    games_config = config.get("games")
    if not isinstance(games_config, dict):
        raise MissingGameTable()

    games = {}
    for raw_id, game_config in games_config.items():
        game_id = str(raw_id)
        if not isinstance(game_config, dict):
            raise GameNotTable(game_id)
        games[game_id] = parse_game_config(
            game_id, game_config, directories, settings
        )
    return Games(games)
