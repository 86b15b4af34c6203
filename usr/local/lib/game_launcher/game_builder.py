#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Command Builder
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Collects per-game options in any order and resolves them into
#               a Game: directory aliases, gamescope / mangohud wrapping and
#               the environment overrides that go with them.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/game_builder.py
# LICENSE:      MIT
# =============================================================================

import os

from .game import Game
from .parse_error import MissingCommand, MissingName, NoSuchDirectoryPrefix
from .settings import Settings

WINE_BIN = "wine"
MANGOHUD_BIN = "mangohud"
GAMESCOPE_BIN = "gamescope"
MANGOHUD_CONFIG = "MANGOHUD_CONFIG"
WINE_DLL_OVERRIDES = "WINEDLLOVERRIDES"
# Builtin wined3d instead of DXVK for every Direct3D backend.
NO_VK_OVERRIDES = "*d3d9,*d3d10,*d3d10_1,*d3d10core,*d3d11,*dxgi=b"


class GameBuilder:
    """
    Mutable bag of options for one game.

    Setters never fail and do not depend on each other; every check and every
    cross-field rule runs in build().
    """

    def __init__(self, game_id, directories=None, settings=None):
        self.id = game_id
        self.directories = directories or {}
        self.settings = settings or Settings()
        self._name = None
        self._dir = ""
        self._dir_prefix = ""
        self._command = []
        self._env = {}
        self._tags = []
        self._use_mangohud = None
        self._fps_limit = None
        self._use_gamescope = None
        self._use_vk = True
        self._installed = True

    def name(self, name):
        self._name = name
        return self

    def command(self, command):
        self._command = list(command)
        return self

    def dir(self, directory):
        self._dir = directory
        return self

    def dir_prefix(self, prefix):
        self._dir_prefix = prefix
        return self

    def env(self, environment):
        self._env = dict(environment)
        return self

    def tags(self, tags):
        self._tags = list(tags)
        return self

    def mangohud(self, use_mangohud):
        self._use_mangohud = use_mangohud
        return self

    def fps_limit(self, limit):
        self._fps_limit = limit
        return self

    def gamescope(self, use_gamescope):
        self._use_gamescope = use_gamescope
        return self

    def use_vk(self, use_vk):
        self._use_vk = use_vk
        return self

    def installed(self, installed):
        self._installed = installed
        return self

    def is_wine(self):
        """True when the base command goes through the Wine launcher."""
        return bool(self._command) and self._command[0] == WINE_BIN

    def _resolve_dir(self):
        prefix = ""
        if self._dir_prefix:
            prefix = self.directories.get(self._dir_prefix)
            if not isinstance(prefix, str):
                raise NoSuchDirectoryPrefix(self.id, self._dir_prefix)

        # 'dir' may name a directory alias on its own.
        directory = self.directories.get(self._dir)
        if not isinstance(directory, str):
            directory = self._dir

        game_dir = os.path.join(prefix, directory)
        return game_dir or None

    def _gamescope_args(self, use_mangohud, inner):
        """Gamescope prefix, its optional flags, '--', then the inner command."""
        args = [
            GAMESCOPE_BIN,
            "-W", str(self.settings.width),
            "-H", str(self.settings.height),
            "-f",
            "--force-grab-cursor",
        ]
        if self._fps_limit is not None:
            args.extend(["-r", str(self._fps_limit)])
        if use_mangohud:
            args.append("--mangoapp")
        args.append("--")
        args.extend(inner)
        return args

    def build(self):
        """Resolve the collected options into a Game; raise ParseError."""
        if not self._name:
            raise MissingName(self.id)
        if not self._command:
            raise MissingCommand(self.id)

        if self._use_mangohud is None:
            use_mangohud = self.is_wine()
        else:
            use_mangohud = self._use_mangohud

        game_dir = self._resolve_dir()

        if self._use_gamescope is None:
            use_gamescope = self.settings.use_gamescope
        else:
            use_gamescope = self._use_gamescope

        if use_gamescope:
            command = self._gamescope_args(use_mangohud, self._command)
        elif use_mangohud:
            command = [MANGOHUD_BIN] + self._command
        else:
            command = list(self._command)

        env = dict(self._env)
        if use_mangohud and self._fps_limit is not None:
            env[MANGOHUD_CONFIG] = f"fps_limit={self._fps_limit}"
        if not self._use_vk:
            env[WINE_DLL_OVERRIDES] = NO_VK_OVERRIDES

        return Game(
            id=self.id,
            name=self._name,
            command=tuple(command),
            dir=game_dir,
            env=env,
            tags=tuple(self._tags),
            installed=self._installed,
        )
