#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Command Dispatcher
# VERSION:      1.0.0 - Python
# DESCRIPTION:  "game <command>" entry point: list, filter, launch and
#               report play time for the games of the YAML catalog.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/cli.py
# LICENSE:      MIT
# =============================================================================

import os
import shlex
import subprocess
import sys
import time
from collections import namedtuple
from datetime import datetime, timezone

from .common import config_path, load_ssot, qlog, stats_path
from .config import parse_config
from .game import (
    CouldNotRunEditor,
    CouldNotWriteStats,
    GameError,
    NoEditor,
    NoGameId,
    NoSuchGame,
    run_process,
)
from .parse_error import ParseError
from .stats import (
    LedgerFormatError,
    find_stats,
    format_play_time,
    read_ledger,
    record_session,
    total_play_time,
    write_ledger,
)

USAGE = "USAGE: game [COMMAND]"

GameCommand = namedtuple("GameCommand", ["cmd", "args", "exec", "desc"])


def command_help(_games, _args):
    """Explain the commands."""
    print(USAGE)
    print()
    print("Commands: ")
    for c in sorted(COMMANDS.values(), key=lambda c: c.cmd):
        args_str = f" [{'|'.join(c.args)}]" if c.args else ""
        print(f"\t{c.cmd}{args_str} - {c.desc}")


def command_list(games, args):
    for line in games.list_games(args):
        print(line)


def command_tags(games, _args):
    for tag in games.all_tags():
        print(tag)


def play_game(game, execute=run_process, ledger=None, clock=time.monotonic):
    """
    Launch a game, then merge the session into the play-time ledger.
    Ledger failures raise CouldNotWriteStats, after the game has run.
    """
    start_time = datetime.now(timezone.utc)
    started = clock()
    qlog("LAUNCH", f"START_{game.id}: {game.command_line()}")
    game.run(execute)
    play_time = int(clock() - started)

    print(f"Game: {game.name} ({game.id})")
    print(f"Play Time: {format_play_time(play_time)} ({play_time}sec)")

    path = ledger or stats_path()
    try:
        records = read_ledger(path)
        records = record_session(records, game.id, play_time, start_time)
        write_ledger(path, records)
    except (OSError, LedgerFormatError, OverflowError) as e:
        raise CouldNotWriteStats(e) from e
    qlog("STATS", f"SESSION_END_{game.id}_AFTER_{play_time}S")


def command_play(games, args):
    if not args:
        raise NoGameId()
    game = games.find(args[0])
    if game is None:
        raise NoSuchGame(args[0])
    play_game(game)


def command_play_random(games, args):
    play_game(games.random(args))


def command_stats(games, args, ledger=None):
    """Per-game statistics, plus a total when several games have some."""
    if not args:
        raise NoGameId()
    try:
        records = read_ledger(ledger or stats_path())
    except LedgerFormatError as e:
        qlog("ERROR", e)
        records = []

    shown = []
    for game_id in args:
        game = games.find(game_id)
        if game is None:
            raise NoSuchGame(game_id)
        stats = find_stats(records, game_id)
        if stats is None:
            if len(args) == 1:
                print("No stats found")
            continue
        shown.append(game_id)
        if len(shown) > 1:
            print()
        print(f"{game.name} ({game.id}) Statistics")
        print(f"Play Time: {stats.format_play_time()}")
        print(f"Last Played: {stats.format_last_played_time()}")

    if len(shown) > 1:
        total = total_play_time(records, shown)
        print()
        print(f"Total Play Time: {format_play_time(total)}")


def command_edit(_games, _args):
    editor = os.getenv("EDITOR")
    if not editor:
        raise NoEditor()
    try:
        argv = shlex.split(editor)
    except ValueError as e:
        raise CouldNotRunEditor(editor, e) from e
    if not argv:
        raise NoEditor()
    try:
        subprocess.run(argv + [str(config_path())], check=False)
    except OSError as e:
        raise CouldNotRunEditor(editor, e) from e


COMMANDS = {
    c.cmd: c
    for c in [
        GameCommand("help", [], command_help, "Explain the commands"),
        GameCommand(
            "list", ["TAG?"], command_list,
            'List games in the format "game_id - name"',
        ),
        GameCommand(
            "play", ["GAME_ID"], command_play,
            "Play a game, specified by its game ID",
        ),
        GameCommand("tags", [], command_tags, "List all tags"),
        GameCommand(
            "play-random", ["TAGS"], command_play_random, "Play a random game"
        ),
        GameCommand("edit", [], command_edit, "Edit the config file"),
        GameCommand("stats", ["GAME_ID"], command_stats, "Show game statistics"),
    ]
}


def ensure_dirs():
    """Create the config and data directories if they don't already exist."""
    for path in (config_path().parent, stats_path().parent):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            qlog("ERROR", f"Could not create directory {path}: {e}")
            sys.exit(1)


def load_games():
    """Read and compile the catalog, exiting on any configuration error."""
    path = config_path()
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        qlog("ERROR", f"No config file found (expected at {path})")
        sys.exit(1)

    try:
        games = parse_config(content)
    except ParseError as e:
        qlog("ERROR", e)
        sys.exit(1)
    return games


def run(argv=None):
    """Main execution flow."""
    argv = sys.argv[1:] if argv is None else argv
    load_ssot()
    ensure_dirs()

    if not argv:
        print(USAGE)
        sys.exit(1)
    command = COMMANDS.get(argv[0])
    if command is None:
        print(f"Unrecognized command: {argv[0]}")
        sys.exit(1)

    games = None if command.cmd == "help" else load_games()
    try:
        command.exec(games, argv[1:])
    except GameError as e:
        qlog("ERROR", e)
        sys.exit(1)


if __name__ == "__main__":
    run()
