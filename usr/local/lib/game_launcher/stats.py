#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Play-Time Ledger
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Per-game play time and last-played timestamp, stored one game
#               per line as "id<TAB>seconds<TAB>YYYY-MM-DD HH:MM:SS".
#               The file is read and rewritten whole on every session.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/stats.py
# LICENSE:      MIT
# =============================================================================

from datetime import datetime

from .common import write_atomic

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
FIELD_SEPARATOR = "\t"
SECONDS_PER_HOUR = 60 * 60
# Play time is an unsigned 32-bit counter in the ledger.
MAX_PLAY_TIME = 2**32 - 1


class LedgerFormatError(ValueError):
    """A ledger line or record that cannot be represented."""


def _check_play_time(seconds):
    if seconds < 0:
        raise LedgerFormatError(f"Negative play time: {seconds}")
    if seconds > MAX_PLAY_TIME:
        raise OverflowError(f"Play time exceeds {MAX_PLAY_TIME} seconds")
    return seconds


class GameStats:
    """Cumulative statistics of one game."""

    def __init__(self, game_id, play_time_seconds, last_played_time):
        self.id = game_id
        self.play_time_seconds = _check_play_time(play_time_seconds)
        self.last_played_time = last_played_time

    def __repr__(self):
        return (
            f"GameStats({self.id!r}, {self.play_time_seconds}, "
            f"{self.last_played_time!r})"
        )

    def __eq__(self, other):
        if not isinstance(other, GameStats):
            return NotImplemented
        return (
            self.id == other.id
            and self.play_time_seconds == other.play_time_seconds
            and self.last_played_time == other.last_played_time
        )

    def add_time(self, seconds):
        """Add a session; fails loudly instead of wrapping around."""
        if seconds < 0:
            raise LedgerFormatError(f"Negative session length: {seconds}")
        total = self.play_time_seconds + seconds
        if total > MAX_PLAY_TIME:
            raise OverflowError(
                f"Play time of {self.id} would exceed {MAX_PLAY_TIME} seconds"
            )
        self.play_time_seconds = total

    def update_last_played_time(self, date_time):
        self.last_played_time = date_time

    def format_play_time(self):
        return format_play_time(self.play_time_seconds)

    def format_last_played_time(self):
        return self.last_played_time.astimezone().strftime(TIMESTAMP_FORMAT)

    def to_tsv(self):
        """Serialize as one ledger line (no newline), in local time."""
        # Any line break splitlines() knows would split the record on read.
        if FIELD_SEPARATOR in self.id or "".join(self.id.splitlines()) != self.id:
            raise LedgerFormatError(f"Game id cannot be stored: {self.id!r}")
        return FIELD_SEPARATOR.join(
            [self.id, str(self.play_time_seconds), self.format_last_played_time()]
        )

    @classmethod
    def from_tsv(cls, line):
        """
        Parse one ledger line. The timestamp carries no offset; it is read as
        local time using the offset in force on that date.
        """
        parts = line.rstrip("\r\n").split(FIELD_SEPARATOR)
        if len(parts) != 3:
            raise LedgerFormatError(f"Bad ledger line: {line!r}")
        game_id, seconds, timestamp = parts
        if not seconds.isdecimal():
            raise LedgerFormatError(f"Bad play time in ledger line: {line!r}")
        try:
            last_played = datetime.strptime(timestamp, TIMESTAMP_FORMAT)
        except ValueError as e:
            raise LedgerFormatError(f"Bad timestamp in ledger line: {line!r}") from e
        return cls(game_id, int(seconds), last_played.astimezone())


def format_play_time(total_seconds):
    """Render e.g. 5415 as '1h30m15s', dropping zero components."""
    hours, rest = divmod(total_seconds, SECONDS_PER_HOUR)
    minutes, seconds = divmod(rest, 60)
    formatted = ""
    if hours > 0:
        formatted += f"{hours}h"
    if minutes > 0:
        formatted += f"{minutes}m"
    if seconds > 0:
        formatted += f"{seconds}s"
    return formatted


def parse_ledger(content):
    """All records of a ledger text; blank lines are skipped."""
    return [GameStats.from_tsv(line) for line in content.splitlines() if line.strip()]


def serialize_ledger(records):
    return "".join(f"{stats.to_tsv()}\n" for stats in records)


def find_stats(records, game_id):
    for stats in records:
        if stats.id == game_id:
            return stats
    return None


def record_session(records, game_id, seconds, start_time):
    """
    Merge one play session into the ledger records.
    The matching record gets the time added and its timestamp replaced;
    the others pass through. Unknown games are appended.
    """
    merged = []
    found = False
    for stats in records:
        if stats.id == game_id:
            stats.add_time(seconds)
            stats.update_last_played_time(start_time)
            found = True
        merged.append(stats)

    if not found:
        merged.append(GameStats(game_id, seconds, start_time))
    return merged


def total_play_time(records, game_ids):
    """Summed play time of the given games that have a record."""
    total = 0
    for game_id in game_ids:
        stats = find_stats(records, game_id)
        if stats is not None:
            total += stats.play_time_seconds
    return total


def read_ledger(path):
    """
    Records stored at path; a missing or unreadable file is empty.
    Content that is not UTF-8 raises LedgerFormatError.
    """
    try:
        with open(path, "r", encoding="utf-8") as file:
            content = file.read()
    except OSError:
        return []
    except UnicodeDecodeError as e:
        raise LedgerFormatError(f"Ledger is not valid UTF-8: {path}") from e
    return parse_ledger(content)


def write_ledger(path, records):
    write_atomic(path, serialize_ledger(records))
