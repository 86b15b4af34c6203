#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Shared Helpers
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Journal-style logging, SSoT loading, atomic writes and
#               YAML reading shared by the launcher modules.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/common.py
# LICENSE:      MIT
# =============================================================================

import os
from pathlib import Path

import yaml
from yaml.constructor import ConstructorError

APP_NAME = "game_launcher"
DEFAULT_SSOT = "/etc/default/game_launcher.conf"
CONFIG_FILE_NAME = "games.yaml"
STATS_FILE_NAME = "game_stats.tsv"


def qlog(tag, msg):
    """Print 'TAG: message' - Format for Systemd and the terminal."""
    print(f"{tag}: {msg}", flush=True)


def load_ssot():
    """Inject SSoT configuration into os.environ for child processes."""
    conf_path = os.getenv("SSOT_CONF", DEFAULT_SSOT)
    try:
        content = Path(conf_path).read_text(encoding="utf-8")
    except OSError:
        return False

    for line in content.splitlines():
        if "=" in line and not line.startswith("#"):
            key, val = line.split("=", 1)
            os.environ[key.strip()] = val.strip().strip('"').strip("'")
    return True


def config_path():
    """Location of the games catalog, overridable via 'user_config'."""
    default = Path.home() / ".config" / APP_NAME / CONFIG_FILE_NAME
    return Path(os.getenv("user_config", str(default)))


def stats_path():
    """Location of the play-time ledger, overridable via 'stats_file'."""
    default = Path.home() / ".local" / "share" / APP_NAME / STATS_FILE_NAME
    return Path(os.getenv("stats_file", str(default)))


def write_atomic(path, text):
    """
    Atomic whole-file rewrite.
    The content lands in a sibling temp file which then replaces the target,
    so readers never observe a half-written file. OSError propagates.
    """
    p = Path(path)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(p)


MERGE_TAG = "tag:yaml.org,2002:merge"


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects a key repeated within one mapping."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            # '<<' merges may legitimately be overridden by local keys.
            if key_node.tag == MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                continue
            if duplicate:
                raise ConstructorError(
                    "while constructing a mapping", node.start_mark,
                    f"found duplicate key {key!r}", key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def load_yaml(text):
    """Parse a YAML document; yaml.YAMLError propagates to the caller."""
    return yaml.load(text, Loader=UniqueKeyLoader)
