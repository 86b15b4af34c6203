#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher - Global Settings
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Display settings shared by every game of the catalog.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/settings.py
# LICENSE:      MIT
# =============================================================================

from dataclasses import dataclass

DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720


@dataclass(frozen=True)
class Settings:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    use_gamescope: bool = False


def _int_or(value, default):
    # bool is an int subclass; "true" is not a width.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


def load_settings(table):
    """Build Settings from the optional 'settings' mapping of the catalog."""
    if not isinstance(table, dict):
        return Settings()

    use_gamescope = table.get("use_gamescope", table.get("use_compositor"))
    return Settings(
        width=_int_or(table.get("width"), DEFAULT_WIDTH),
        height=_int_or(table.get("height"), DEFAULT_HEIGHT),
        use_gamescope=use_gamescope if isinstance(use_gamescope, bool) else False,
    )
