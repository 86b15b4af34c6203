#!/usr/bin/env python3
# =============================================================================
# PROJECT:      GameLauncher
# VERSION:      1.0.0 - Python
# DESCRIPTION:  Launches games from a YAML catalog through wine, mangohud and
#               gamescope, and keeps a per-game play-time ledger.
# PHILOSOPHY:   KISS (Keep It Simple, Stupid)
# PATH:         /usr/local/lib/game_launcher/__init__.py
# LICENSE:      MIT
# =============================================================================

__version__ = "1.0.0"
