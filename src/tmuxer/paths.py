"""XDG Base Directory paths for tmuxer configuration.

Resolved on demand so a missing home directory surfaces as a
HomeResolutionError from the CLI rather than at import time.
"""

from __future__ import annotations

import os
from pathlib import Path

from tmuxer.patterns import home_dir


def _xdg_config_home() -> Path:
    val = os.environ.get("XDG_CONFIG_HOME", "")
    if val and Path(val).is_absolute():
        return Path(val)
    return Path(home_dir()) / ".config"


def config_dir() -> Path:
    return _xdg_config_home() / "tmux"


def config_file() -> Path:
    """Default config file: ``$XDG_CONFIG_HOME/tmux/tmuxer.yaml``."""
    return config_dir() / "tmuxer.yaml"
