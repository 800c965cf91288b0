"""Filesystem path helpers for devstrap."""

import os
from pathlib import Path

SHELLS_FILE = Path("/etc/shells")


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/devstrap"""
    return Path.home() / ".config" / "devstrap"


def get_config_path() -> Path:
    """Return path to user config file.

    Priority:
    1. DEVSTRAP_CONFIG environment variable (if set)
    2. ~/.config/devstrap/config.yaml (default XDG location)
    """
    if "DEVSTRAP_CONFIG" in os.environ:
        return Path(os.environ["DEVSTRAP_CONFIG"])
    return get_config_dir() / "config.yaml"


def local_bin_dir(home: Path) -> Path:
    """Return the user-local binary directory (~/.local/bin)."""
    return home / ".local" / "bin"


def expand_home(path: str | Path, home: Path) -> Path:
    """Expand a leading '~' against ``home`` rather than the process home."""
    text = str(path)
    if text == "~":
        return home
    if text.startswith("~/"):
        return home / text[2:]
    return Path(text)
