"""Filesystem locations used by devsetup."""

import os
import tempfile
import time
from pathlib import Path

DEFAULT_PROFILES = (".bashrc", ".zshrc", ".profile", ".bash_profile")


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/devsetup"""
    return Path.home() / ".config" / "devsetup"


def get_config_path() -> Path:
    """Return path to the user settings file.

    Priority:
    1. DEVSETUP_CONFIG environment variable (if set)
    2. ~/.config/devsetup/config.yaml (default XDG location)
    """
    if "DEVSETUP_CONFIG" in os.environ:
        return Path(os.environ["DEVSETUP_CONFIG"])
    return get_config_dir() / "config.yaml"


def get_log_path(log_dir: Path | None = None, now: float | None = None) -> Path:
    """Return a per-invocation log path derived from the start timestamp."""
    directory = log_dir or Path(tempfile.gettempdir())
    stamp = int(now if now is not None else time.time())
    return directory / f"install_{stamp}.log"


def get_profile_paths(home: Path, names: tuple[str, ...] = DEFAULT_PROFILES) -> list[Path]:
    """Return the well-known shell profile files under home, in order."""
    return [home / name for name in names]
