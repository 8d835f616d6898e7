"""Idempotent PATH management for the live process and shell profiles."""

import logging
import os
from pathlib import Path
from typing import MutableMapping

from .paths import DEFAULT_PROFILES, get_profile_paths
from .state import RunState

_logging = logging.getLogger(__name__)


def export_line(directory: str) -> str:
    return f'export PATH="{directory}:$PATH"'


def add_to_live_path(directory: str, environ: MutableMapping[str, str] | None = None) -> bool:
    """Prepend directory to PATH unless it is already one of its entries."""
    environ = os.environ if environ is None else environ
    current = environ.get("PATH", "")
    if directory in current.split(os.pathsep):
        return False
    environ["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory
    return True


def append_to_profile(profile: Path, directory: str) -> bool:
    """Append an export line to an existing profile if it lacks directory.

    Profiles that do not exist are left alone.
    """
    if not profile.is_file():
        return False

    content = profile.read_text(encoding="utf-8", errors="replace")
    if directory in content:
        return False

    prefix = "" if not content or content.endswith("\n") else "\n"
    with profile.open("a", encoding="utf-8") as f:
        f.write(f"{prefix}{export_line(directory)}\n")
    return True


def add_to_path(
    directory: str | Path,
    state: RunState,
    home: Path | None = None,
    profile_names: tuple[str, ...] = DEFAULT_PROFILES,
    environ: MutableMapping[str, str] | None = None,
) -> list[Path]:
    """Make directory reachable now and in future shells.

    Returns:
        The profile files that were modified during this call
    """
    directory = str(directory)
    home = home or Path.home()

    if add_to_live_path(directory, environ):
        _logging.info(f"Added {directory} to PATH for this run")

    changed = []
    for profile in get_profile_paths(home, profile_names):
        try:
            appended = append_to_profile(profile, directory)
        except OSError as e:
            _logging.info(f"Could not update {profile}: {e}")
            continue
        if appended:
            _logging.info(f"Added {directory} to PATH in {profile}")
            state.mark_shell_reload()
            changed.append(profile)
    return changed


def reload_hint(
    state: RunState,
    home: Path | None = None,
    profile_names: tuple[str, ...] = DEFAULT_PROFILES,
) -> Path | None:
    """Return the profile a user should source, if a reload is needed."""
    if not state.shell_reload_needed:
        return None
    for profile in get_profile_paths(home or Path.home(), profile_names):
        if profile.is_file():
            return profile
    return None


__all__ = [
    "export_line",
    "add_to_live_path",
    "append_to_profile",
    "add_to_path",
    "reload_hint",
]
