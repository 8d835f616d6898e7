"""Command execution utilities."""

import logging
import os
import shlex
import shutil
import subprocess
from enum import Enum
from typing import Tuple

ELEVATION_HELPER = "sudo"

_logging = logging.getLogger(__name__)


class ExecutionMode(Enum):
    DIRECT = "direct"
    ELEVATED = "elevated"
    UNPRIVILEGED = "unprivileged"


def command_exists(name: str) -> bool:
    """Return True if an executable is reachable on the current PATH."""
    return shutil.which(name) is not None


def run_command(command: str, description: str | None = None) -> Tuple[str, int]:
    """Run a shell command to completion and return output and return code.

    Combined stdout/stderr is returned; the command and any failure are
    recorded in the run log.
    """
    desc = description or command
    _logging.info(f"Executing: {desc} ({command})")
    try:
        result = subprocess.run(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except Exception as e:
        _logging.info(f"Failed: {desc} ({type(e).__name__}: {e})")
        return f"Error: {e}", 1

    output = (result.stdout or "").strip()
    if result.returncode != 0:
        _logging.info(f"Failed: {desc} (exit status: {result.returncode})")
        if output:
            _logging.info(f"Output of {desc}:\n{output}")
    return output, result.returncode


def is_privileged() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def execution_mode() -> ExecutionMode:
    """Choose how privileged commands are run on this host."""
    if is_privileged():
        return ExecutionMode.DIRECT
    if command_exists(ELEVATION_HELPER):
        return ExecutionMode.ELEVATED
    return ExecutionMode.UNPRIVILEGED


def run_privileged(command: str, description: str | None = None) -> Tuple[str, int]:
    """Run a command with root privileges when they can be obtained.

    Compound commands are wrapped in ``sh -c`` so that every part runs
    elevated. Without root or an elevation helper the command runs as the
    current user and its exit status reports the outcome.
    """
    mode = execution_mode()
    if mode == ExecutionMode.ELEVATED:
        command = f"{ELEVATION_HELPER} sh -c {shlex.quote(command)}"
    return run_command(command, description)


__all__ = [
    "ExecutionMode",
    "command_exists",
    "run_command",
    "is_privileged",
    "execution_mode",
    "run_privileged",
]
