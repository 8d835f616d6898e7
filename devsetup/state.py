"""Process-wide run state and failure aggregation."""

import logging
from dataclasses import dataclass
from pathlib import Path

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_logging = logging.getLogger(__name__)


@dataclass
class RunState:
    """Mutable state for one invocation.

    Passed explicitly through every installer; only the component currently
    running mutates it.
    """
    log_path: Path
    warning_count: int = 0
    shell_reload_needed: bool = False
    package_manager_refreshed: bool = False

    def record_failure(self, message: str) -> None:
        """Count one soft failure and write it to the log."""
        self.warning_count += 1
        _logging.error(message)

    def mark_shell_reload(self) -> None:
        self.shell_reload_needed = True

    def status(self) -> bool:
        return self.warning_count == 0

    @property
    def exit_code(self) -> int:
        return EXIT_SUCCESS if self.status() else EXIT_FAILURE


__all__ = ["RunState", "EXIT_SUCCESS", "EXIT_FAILURE"]
