"""Native package manager adapter."""

import logging
import shlex
from dataclasses import dataclass
from typing import Sequence

from .console import print_info, print_success
from .execution import command_exists, run_command, run_privileged
from .state import RunState
from .system import HostProfile, OsFamily

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManager:
    name: str
    refresh_command: str
    install_command: str
    privileged: bool = True
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def is_present(self) -> bool:
        return command_exists(self.name)

    def install_for(self, package: str) -> str:
        return self.install_command.format(package=shlex.quote(package))


APT = PackageManager("apt", "apt update", "apt install -y {package}")
YUM = PackageManager("yum", "yum check-update", "yum install -y {package}")
DNF = PackageManager("dnf", "dnf check-update", "dnf install -y {package}")
PACMAN = PackageManager("pacman", "pacman -Sy", "pacman -S --noconfirm {package}")
BREW = PackageManager(
    "brew", "brew update", "brew install {package}", privileged=False, display_name="Homebrew"
)

MANAGER_PRIORITY: dict[OsFamily, tuple[PackageManager, ...]] = {
    OsFamily.LINUX: (APT, YUM, DNF, PACMAN),
    OsFamily.MACOS: (BREW,),
    OsFamily.WINDOWS: (),
}


class PackageInstaller:
    """Installs packages through the first native manager present on the host.

    The package index is refreshed at most once per run, tracked on the
    shared run state. Invocations are never retried.
    """

    def __init__(self, host: HostProfile, state: RunState):
        self.host = host
        self.state = state

    def candidates(self) -> tuple[PackageManager, ...]:
        return MANAGER_PRIORITY.get(self.host.os_family, ())

    def detect_manager(self) -> PackageManager | None:
        for manager in self.candidates():
            if manager.is_present():
                return manager
        return None

    def _run(self, manager: PackageManager, command: str, description: str) -> bool:
        runner = run_privileged if manager.privileged else run_command
        _, returncode = runner(command, description)
        return returncode == 0

    def refresh(self, manager: PackageManager | None = None) -> None:
        """Best-effort package index refresh, once per run."""
        if self.state.package_manager_refreshed:
            return
        manager = manager or self.detect_manager()
        if manager is not None:
            _logging.info(f"Updating package manager ({manager.label})...")
            self._run(manager, manager.refresh_command, f"Updating {manager.label}")
        self.state.package_manager_refreshed = True

    def install(
        self,
        package: str,
        display_name: str | None = None,
        managers: Sequence[str] | None = None,
    ) -> bool:
        """Install a package, returning True on a zero exit status.

        Args:
            package: Package name as the native manager knows it
            display_name: Name shown to the user
            managers: Restrict installation to these manager names
        """
        display_name = display_name or package
        manager = self.detect_manager()
        if manager is None:
            _logging.info(f"No supported package manager found for {display_name}")
            return False
        if managers is not None and manager.name not in managers:
            _logging.info(f"Skipping {display_name}: requires {', '.join(managers)}, found {manager.name}")
            return False

        print_info(f"Installing {display_name}...")
        self.refresh(manager)

        if self._run(manager, manager.install_for(package), f"Installing {package} via {manager.label}"):
            print_success(f"{display_name} installed via {manager.label}")
            return True
        return False


__all__ = [
    "PackageManager",
    "PackageInstaller",
    "MANAGER_PRIORITY",
    "APT",
    "YUM",
    "DNF",
    "PACMAN",
    "BREW",
]
