"""Data models for the component installers."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Mapping, Protocol

from devsetup.config import Settings
from devsetup.environment import add_to_path
from devsetup.execution import command_exists
from devsetup.state import RunState
from devsetup.system import HostProfile, OsFamily

if TYPE_CHECKING:
    from devsetup.download import Downloader
    from devsetup.packages import PackageInstaller

INTERPRETER_CANDIDATES = ("python3", "python")


class InstallStatus(Enum):
    ALREADY_SATISFIED = "already_satisfied"
    INSTALLED = "installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ProbeResult:
    """Where a tool was found and which version it reported."""
    executable: str
    version: str | None = None


@dataclass
class InstallContext:
    """Everything a strategy needs to act on the host during one run."""
    host: HostProfile
    state: RunState
    settings: Settings
    downloader: "Downloader"
    packages: "PackageInstaller"
    home: Path
    work_dir: Path
    interpreter: str | None = None

    def resolve_interpreter(self) -> str | None:
        """Return the interpreter chosen by the Python component.

        Falls back to the first ``python3``/``python`` on PATH when that
        component did not run.
        """
        if self.interpreter:
            return self.interpreter
        for candidate in INTERPRETER_CANDIDATES:
            if command_exists(candidate):
                return candidate
        return None

    def add_to_path(self, directory: Path | str) -> list[Path]:
        return add_to_path(directory, self.state, home=self.home, profile_names=self.settings.profiles)


class Probe(Protocol):
    def __call__(self, ctx: InstallContext, spec: "ComponentSpec") -> ProbeResult | None: ...


class Strategy(Protocol):
    def describe(self) -> str: ...

    def run(self, ctx: InstallContext, spec: "ComponentSpec") -> None: ...


@dataclass(frozen=True)
class ComponentSpec:
    """Static description of one installable tool."""
    name: str
    display_name: str
    probe: Probe
    strategies: Mapping[OsFamily, tuple[Strategy, ...]] = field(default_factory=dict)
    required_version: str | None = None
    target_version: str | None = None
    on_ready: Callable[[InstallContext, ProbeResult], None] | None = None

    def strategies_for(self, host: HostProfile) -> tuple[Strategy, ...]:
        return tuple(self.strategies.get(host.os_family, ()))


@dataclass(frozen=True)
class InstallOutcome:
    component: str
    display_name: str
    status: InstallStatus
    detected_version: str | None = None
    strategy: str | None = None


__all__ = [
    "InstallStatus",
    "ProbeResult",
    "InstallContext",
    "Probe",
    "Strategy",
    "ComponentSpec",
    "InstallOutcome",
    "INTERPRETER_CANDIDATES",
]
