"""Host operating system and architecture detection."""

import logging
import platform
from dataclasses import dataclass
from enum import Enum

from .errors import UnsupportedPlatformError

_logging = logging.getLogger(__name__)


class OsFamily(Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class Arch(Enum):
    AMD64 = "amd64"
    ARM64 = "arm64"


_KERNELS = {
    "Linux": OsFamily.LINUX,
    "Darwin": OsFamily.MACOS,
    "Windows": OsFamily.WINDOWS,
}

_WINDOWS_PREFIXES = ("MINGW", "MSYS", "CYGWIN")

_MACHINES = {
    "x86_64": Arch.AMD64,
    "amd64": Arch.AMD64,
    "AMD64": Arch.AMD64,
    "aarch64": Arch.ARM64,
    "arm64": Arch.ARM64,
    "ARM64": Arch.ARM64,
}


@dataclass(frozen=True)
class HostProfile:
    os_family: OsFamily
    arch: Arch

    def __str__(self) -> str:
        return f"{self.os_family.value} ({self.arch.value})"


def map_kernel(kernel: str) -> OsFamily:
    if kernel in _KERNELS:
        return _KERNELS[kernel]
    if kernel.upper().startswith(_WINDOWS_PREFIXES):
        return OsFamily.WINDOWS
    raise UnsupportedPlatformError(
        f"Unsupported OS: {kernel or 'unknown'}", "use Linux/macOS/Windows"
    )


def map_machine(machine: str) -> Arch:
    try:
        return _MACHINES[machine]
    except KeyError:
        raise UnsupportedPlatformError(
            f"Unsupported arch: {machine or 'unknown'}", "use x86_64/arm64"
        ) from None


def detect_host(kernel: str | None = None, machine: str | None = None) -> HostProfile:
    """Detect the host profile.

    Args:
        kernel: Kernel name override (defaults to ``platform.system()``)
        machine: Machine string override (defaults to ``platform.machine()``)

    Raises:
        UnsupportedPlatformError: If either value is not in the lookup tables
    """
    kernel = platform.system() if kernel is None else kernel
    machine = platform.machine() if machine is None else machine

    host = HostProfile(os_family=map_kernel(kernel), arch=map_machine(machine))
    _logging.info(f"Detected system: {host}")
    return host


__all__ = ["OsFamily", "Arch", "HostProfile", "detect_host", "map_kernel", "map_machine"]
