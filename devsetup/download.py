"""Download client with bounded retry."""

import logging
import shlex
import time
from dataclasses import dataclass
from pathlib import Path

from .console import print_info, print_step, print_success, print_warning
from .errors import NoDownloaderError
from .execution import command_exists, run_command
from .packages import PackageInstaller

DEFAULT_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 2.0

_logging = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadBackend:
    name: str
    template: str

    def command_for(self, url: str, destination: Path) -> str:
        return self.template.format(url=shlex.quote(url), output=shlex.quote(str(destination)))


CURL = DownloadBackend("curl", "curl -fsSL -o {output} {url}")
WGET = DownloadBackend("wget", "wget -q -O {output} {url}")

BACKEND_PRIORITY = (CURL, WGET)


class Downloader:
    """Fetches URLs to local paths through a fixed backend."""

    def __init__(
        self,
        backend: DownloadBackend,
        attempts: int = DEFAULT_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        self.backend = backend
        self.attempts = attempts
        self.retry_delay = retry_delay

    def fetch(self, url: str, destination: Path) -> bool:
        """Download url to destination.

        Every non-zero exit is treated as retryable. Returns False once all
        attempts are used up; never raises.
        """
        command = self.backend.command_for(url, destination)
        for attempt in range(1, self.attempts + 1):
            _, returncode = run_command(command, f"Downloading {url}")
            if returncode == 0:
                return True
            if attempt < self.attempts:
                print_info(f"Download failed, retrying... ({attempt}/{self.attempts})")
                time.sleep(self.retry_delay)

        _logging.info(f"Giving up on {url} after {self.attempts} attempts")
        return False


def find_backend() -> DownloadBackend | None:
    for backend in BACKEND_PRIORITY:
        if command_exists(backend.name):
            return backend
    return None


def select_downloader(
    packages: PackageInstaller,
    attempts: int = DEFAULT_ATTEMPTS,
    retry_delay: float = DEFAULT_RETRY_DELAY,
) -> Downloader:
    """Pick the download backend for this run.

    Installs curl through the package manager when no backend is present.

    Raises:
        NoDownloaderError: If no backend is available or installable
    """
    print_step("Checking download tools...")

    backend = find_backend()
    if backend is None:
        print_warning("No download tool found, installing curl...")
        if packages.install(CURL.name) and command_exists(CURL.name):
            backend = CURL

    if backend is None:
        raise NoDownloaderError("Could not install curl/wget", "install curl or wget")

    print_success(f"{backend.name} available")
    _logging.info(f"Using {backend.name} for downloads")
    return Downloader(backend, attempts=attempts, retry_delay=retry_delay)


__all__ = [
    "DownloadBackend",
    "Downloader",
    "CURL",
    "WGET",
    "find_backend",
    "select_downloader",
    "DEFAULT_ATTEMPTS",
    "DEFAULT_RETRY_DELAY",
]
