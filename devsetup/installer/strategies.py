"""Installation strategies and tool probes.

Each strategy is a frozen dataclass describing one way of installing a
component; ``run`` performs it and raises StrategyError on failure.
"""

import logging
import os
import shlex
import shutil
import stat
import tarfile
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping
from urllib.parse import urlparse

from devsetup.console import print_info, print_success
from devsetup.errors import StrategyError
from devsetup.execution import command_exists, run_command, run_privileged
from devsetup.versions import extract_version_number, version_ge

from .models import ComponentSpec, InstallContext, ProbeResult

SYSTEM_BIN_DIR = "/usr/local/bin"
USER_BIN_DIR = ".local/bin"

_logging = logging.getLogger(__name__)

Placement = Callable[[Path, InstallContext, ComponentSpec], Path | None]


def render_url(
    template: str,
    ctx: InstallContext,
    spec: ComponentSpec,
    arch_aliases: Mapping[str, str] | None = None,
) -> str:
    """Fill ``{version}``, ``{os}`` and ``{arch}`` in a URL template.

    Raises:
        StrategyError: If the host architecture has no published build
    """
    arch = ctx.host.arch.value
    if arch_aliases is not None:
        if arch not in arch_aliases:
            raise StrategyError(f"No {spec.display_name} build for {ctx.host}")
        arch = arch_aliases[arch]
    return template.format(
        version=spec.target_version or "",
        os=ctx.host.os_family.value,
        arch=arch,
    )


def _file_name(url: str) -> str:
    return os.path.basename(urlparse(url).path) or "download"


def _fetch(ctx: InstallContext, url: str, destination: Path) -> Path:
    if not ctx.downloader.fetch(url, destination):
        raise StrategyError(f"Download failed: {url}")
    return destination


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def _check(returncode: int, what: str) -> None:
    if returncode != 0:
        raise StrategyError(f"{what} failed (exit status: {returncode})")


@dataclass(frozen=True)
class NativePackageManager:
    package: str
    prerequisites: tuple[str, ...] = ()
    managers: tuple[str, ...] | None = None

    def describe(self) -> str:
        return f"package {self.package}"

    def run(self, ctx: InstallContext, spec: ComponentSpec) -> None:
        if self.managers is not None:
            manager = ctx.packages.detect_manager()
            if manager is None or manager.name not in self.managers:
                raise StrategyError(f"{self.describe()} needs {', '.join(self.managers)}")
        for prerequisite in self.prerequisites:
            # Best effort; the main package decides the outcome.
            ctx.packages.install(prerequisite, managers=self.managers)
        if not ctx.packages.install(self.package, spec.display_name, self.managers):
            raise StrategyError(f"Could not install {self.package}")


@dataclass(frozen=True)
class DirectArchiveDownload:
    url_template: str
    place: Placement
    arch_aliases: Mapping[str, str] | None = None

    def describe(self) -> str:
        return f"archive {_file_name(self.url_template)}"

    def run(self, ctx: InstallContext, spec: ComponentSpec) -> None:
        url = render_url(self.url_template, ctx, spec, self.arch_aliases)
        print_info(f"Downloading {spec.display_name} from {url}...")
        with tempfile.TemporaryDirectory(prefix="devsetup-") as tmp:
            archive = _fetch(ctx, url, Path(tmp) / _file_name(url))
            extracted = Path(tmp) / "extracted"
            try:
                shutil.unpack_archive(str(archive), str(extracted))
            except (shutil.ReadError, ValueError, EOFError, tarfile.TarError, zipfile.BadZipFile) as e:
                raise StrategyError(f"Could not extract {archive.name}: {e}") from e
            _logging.info(f"Extracted {archive.name}")
            bin_dir = self.place(extracted, ctx, spec)
        if bin_dir is not None:
            ctx.add_to_path(bin_dir)


@dataclass(frozen=True)
class ScriptInstall:
    script_url: str
    runner: str = "sh {script}"
    home_bin: str | None = None

    def describe(self) -> str:
        return f"script {_file_name(self.script_url)}"

    def run(self, ctx: InstallContext, spec: ComponentSpec) -> None:
        python = ""
        if "{python}" in self.runner:
            python = ctx.resolve_interpreter() or ""
            if not python:
                raise StrategyError("Python unavailable")
        with tempfile.TemporaryDirectory(prefix="devsetup-") as tmp:
            script = _fetch(ctx, self.script_url, Path(tmp) / _file_name(self.script_url))
            _make_executable(script)
            command = self.runner.format(script=shlex.quote(str(script)), python=python)
            _, returncode = run_command(command, f"Running {spec.display_name} installation script")
            _check(returncode, script.name)
        if self.home_bin:
            ctx.add_to_path(ctx.home / self.home_bin)


@dataclass(frozen=True)
class BinaryFetch:
    url_template: str
    binary_name: str
    arch_aliases: Mapping[str, str] | None = None

    def describe(self) -> str:
        return f"binary {self.binary_name}"

    def run(self, ctx: InstallContext, spec: ComponentSpec) -> None:
        url = render_url(self.url_template, ctx, spec, self.arch_aliases)
        with tempfile.TemporaryDirectory(prefix="devsetup-") as tmp:
            binary = _fetch(ctx, url, Path(tmp) / self.binary_name)
            _make_executable(binary)

            target = f"{SYSTEM_BIN_DIR}/{self.binary_name}"
            _, returncode = run_privileged(
                f"mv {shlex.quote(str(binary))} {shlex.quote(target)}",
                f"Installing {self.binary_name} binary to {SYSTEM_BIN_DIR}",
            )
            if returncode == 0:
                print_success(f"{self.binary_name} binary installed to {SYSTEM_BIN_DIR}")
                return

            user_bin = ctx.home / USER_BIN_DIR
            user_bin.mkdir(parents=True, exist_ok=True)
            shutil.move(str(binary), str(user_bin / self.binary_name))
        ctx.add_to_path(user_bin)
        print_success(f"{self.binary_name} binary installed to ~/{USER_BIN_DIR}")


@dataclass(frozen=True)
class LanguageRuntimeInstall:
    invocation: str
    home_bin: str | None = None

    def describe(self) -> str:
        return f"runtime install ({self.invocation})"

    def run(self, ctx: InstallContext, spec: ComponentSpec) -> None:
        python = ctx.resolve_interpreter()
        if not python:
            raise StrategyError("Python unavailable")
        command = self.invocation.format(python=python)
        _, returncode = run_command(command, f"Installing {spec.display_name} via {python}")
        _check(returncode, command)
        if self.home_bin:
            ctx.add_to_path(ctx.home / self.home_bin)


@dataclass(frozen=True)
class CommandProbe:
    """Probe that runs a tool with its version flag.

    With ``use_interpreter`` set, the command runs through the resolved
    Python interpreter (``python -m pip --version``).
    """
    commands: tuple[str, ...]
    version_args: str = "--version"
    use_interpreter: bool = False

    def _candidates(self, ctx: InstallContext) -> list[str]:
        if self.use_interpreter:
            python = ctx.resolve_interpreter()
            return [python] if python else []
        return [c for c in self.commands if command_exists(c)]

    def __call__(self, ctx: InstallContext, spec: ComponentSpec) -> ProbeResult | None:
        first = None
        for executable in self._candidates(ctx):
            output, returncode = run_command(f"{executable} {self.version_args}", f"Checking {executable}")
            if self.use_interpreter and returncode != 0:
                continue
            version = extract_version_number(output) if returncode == 0 else ""
            result = ProbeResult(executable, version or None)
            if spec.required_version is None or version_ge(result.version, spec.required_version):
                return result
            first = first or result
        return first


@dataclass(frozen=True)
class FileProbe:
    """Probe for artifacts that are files under the working directory."""
    relative_path: str

    def __call__(self, ctx: InstallContext, spec: ComponentSpec) -> ProbeResult | None:
        path = ctx.work_dir / self.relative_path
        if path.is_file():
            return ProbeResult(str(path), spec.target_version)
        return None


__all__ = [
    "NativePackageManager",
    "DirectArchiveDownload",
    "ScriptInstall",
    "BinaryFetch",
    "LanguageRuntimeInstall",
    "CommandProbe",
    "FileProbe",
    "render_url",
    "SYSTEM_BIN_DIR",
    "USER_BIN_DIR",
]
