"""Catalog of installable components and their per-platform strategies."""

import logging
import shlex
import shutil
from pathlib import Path

from devsetup.config import Settings
from devsetup.errors import StrategyError
from devsetup.execution import run_privileged
from devsetup.system import OsFamily

from .models import ComponentSpec, InstallContext, ProbeResult
from .strategies import (
    BinaryFetch,
    CommandProbe,
    DirectArchiveDownload,
    FileProbe,
    LanguageRuntimeInstall,
    NativePackageManager,
    ScriptInstall,
)

# Installation order; later components rely on earlier ones (pip and
# yt-dlp use the interpreter the python component settles on).
COMPONENT_NAMES = ("deno", "python", "pip", "go", "ffmpeg", "ytdlp", "ntgcalls")

GO_ROOT = "/usr/local/go"
GET_PIP_URL = "https://bootstrap.pypa.io/get-pip.py"
YTDLP_RELEASES = "https://github.com/yt-dlp/yt-dlp/releases/latest/download"
NTGCALLS_RELEASES = "https://github.com/pytgcalls/ntgcalls/releases/download/{version}"
FFMPEG_WINDOWS_URL = "https://www.gyan.dev/ffmpeg/builds/ffmpeg-release-essentials.zip"
NTGCALLS_HEADER = "ntgcalls/ntgcalls.h"

_logging = logging.getLogger(__name__)


def _use_interpreter(ctx: InstallContext, found: ProbeResult) -> None:
    ctx.interpreter = found.executable


def _place_go(extracted: Path, ctx: InstallContext, spec: ComponentSpec) -> Path:
    source = extracted / "go"
    if not source.is_dir():
        raise StrategyError("Go archive has no top-level go/ directory")
    _, returncode = run_privileged(
        f"rm -rf {GO_ROOT} && mv {shlex.quote(str(source))} {GO_ROOT}",
        "Extracting Go",
    )
    if returncode != 0:
        raise StrategyError(f"Could not replace {GO_ROOT}")
    return Path(GO_ROOT) / "bin"


def _place_ffmpeg_windows(extracted: Path, ctx: InstallContext, spec: ComponentSpec) -> Path:
    builds = sorted(p for p in extracted.glob("ffmpeg-*-essentials_build") if p.is_dir())
    if not builds:
        raise StrategyError("FFmpeg archive layout not recognized")
    install_dir = ctx.home / "ffmpeg"
    install_dir.mkdir(parents=True, exist_ok=True)
    for item in (builds[0] / "bin").iterdir():
        shutil.copy2(item, install_dir / item.name)
    return install_dir


def _place_ntgcalls(extracted: Path, ctx: InstallContext, spec: ComponentSpec) -> None:
    header = extracted / "include" / "ntgcalls.h"
    lib_dir = extracted / "lib"
    libraries = sorted(p for p in lib_dir.rglob("*") if p.is_file()) if lib_dir.is_dir() else []
    if not header.is_file() or not libraries:
        raise StrategyError("ntgcalls archive is missing its header or library")

    include_dir = ctx.work_dir / "ntgcalls"
    include_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(header, include_dir / header.name)
    shutil.move(str(libraries[0]), str(ctx.work_dir / libraries[0].name))
    _logging.info(f"Placed ntgcalls header in {include_dir} and {libraries[0].name} in {ctx.work_dir}")
    return None


def _deno() -> ComponentSpec:
    unix = (ScriptInstall("https://deno.land/install.sh", "sh {script}", home_bin=".deno/bin"),)
    return ComponentSpec(
        name="deno",
        display_name="Deno",
        probe=CommandProbe(("deno",)),
        strategies={
            OsFamily.LINUX: unix,
            OsFamily.MACOS: unix,
            OsFamily.WINDOWS: (
                ScriptInstall(
                    "https://deno.land/install.ps1",
                    "powershell -NoProfile -ExecutionPolicy Bypass -File {script}",
                    home_bin=".deno/bin",
                ),
            ),
        },
    )


def _python(settings: Settings) -> ComponentSpec:
    pin = settings.pin("python")
    return ComponentSpec(
        name="python",
        display_name="Python",
        probe=CommandProbe(("python3", "python")),
        strategies={
            OsFamily.LINUX: (NativePackageManager("python3"),),
            OsFamily.MACOS: (NativePackageManager("python@3.12"),),
        },
        required_version=pin.required,
        target_version=pin.target,
        on_ready=_use_interpreter,
    )


def _pip() -> ComponentSpec:
    get_pip = ScriptInstall(GET_PIP_URL, "{python} {script}")
    return ComponentSpec(
        name="pip",
        display_name="pip",
        probe=CommandProbe((), "-m pip --version", use_interpreter=True),
        strategies={
            OsFamily.LINUX: (NativePackageManager("python3-pip"), get_pip),
            OsFamily.MACOS: (LanguageRuntimeInstall("{python} -m ensurepip"), get_pip),
            OsFamily.WINDOWS: (get_pip,),
        },
    )


def _go(settings: Settings) -> ComponentSpec:
    pin = settings.pin("go")
    base = "https://go.dev/dl/go{version}"
    return ComponentSpec(
        name="go",
        display_name="Go",
        probe=CommandProbe(("go",), "version"),
        strategies={
            OsFamily.LINUX: (DirectArchiveDownload(base + ".linux-{arch}.tar.gz", _place_go),),
            OsFamily.MACOS: (DirectArchiveDownload(base + ".darwin-{arch}.tar.gz", _place_go),),
            OsFamily.WINDOWS: (DirectArchiveDownload(base + ".windows-{arch}.zip", _place_go),),
        },
        required_version=pin.required,
        target_version=pin.target,
    )


def _ffmpeg() -> ComponentSpec:
    return ComponentSpec(
        name="ffmpeg",
        display_name="FFmpeg",
        probe=CommandProbe(("ffmpeg",), "-version"),
        strategies={
            OsFamily.LINUX: (
                NativePackageManager("ffmpeg"),
                NativePackageManager("ffmpeg", prerequisites=("epel-release",), managers=("yum",)),
            ),
            OsFamily.MACOS: (NativePackageManager("ffmpeg"),),
            OsFamily.WINDOWS: (DirectArchiveDownload(FFMPEG_WINDOWS_URL, _place_ffmpeg_windows),),
        },
    )


def _ytdlp() -> ComponentSpec:
    via_pip = (
        LanguageRuntimeInstall("{python} -m pip install -U yt-dlp", home_bin=".local/bin"),
        LanguageRuntimeInstall(
            "{python} -m pip install -U yt-dlp --break-system-packages", home_bin=".local/bin"
        ),
    )
    return ComponentSpec(
        name="ytdlp",
        display_name="yt-dlp",
        probe=CommandProbe(("yt-dlp",)),
        strategies={
            OsFamily.LINUX: via_pip
            + (
                BinaryFetch(
                    YTDLP_RELEASES + "/yt-dlp_linux{arch}",
                    "yt-dlp",
                    arch_aliases={"amd64": "", "arm64": "_aarch64"},
                ),
            ),
            OsFamily.MACOS: via_pip + (BinaryFetch(YTDLP_RELEASES + "/yt-dlp_macos", "yt-dlp"),),
            OsFamily.WINDOWS: via_pip + (BinaryFetch(YTDLP_RELEASES + "/yt-dlp.exe", "yt-dlp.exe"),),
        },
    )


def _ntgcalls(settings: Settings) -> ComponentSpec:
    pin = settings.pin("ntgcalls")
    return ComponentSpec(
        name="ntgcalls",
        display_name="ntgcalls",
        probe=FileProbe(NTGCALLS_HEADER),
        strategies={
            OsFamily.LINUX: (
                DirectArchiveDownload(
                    NTGCALLS_RELEASES + "/ntgcalls.linux-{arch}-static_libs.zip",
                    _place_ntgcalls,
                    arch_aliases={"amd64": "x86_64", "arm64": "arm64"},
                ),
            ),
            # No x86_64 macOS build is published.
            OsFamily.MACOS: (
                DirectArchiveDownload(
                    NTGCALLS_RELEASES + "/ntgcalls.macos-{arch}-static_libs.zip",
                    _place_ntgcalls,
                    arch_aliases={"arm64": "arm64"},
                ),
            ),
            OsFamily.WINDOWS: (
                DirectArchiveDownload(
                    NTGCALLS_RELEASES + "/ntgcalls.windows-{arch}-static_libs.zip",
                    _place_ntgcalls,
                    arch_aliases={"amd64": "x86_64"},
                ),
            ),
        },
        required_version=pin.required,
        target_version=pin.target,
    )


def build_components(settings: Settings | None = None) -> list[ComponentSpec]:
    """Return every component spec in installation order."""
    settings = settings or Settings()
    return [
        _deno(),
        _python(settings),
        _pip(),
        _go(settings),
        _ffmpeg(),
        _ytdlp(),
        _ntgcalls(settings),
    ]


def get_component(name: str, settings: Settings | None = None) -> ComponentSpec | None:
    return next((c for c in build_components(settings) if c.name == name), None)


__all__ = ["COMPONENT_NAMES", "GO_ROOT", "build_components", "get_component"]
