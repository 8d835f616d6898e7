"""devsetup: provision a development machine with optional third-party tools."""

from .config import ConfigError, Settings, VersionPin, load_settings
from .environment import add_to_path
from .errors import (
    FatalError,
    NoDownloaderError,
    StrategyError,
    UnsupportedPlatformError,
    format_error,
)
from .execution import run_command, run_privileged
from .logs import setup_logging
from .state import RunState
from .system import Arch, HostProfile, OsFamily, detect_host
from .versions import compare_versions, extract_version_number, version_ge

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Settings",
    "VersionPin",
    "load_settings",
    "add_to_path",
    "FatalError",
    "NoDownloaderError",
    "StrategyError",
    "UnsupportedPlatformError",
    "format_error",
    "run_command",
    "run_privileged",
    "setup_logging",
    "RunState",
    "Arch",
    "HostProfile",
    "OsFamily",
    "detect_host",
    "compare_versions",
    "extract_version_number",
    "version_ge",
]
