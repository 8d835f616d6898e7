"""Component installers: catalog, strategies and the state machine."""

from .components import COMPONENT_NAMES, build_components, get_component
from .engine import install_component, is_satisfied, try_strategies
from .models import (
    ComponentSpec,
    InstallContext,
    InstallOutcome,
    InstallStatus,
    ProbeResult,
)
from .strategies import (
    BinaryFetch,
    CommandProbe,
    DirectArchiveDownload,
    FileProbe,
    LanguageRuntimeInstall,
    NativePackageManager,
    ScriptInstall,
)

__all__ = [
    "COMPONENT_NAMES",
    "build_components",
    "get_component",
    "install_component",
    "is_satisfied",
    "try_strategies",
    "ComponentSpec",
    "InstallContext",
    "InstallOutcome",
    "InstallStatus",
    "ProbeResult",
    "BinaryFetch",
    "CommandProbe",
    "DirectArchiveDownload",
    "FileProbe",
    "LanguageRuntimeInstall",
    "NativePackageManager",
    "ScriptInstall",
]
