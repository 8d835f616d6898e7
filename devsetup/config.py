"""Settings loading and validation."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .download import DEFAULT_ATTEMPTS, DEFAULT_RETRY_DELAY
from .paths import DEFAULT_PROFILES


class ConfigError(Exception):
    """Raised when the settings file cannot be read or fails validation."""
    pass


@dataclass(frozen=True)
class VersionPin:
    """Minimum acceptable and preferred install version for one tool."""
    required: str | None = None
    target: str | None = None


DEFAULT_VERSIONS = {
    "python": VersionPin(required="3.8"),
    "go": VersionPin(required="1.25", target="1.25.5"),
    "ntgcalls": VersionPin(target="v2.1.0"),
}


@dataclass
class Settings:
    """Tunable parameters for a run."""
    versions: dict[str, VersionPin] = field(default_factory=lambda: dict(DEFAULT_VERSIONS))
    download_attempts: int = DEFAULT_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY
    profiles: tuple[str, ...] = DEFAULT_PROFILES
    log_dir: Path | None = None
    work_dir: Path | None = None

    def __post_init__(self):
        if self.download_attempts < 1:
            raise ValueError("download_attempts must be at least 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must not be negative")

    def pin(self, component: str) -> VersionPin:
        return self.versions.get(component, VersionPin())


def _optional_str(value: object, where: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # YAML reads 3.8 as a float; "3.10" must be quoted to keep its zero
        return str(value)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{where} must be a non-empty string or null, got {type(value).__name__}")
    return value


def _validate_versions(data: object) -> dict[str, VersionPin]:
    if not isinstance(data, dict):
        raise ConfigError(f"versions must be a mapping, got {type(data).__name__}")

    versions = dict(DEFAULT_VERSIONS)
    for name, pin_data in data.items():
        if not isinstance(pin_data, dict):
            raise ConfigError(f"versions.{name} must be a mapping, got {type(pin_data).__name__}")
        unknown = set(pin_data) - {"required", "target"}
        if unknown:
            raise ConfigError(f"versions.{name} has unknown keys: {', '.join(sorted(unknown))}")
        base = versions.get(name, VersionPin())
        versions[name] = VersionPin(
            required=_optional_str(pin_data.get("required", base.required), f"versions.{name}.required"),
            target=_optional_str(pin_data.get("target", base.target), f"versions.{name}.target"),
        )
    return versions


def validate_settings(data: dict) -> Settings:
    """Validate and convert a raw mapping to Settings.

    Raises:
        ConfigError: If validation fails, naming the offending field
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a mapping, got {type(data).__name__}")

    kwargs: dict = {}

    if "versions" in data:
        kwargs["versions"] = _validate_versions(data["versions"])

    download = data.get("download", {})
    if not isinstance(download, dict):
        raise ConfigError(f"download must be a mapping, got {type(download).__name__}")
    if "attempts" in download:
        attempts = download["attempts"]
        if not isinstance(attempts, int) or isinstance(attempts, bool):
            raise ConfigError(f"download.attempts must be an integer, got {type(attempts).__name__}")
        kwargs["download_attempts"] = attempts
    if "retry_delay" in download:
        delay = download["retry_delay"]
        if not isinstance(delay, (int, float)) or isinstance(delay, bool):
            raise ConfigError(f"download.retry_delay must be a number, got {type(delay).__name__}")
        kwargs["retry_delay"] = float(delay)

    if "profiles" in data:
        profiles = data["profiles"]
        if not isinstance(profiles, list) or not all(isinstance(p, str) and p for p in profiles):
            raise ConfigError("profiles must be a list of file names")
        kwargs["profiles"] = tuple(profiles)

    for key in ("log_dir", "work_dir"):
        if key in data and data[key] is not None:
            value = data[key]
            if not isinstance(value, str):
                raise ConfigError(f"{key} must be a string, got {type(value).__name__}")
            kwargs[key] = Path(value).expanduser()

    try:
        return Settings(**kwargs)
    except ValueError as e:
        raise ConfigError(f"download: {e}")


def load_settings(path: Path | None) -> Settings:
    """Load settings from a YAML file.

    A missing file yields the defaults; an empty file does too.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if path is None or not path.exists():
        return Settings()

    try:
        text = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(f"Permission denied reading settings file: {path}")
    except UnicodeDecodeError:
        raise ConfigError(f"Settings file is not valid UTF-8: {path}")
    except OSError as e:
        raise ConfigError(f"Error reading settings file {path}: {e}")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Settings syntax error in {path}: {e}") from e

    if data is None:
        return Settings()
    return validate_settings(data)


__all__ = [
    "ConfigError",
    "VersionPin",
    "Settings",
    "DEFAULT_VERSIONS",
    "validate_settings",
    "load_settings",
]
