"""Error types and formatting utilities for consistent error messages.

Two tiers of failure exist in devsetup:

- Fatal errors (subclasses of FatalError) stop the whole run immediately.
  Only an unsupported host and a missing downloader qualify.
- Soft errors (StrategyError) stay inside a single component installer,
  are recorded on the run state and never propagate past it.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Fatal errors name the manual remediation ('Please <remediation> manually.')
- Use present tense: 'must be', 'is required'
- Be concise but informative
"""


class FatalError(Exception):
    """Raised for preconditions without which no component can be installed."""

    def __init__(self, message: str, remediation: str):
        super().__init__(message)
        self.message = message
        self.remediation = remediation


class UnsupportedPlatformError(FatalError):
    """Raised when the host OS or CPU architecture is not recognized."""


class NoDownloaderError(FatalError):
    """Raised when neither curl nor wget is present or installable."""


class StrategyError(Exception):
    """Raised by a single installation strategy; caught by the installer."""


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Examples:
        >>> format_error("config file not found")
        'Error: config file not found'
    """
    return f"Error: {message}"


def format_critical(error: FatalError) -> tuple[str, str]:
    """Return the two console lines printed for a fatal error."""
    return f"CRITICAL: {error.message}", f"Please {error.remediation} manually."


__all__ = [
    "FatalError",
    "UnsupportedPlatformError",
    "NoDownloaderError",
    "StrategyError",
    "format_error",
    "format_critical",
]
