"""Version extraction and comparison utilities."""

import re
from typing import Tuple

_TOKEN = re.compile(r"\d+|[^\d.\-+_~]+")


def extract_version_number(version_str: str) -> str:
    """Extract version number from version string.

    Accepts raw tool output such as ``"go version go1.25.5 linux/amd64"``
    or ``"Python 3.12.0"`` and returns the dotted version part.
    """
    if not version_str:
        return ""

    # Look for version patterns like v1.2.3, 1.2.3, or version numbers in parentheses
    patterns = [
        r"v?(\d+\.\d+\.\d+(?:\.\d+)?)",  # v1.2.3 or 1.2.3
        r"v?(\d+\.\d+(?:\.\d+)?)",  # v1.2 or 1.2
        r"v?(\d+)",  # v1 or 1
    ]

    for pattern in patterns:
        match = re.search(pattern, version_str)
        if match:
            return match.group(1)

    # If no version found, return empty string to avoid comparing "Unknown" vs "1.2.3"
    return ""


def _natural_key(version: str) -> Tuple[Tuple[int, int | str], ...]:
    # Numeric runs sort before text runs and compare as integers.
    key = []
    for token in _TOKEN.findall(version):
        if token.isdigit():
            key.append((0, int(token)))
        else:
            key.append((1, token))
    return tuple(key)


def compare_versions(version1: str, version2: str) -> int:
    """Compare two version strings. Returns -1, 0, or 1.

    Segments are compared naturally, so ``"1.9" < "1.10"``. A string with
    no recognizable version sorts below every real version.
    """
    v1 = extract_version_number(version1 or "")
    v2 = extract_version_number(version2 or "")

    if not v1 or not v2:
        if v1 == v2:
            return 0
        return -1 if not v1 else 1

    # Keep any suffix after the numeric core ("7.0-rc1") for tie breaks.
    v1 = _with_suffix(version1, v1)
    v2 = _with_suffix(version2, v2)

    k1, k2 = _natural_key(v1), _natural_key(v2)
    if k1 < k2:
        return -1
    elif k1 > k2:
        return 1
    else:
        return 0


def _with_suffix(raw: str, core: str) -> str:
    start = raw.find(core)
    rest = raw[start + len(core):]
    match = re.match(r"[\-+_~.]?[A-Za-z0-9]+(?:[.\-][A-Za-z0-9]+)*", rest)
    if match and not rest[:1].isspace():
        return core + match.group(0)
    return core


def version_ge(version: str | None, required: str | None) -> bool:
    """Return True if version is at least required.

    A missing requirement is satisfied by any detected version. Never
    raises: an unparseable version is treated as too old.
    """
    if not version:
        return False
    if not required:
        return True
    return compare_versions(version, required) >= 0


__all__ = [
    "extract_version_number",
    "compare_versions",
    "version_ge",
]
