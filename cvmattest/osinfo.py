"""Operating-system details reported with an attestation request."""

from __future__ import annotations

import os
import re
from typing import NamedTuple

from .diagnostics import get_logger

__all__ = [
    "OsVersion",
    "WindowsVersion",
    "attestation_pcr_list",
    "parse_os_release_file",
    "parse_version_string",
    "windows_version",
]

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_UINT32_MASK = 0xFFFFFFFF
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

_UNIX_PCRS = (0, 1, 2, 3, 4, 5, 6, 7)
_WINDOWS_PCRS = (0, 1, 2, 3, 4, 5, 6, 7, 11, 12, 13, 14)


class OsVersion(NamedTuple):
    """Major and minor version numbers of an operating system."""

    major: int
    minor: int


class WindowsVersion(NamedTuple):
    """Version numbers and build string reported for Windows."""

    major: int
    minor: int
    build: str


def attestation_pcr_list() -> list[int]:
    """Return the PCR indices used for attestation on this platform."""
    pcrs = _WINDOWS_PCRS if os.name == "nt" else _UNIX_PCRS
    return list(pcrs)


def _first_delimiter(line: str, delim: str) -> int | None:
    positions = [pos for pos in (line.find(ch) for ch in delim) if pos != -1]
    return min(positions) if positions else None


def parse_os_release_file(path: str | os.PathLike[str], delim: str) -> dict[str, str]:
    """Read key/value pairs from an os-release style file.

    A line is split at the first character that appears in ``delim``; lines
    without any such character are skipped. Double quotes are removed from
    values.
    """
    if not delim:
        get_logger().error("Invalid input argument")
        raise ValueError("delimiter must not be empty")

    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="\n") as handle:
            content = handle.read()
    except OSError:
        get_logger().error("Failed to open file:%s", path)
        raise

    entries: dict[str, str] = {}
    for line in content.split("\n"):
        pos = _first_delimiter(line, delim)
        if pos is None:
            continue
        entries[line[:pos]] = line[pos + 1:].replace('"', "")
    return entries


def _parse_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        get_logger().error("Invalid input argument")
        raise ValueError(f"not an integer: {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        get_logger().error("Input out of range")
        raise ValueError(f"integer out of range: {text!r}")
    if value == _INT_MIN:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def parse_version_string(text: str) -> OsVersion:
    """Extract the major and minor numbers from a dotted version string.

    A missing minor component counts as 0; components after the minor one
    are ignored.
    """
    if not text:
        get_logger().error("Invalid input parameter")
        raise ValueError("version string must not be empty")

    parts = text.split(".", 2)
    try:
        major = _parse_int(parts[0])
    except ValueError:
        get_logger().error("Failed to get major version from string:%s", parts[0])
        raise

    minor = 0
    if len(parts) > 1:
        try:
            minor = _parse_int(parts[1])
        except ValueError:
            get_logger().error("Failed to get minor version from string:%s", parts[1])
            raise

    return OsVersion(major & _UINT32_MASK, minor & _UINT32_MASK)


def windows_version() -> WindowsVersion:
    """Return the Windows version reported with attestation requests."""
    return WindowsVersion(10, 0, "NotApplicable")