# SPDX-License-Identifier: MIT
"""Host platform detection.

Provides a small description of the platform linkprobe runs on: the
operating system and the CPU architecture.
"""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass

_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "arm64",
}


@dataclass(frozen=True)
class Platform:
    """Description of a host platform.

    Attributes:
        os: Operating system name ("linux", "darwin", "windows", ...).
        arch: Normalized CPU architecture ("x86_64", "arm64", ...).
    """

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


def _normalize_os(name: str) -> str:
    if name == "win32":
        return "windows"
    if name.startswith("linux"):
        return "linux"
    return name


def get_platform() -> Platform:
    """Get the platform linkprobe is running on."""
    machine = _platform.machine().lower()
    return Platform(
        os=_normalize_os(sys.platform),
        arch=_ARCH_ALIASES.get(machine, machine),
    )
