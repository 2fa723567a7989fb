# SPDX-License-Identifier: MIT
"""Backend selection for link-argument extraction.

The platform strategy is chosen once, as a TargetPlatform value, and
decides which backends are tried and in which order:

- Unix-like: link.txt only.
- Windows: vcxproj, then NMake build.make.

The first backend with a result wins. Each backend is tried at most once;
if none has a result the extraction fails. There is no partial success.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from linkprobe.backends import (
    Found,
    LinkTxtBackend,
    NmakeBackend,
    VcxprojBackend,
)
from linkprobe.configure.platform import get_platform
from linkprobe.core.errors import NoLinkArgumentsError
from linkprobe.core.linkargs import describe
from linkprobe.core.patterns import UNIX_LIBRARY_PATTERN, WINDOWS_LIBRARY_PATTERN

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linkprobe.backends import LinkBackend
    from linkprobe.configure.platform import Platform
    from linkprobe.core.linkargs import LinkArgument
    from linkprobe.core.patterns import LibraryPattern

logger = logging.getLogger(__name__)


class TargetPlatform(enum.Enum):
    """Which family of build artifacts to read."""

    UNIX = "unix"
    WINDOWS = "windows"

    @classmethod
    def current(cls, platform: Platform | None = None) -> TargetPlatform:
        """The strategy for a platform (default: the host platform)."""
        platform = platform or get_platform()
        return cls.WINDOWS if platform.is_windows else cls.UNIX

    @property
    def library_pattern(self) -> LibraryPattern:
        if self is TargetPlatform.WINDOWS:
            return WINDOWS_LIBRARY_PATTERN
        return UNIX_LIBRARY_PATTERN

    def backends(self) -> list[LinkBackend]:
        """Backends for this platform, in priority order."""
        if self is TargetPlatform.WINDOWS:
            return [VcxprojBackend(), NmakeBackend()]
        return [LinkTxtBackend()]


def select_first(
    backends: Sequence[LinkBackend],
    build_dir: Path,
    target: str,
    configuration: str,
) -> list[LinkArgument]:
    """Try backends in order and return the first result.

    Hard failures raised by a backend propagate immediately.

    Raises:
        NoLinkArgumentsError: If every backend reports NotFound.
    """
    attempts: list[tuple[str, str]] = []
    for backend in backends:
        logger.debug("Trying %s backend for %s", backend.name, target)
        result = backend.extract(build_dir, target, configuration)
        if isinstance(result, Found):
            logger.info(
                "Found %d link arguments for %s using %s",
                len(result.arguments),
                target,
                backend.name,
            )
            return result.arguments
        logger.info("%s backend: %s", backend.name, result.reason)
        attempts.append((backend.name, result.reason))

    raise NoLinkArgumentsError(attempts)


def extract_link_arguments(
    build_dir: Path | str,
    target: str,
    configuration: str = "Release",
    *,
    platform: TargetPlatform | None = None,
) -> list[LinkArgument]:
    """Recover the link arguments of a CMake target.

    Args:
        build_dir: The CMake build tree.
        target: Versioned build target name (e.g., "openexr-c-0_1-shared").
        configuration: Build configuration used to pick the vcxproj block.
        platform: Artifact family to read (default: the host's).

    Returns:
        Link arguments in the order they were found.

    Raises:
        MissingArtifactError: If link.txt is missing (Unix).
        MalformedArtifactError: If an artifact cannot be parsed.
        NoLinkArgumentsError: If no Windows backend had a result.
    """
    platform = platform or TargetPlatform.current()
    arguments = select_first(
        platform.backends(), Path(build_dir), target, configuration
    )
    logger.debug("Link arguments: %s", describe(arguments))
    return arguments
