# SPDX-License-Identifier: MIT
"""Backend protocol for link-argument extraction.

A backend knows one kind of build artifact (a link transcript, a project
file, a makefile fragment): where CMake writes it for a target, and how to
recover the link arguments from it.

Backends report a soft miss as a ``NotFound`` result, so the selector can
fall through to the next backend, and only when the artifact does not
exist or holds no link arguments. Hard failures (an artifact that exists
but cannot be read or parsed, or a missing artifact on a platform with no
fallback) are raised as exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Union, runtime_checkable

from linkprobe.core.errors import MissingArtifactError

if TYPE_CHECKING:
    from linkprobe.core.linkargs import LinkArgument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    """A backend recovered the link arguments."""

    arguments: list[LinkArgument]


@dataclass(frozen=True)
class NotFound:
    """A backend had no result; the next backend may be tried."""

    reason: str


BackendResult = Union[Found, NotFound]


@runtime_checkable
class LinkBackend(Protocol):
    """Protocol for link-argument extraction backends."""

    @property
    def name(self) -> str:
        """Backend name (e.g., 'link.txt', 'vcxproj', 'nmake')."""
        ...

    def artifact_path(self, build_dir: Path, target: str) -> Path:
        """Where CMake writes this backend's artifact for ``target``."""
        ...

    def extract(
        self, build_dir: Path, target: str, configuration: str
    ) -> BackendResult:
        """Recover the link arguments of ``target``.

        Args:
            build_dir: The CMake build tree.
            target: Versioned build target name.
            configuration: Build configuration ("Release", "Debug", ...).
        """
        ...


class BaseBackend:
    """Base class for backends with common functionality."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def artifact_path(self, build_dir: Path, target: str) -> Path:
        """Subclasses must implement."""
        raise NotImplementedError

    def extract(
        self, build_dir: Path, target: str, configuration: str
    ) -> BackendResult:
        """Subclasses must implement."""
        raise NotImplementedError

    def _read(self, path: Path) -> bytes | None:
        """Read an artifact, or return None if it does not exist.

        Raises:
            MissingArtifactError: If the artifact exists but cannot be read
                (a directory, no permission, ...).
        """
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.debug("%s: %s does not exist", self.name, path)
            return None
        except OSError as e:
            raise MissingArtifactError(path, self.name, e.strerror or str(e)) from e
        logger.debug("%s: read %s (%d bytes)", self.name, path, len(data))
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
