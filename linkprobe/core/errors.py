# SPDX-License-Identifier: MIT
"""Custom exceptions for linkprobe.

All linkprobe exceptions inherit from LinkprobeError, which includes
the optional path of the build artifact involved for better error messages.
"""

from __future__ import annotations

from pathlib import Path


class LinkprobeError(Exception):
    """Base class for all linkprobe exceptions.

    Attributes:
        message: The error message.
        path: Optional path of the artifact the error relates to.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
    ) -> None:
        self.message = message
        self.path = Path(path) if path is not None else None
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ExtractionError(LinkprobeError):
    """Error while recovering link arguments from build output."""


class MissingArtifactError(ExtractionError):
    """An expected build-output file does not exist or cannot be read.

    Attributes:
        backend: Name of the backend that looked for the artifact.
    """

    def __init__(self, path: Path | str, backend: str, reason: str = "") -> None:
        self.backend = backend
        message = f"{backend} artifact could not be read"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, path)


class MalformedArtifactError(ExtractionError):
    """The artifact exists but does not have the expected structure.

    Attributes:
        backend: Name of the backend that parsed the artifact.
    """

    def __init__(
        self, path: Path | str | None, backend: str, reason: str
    ) -> None:
        self.backend = backend
        super().__init__(f"malformed {backend} artifact: {reason}", path)


class NoLinkArgumentsError(ExtractionError):
    """Every backend for the platform was tried and none produced a result.

    Attributes:
        attempts: (backend name, reason) for each backend that was tried.
    """

    def __init__(self, attempts: list[tuple[str, str]]) -> None:
        self.attempts = attempts
        tried = "; ".join(f"{name}: {reason}" for name, reason in attempts)
        super().__init__(f"could not recover link arguments ({tried})")


class ConfigurationError(LinkprobeError):
    """Invalid project manifest or build settings."""


class CMakeError(LinkprobeError):
    """CMake could not be found or a CMake invocation failed.

    Attributes:
        returncode: Exit status of the failed command, if it ran.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        returncode: int | None = None,
    ) -> None:
        self.returncode = returncode
        super().__init__(message, path)
