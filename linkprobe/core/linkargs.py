# SPDX-License-Identifier: MIT
"""Link arguments recovered from native build output.

A link argument is one normalized instruction needed to link a binary:
a directory to search, a library to link by name, or a library found as
a concrete file. Backends produce them in the order they appear in the
build artifact, and that order is significant: a later search path can
override an earlier one, so sequences are never sorted or deduplicated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath, PureWindowsPath
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from linkprobe.core.patterns import LibraryPattern


@dataclass(frozen=True)
class LinkDirectory:
    """A directory to add to the linker search path."""

    path: str


@dataclass(frozen=True)
class LinkLibrary:
    """A library linked by name and resolved through the search path."""

    name: str


@dataclass(frozen=True)
class ResolvedLibrary:
    """A library discovered as a concrete file path.

    Only ``full_path`` is given; ``basename`` and ``file_name`` are always
    derived from it with ``pattern``, the same rule the matcher used to
    recognize the path.

    Attributes:
        full_path: The path exactly as it appeared in the artifact.
        pattern: The platform library pattern used to split the path.
        basename: Logical library name ("mylib" for ".../libmylib.so").
        file_name: Final path segment ("libmylib.so").

    Raises:
        ValueError: If ``full_path`` does not match ``pattern``.
    """

    full_path: str
    pattern: LibraryPattern = field(compare=False, repr=False)
    basename: str = field(init=False)
    file_name: str = field(init=False)

    def __post_init__(self) -> None:
        parts = self.pattern.split(self.full_path)
        if parts is None:
            raise ValueError(
                f"{self.full_path!r} is not a {self.pattern.platform} library path"
            )
        basename, file_name = parts
        object.__setattr__(self, "basename", basename)
        object.__setattr__(self, "file_name", file_name)

    @property
    def directory(self) -> str:
        """The directory containing the library, as written in the artifact."""
        if self.pattern.platform == "windows":
            return str(PureWindowsPath(self.full_path).parent)
        return str(PurePosixPath(self.full_path).parent)


LinkArgument = Union[LinkDirectory, LinkLibrary, ResolvedLibrary]


def describe(arguments: list[LinkArgument]) -> str:
    """Render a sequence of link arguments for diagnostic output."""
    return "[" + ", ".join(repr(arg) for arg in arguments) + "]"


def to_dict(argument: LinkArgument) -> dict[str, str]:
    """Convert a link argument to a JSON-serializable dict."""
    if isinstance(argument, LinkDirectory):
        return {"kind": "directory", "path": argument.path}
    if isinstance(argument, LinkLibrary):
        return {"kind": "library", "name": argument.name}
    return {
        "kind": "resolved",
        "full_path": argument.full_path,
        "basename": argument.basename,
        "file_name": argument.file_name,
    }
