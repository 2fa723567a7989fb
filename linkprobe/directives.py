# SPDX-License-Identifier: MIT
"""Linker directives for the host build orchestrator.

Link arguments are translated into two kinds of directive: a directory to
search for libraries, and a library to link. They are rendered in Cargo's
build-script syntax (``cargo:rustc-link-search=...``), which is what the
host orchestrator reads from a build script's standard output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Union

from linkprobe.core.linkargs import LinkDirectory, LinkLibrary, ResolvedLibrary

if TYPE_CHECKING:
    from collections.abc import Iterable

    from linkprobe.core.linkargs import LinkArgument

LibKind = Literal["dylib", "static"]


@dataclass(frozen=True)
class LinkSearch:
    """Add a directory to the library search path."""

    path: str
    kind: str = "native"

    def render_cargo(self) -> str:
        return f"cargo:rustc-link-search={self.kind}={self.path}"


@dataclass(frozen=True)
class LinkLib:
    """Link a library by name."""

    name: str
    kind: LibKind = "dylib"

    def render_cargo(self) -> str:
        return f"cargo:rustc-link-lib={self.kind}={self.name}"


Directive = Union[LinkSearch, LinkLib]


def directives_for(arguments: Iterable[LinkArgument]) -> list[Directive]:
    """Translate link arguments into directives, preserving order.

    A resolved library file becomes a search path for its directory plus
    a dynamic link against its basename.
    """
    result: list[Directive] = []
    for arg in arguments:
        if isinstance(arg, ResolvedLibrary):
            result.append(LinkSearch(arg.directory))
            result.append(LinkLib(arg.basename))
        elif isinstance(arg, LinkDirectory):
            result.append(LinkSearch(arg.path))
        elif isinstance(arg, LinkLibrary):
            result.append(LinkLib(arg.name))
        else:
            raise TypeError(f"not a link argument: {arg!r}")
    return result


def render_cargo(directives: Iterable[Directive]) -> list[str]:
    """Render directives as Cargo build-script output lines."""
    return [directive.render_cargo() for directive in directives]
