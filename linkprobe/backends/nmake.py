# SPDX-License-Identifier: MIT
"""NMake makefile backend.

With the NMake generator, CMake writes the link step of a shared library
into ``CMakeFiles/<target>-shared.dir/build.make`` as an inline response
file: the ``/dll`` switch is followed by the objects and libraries passed
to link.exe, and the ``<<`` line closes the inline file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from linkprobe.backends.backend import BaseBackend, Found, NotFound
from linkprobe.core.patterns import WINDOWS_LIBRARY_PATTERN, classify_token

if TYPE_CHECKING:
    from linkprobe.backends.backend import BackendResult
    from linkprobe.core.linkargs import LinkArgument
    from linkprobe.core.patterns import LibraryPattern

DLL_MARKER = "/dll"
RECIPE_END_MARKER = "<<"


def build_make_path(build_dir: Path, target: str) -> Path:
    """Path of the NMake recipe CMake writes for ``target``."""
    return Path(build_dir) / "CMakeFiles" / f"{target}-shared.dir" / "build.make"


def parse_build_make(
    text: str, pattern: LibraryPattern = WINDOWS_LIBRARY_PATTERN
) -> list[LinkArgument] | None:
    """Collect the libraries of the shared-library link recipe.

    Returns:
        Link arguments between the ``/dll`` marker and the ``<<`` marker,
        or None if the recipe has no ``/dll`` marker.
    """
    tokens = iter(text.split())
    for token in tokens:
        if token == DLL_MARKER:
            break
    else:
        return None

    libs: list[LinkArgument] = []
    for token in tokens:
        if token == RECIPE_END_MARKER:
            break
        arg = classify_token(token, pattern)
        if arg is not None:
            libs.append(arg)
    return libs


class NmakeBackend(BaseBackend):
    """Recover link arguments from an NMake build.make recipe."""

    def __init__(self, pattern: LibraryPattern = WINDOWS_LIBRARY_PATTERN) -> None:
        super().__init__("nmake")
        self.pattern = pattern

    def artifact_path(self, build_dir: Path, target: str) -> Path:
        return build_make_path(build_dir, target)

    def extract(
        self, build_dir: Path, target: str, configuration: str
    ) -> BackendResult:
        path = self.artifact_path(build_dir, target)
        data = self._read(path)
        if data is None:
            return NotFound(f"{path} does not exist")

        libs = parse_build_make(data.decode("utf-8", errors="replace"), self.pattern)
        if libs is None:
            return NotFound(f"{path} has no {DLL_MARKER} link recipe")
        return Found(libs)
