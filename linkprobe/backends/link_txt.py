# SPDX-License-Identifier: MIT
"""Link transcript backend for Unix-like platforms.

CMake's Makefile and Ninja generators record the full linker command
for each target in ``CMakeFiles/<target>.dir/link.txt``, e.g.::

    /usr/bin/c++ -fPIC -O3 -shared -Wl,-soname,libfoo.so -o libfoo.so
        CMakeFiles/foo.dir/foo.cpp.o -L/opt/lib -lz /opt/lib/libbar.so.1

Everything up to and including ``-o <output>`` is the compiler driver and
its options; what follows are the inputs and link arguments.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from linkprobe.backends.backend import BaseBackend, Found
from linkprobe.core.errors import MalformedArtifactError, MissingArtifactError
from linkprobe.core.patterns import UNIX_LIBRARY_PATTERN, classify_tokens

if TYPE_CHECKING:
    from linkprobe.backends.backend import BackendResult
    from linkprobe.core.linkargs import LinkArgument
    from linkprobe.core.patterns import LibraryPattern

OUTPUT_FLAG = "-o"


def link_txt_path(build_dir: Path, target: str) -> Path:
    """Path of the link transcript CMake writes for ``target``."""
    return Path(build_dir) / "CMakeFiles" / f"{target}.dir" / "link.txt"


def parse_link_line(
    text: str,
    pattern: LibraryPattern = UNIX_LIBRARY_PATTERN,
    *,
    path: Path | None = None,
) -> list[LinkArgument]:
    """Parse a linker command line into link arguments.

    Args:
        text: The linker invocation, as written in link.txt.
        pattern: Library path pattern used to recognize library files.
        path: Where the text came from, for error messages.

    Returns:
        Link arguments in command-line order. Tokens that are not link
        arguments (object files, -Wall, -O2, ...) are dropped.

    Raises:
        MalformedArtifactError: If the command has no ``-o <output>``.

    Example:
        >>> parse_link_line("cc -o out.exe a.o -L/x -lfoo")
        [LinkDirectory(path='/x'), LinkLibrary(name='foo')]
    """
    tokens = text.split()
    try:
        output_index = tokens.index(OUTPUT_FLAG)
    except ValueError:
        raise MalformedArtifactError(
            path, "link.txt", f"no '{OUTPUT_FLAG}' output flag in link command"
        ) from None

    # Skip the flag and the output file name that follows it
    return classify_tokens(tokens[output_index + 2 :], pattern)


class LinkTxtBackend(BaseBackend):
    """Recover link arguments from a CMake link.txt transcript.

    This is the only backend on Unix-like platforms, so a missing
    transcript is raised as an error rather than reported as NotFound.
    """

    def __init__(self, pattern: LibraryPattern = UNIX_LIBRARY_PATTERN) -> None:
        super().__init__("link.txt")
        self.pattern = pattern

    def artifact_path(self, build_dir: Path, target: str) -> Path:
        return link_txt_path(build_dir, target)

    def extract(
        self, build_dir: Path, target: str, configuration: str
    ) -> BackendResult:
        path = self.artifact_path(build_dir, target)
        data = self._read(path)
        if data is None:
            raise MissingArtifactError(
                path, self.name, "did the native build run for this target?"
            )
        text = data.decode("utf-8", errors="replace")
        return Found(parse_link_line(text, self.pattern, path=path))
