# SPDX-License-Identifier: MIT
"""Classification of linker tokens into link arguments.

The rules are data: a table of flag prefixes shared by every platform,
and one library path pattern per platform. ``classify_token`` applies the
prefix table first, so a token starting with ``-l`` or ``-L`` is never
tested against the path pattern even if it also looks like a library file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from linkprobe.core.linkargs import (
    LinkArgument,
    LinkDirectory,
    LinkLibrary,
    ResolvedLibrary,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LibraryPattern:
    """A platform's naming convention for linkable library files.

    Attributes:
        platform: Platform name ("unix" or "windows").
        regex: Pattern searched in a path. Must define the named groups
            ``name`` (the library basename) and ``file`` (the final path
            segment).
    """

    platform: str
    regex: re.Pattern[str]

    def split(self, path: str) -> tuple[str, str] | None:
        """Split a library path into (basename, file_name).

        Returns:
            The pair, or None if the path does not follow the convention.
        """
        match = self.regex.search(path)
        if match is None:
            return None
        return match.group("name"), match.group("file")

    def matches(self, path: str) -> bool:
        return self.regex.search(path) is not None


# lib<name>.so, lib<name>.dylib, or lib<name>.so.N[.N[.N]] as the last path
# segment. A fourth version component is not recognized.
UNIX_LIBRARY_PATTERN = LibraryPattern(
    "unix",
    re.compile(
        r"(?:^|/)(?P<file>lib(?P<name>[^/]+?)(?:\.dylib|\.so(?:\.\d+){0,3}))$"
    ),
)

# <name>.lib after the last path separator (either slash), or a bare name.
# A ':' may only appear in a leading drive letter, so linker switches like
# /NODEFAULTLIB:libcmt.lib never match.
WINDOWS_LIBRARY_PATTERN = LibraryPattern(
    "windows",
    re.compile(
        r"^(?:[A-Za-z]:)?(?:[^:]*[\\/])?(?P<file>(?P<name>[^\\/:]+)\.lib)$",
        re.IGNORECASE,
    ),
)

# Flag prefixes, checked in order before any path matching.
PREFIX_RULES: tuple[tuple[str, Callable[[str], LinkArgument]], ...] = (
    ("-L", LinkDirectory),
    ("-l", LinkLibrary),
)


def classify_token(token: str, pattern: LibraryPattern) -> LinkArgument | None:
    """Classify a single linker token.

    Args:
        token: A linker flag, bare argument, or path-like string.
        pattern: The library path pattern for the target platform.

    Returns:
        LinkDirectory for ``-L<dir>``, LinkLibrary for ``-l<name>``,
        ResolvedLibrary for a path following the platform's library naming
        convention, or None if the token is none of those.

    Examples:
        >>> classify_token("-L/opt/lib", UNIX_LIBRARY_PATTERN)
        LinkDirectory(path='/opt/lib')
        >>> classify_token("-lz", UNIX_LIBRARY_PATTERN)
        LinkLibrary(name='z')
        >>> classify_token("-O2", UNIX_LIBRARY_PATTERN) is None
        True
    """
    for prefix, kind in PREFIX_RULES:
        if token.startswith(prefix):
            value = token[len(prefix) :]
            if not value:
                logger.debug("  %s: flag without a value, ignored", token)
                return None
            logger.debug("  %s: %s", token, kind.__name__)
            return kind(value)

    if pattern.matches(token):
        logger.debug("  %s: library path", token)
        return ResolvedLibrary(token, pattern)

    logger.debug("  %s: not a link argument", token)
    return None


def classify_tokens(
    tokens: list[str], pattern: LibraryPattern
) -> list[LinkArgument]:
    """Classify tokens in order, dropping the ones that are not link arguments."""
    result: list[LinkArgument] = []
    for token in tokens:
        arg = classify_token(token, pattern)
        if arg is not None:
            result.append(arg)
    return result
