# SPDX-License-Identifier: MIT
"""
Linkprobe: recover the link arguments of a CMake-built native library.

Linkprobe builds a C wrapper library and its bundled dependencies with
CMake, reads back what the native build linked against (from link.txt,
a .vcxproj, or an NMake build.make), and turns it into linker directives
for the build orchestrator of the calling project.
"""

from __future__ import annotations

# Re-export commonly used classes for convenient imports
from linkprobe.core.errors import LinkprobeError
from linkprobe.core.linkargs import (
    LinkArgument,
    LinkDirectory,
    LinkLibrary,
    ResolvedLibrary,
)
from linkprobe.core.selector import TargetPlatform, extract_link_arguments

__version__ = "0.1.0"

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Errors
    "LinkprobeError",
    # Link arguments
    "LinkArgument",
    "LinkDirectory",
    "LinkLibrary",
    "ResolvedLibrary",
    # Extraction
    "TargetPlatform",
    "extract_link_arguments",
]
