# SPDX-License-Identifier: MIT
"""Link-argument extraction backends (link.txt, vcxproj, NMake)."""

from linkprobe.backends.backend import (
    BackendResult,
    BaseBackend,
    Found,
    LinkBackend,
    NotFound,
)
from linkprobe.backends.link_txt import LinkTxtBackend, link_txt_path, parse_link_line
from linkprobe.backends.nmake import NmakeBackend, build_make_path, parse_build_make
from linkprobe.backends.vcxproj import VcxprojBackend, parse_vcxproj, vcxproj_path

__all__ = [
    # Protocol and results
    "BackendResult",
    "BaseBackend",
    "Found",
    "LinkBackend",
    "NotFound",
    # Unix
    "LinkTxtBackend",
    "link_txt_path",
    "parse_link_line",
    # Windows
    "VcxprojBackend",
    "vcxproj_path",
    "parse_vcxproj",
    "NmakeBackend",
    "build_make_path",
    "parse_build_make",
]
