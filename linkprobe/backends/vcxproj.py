# SPDX-License-Identifier: MIT
"""Visual Studio project backend.

CMake's Visual Studio generators write one ``<target>.vcxproj`` per target.
Link settings live in per-configuration blocks::

    <ItemDefinitionGroup Condition="'$(Configuration)|$(Platform)'=='Release|x64'">
      <Link>
        <AdditionalDependencies>C:\\deps\\lib\\zlib.lib;kernel32.lib;%(AdditionalDependencies)</AdditionalDependencies>
      </Link>
    </ItemDefinitionGroup>

The document is read as a stream of start/end events and the first
dependency list of the requested configuration is returned.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING

from linkprobe.backends.backend import BaseBackend, Found, NotFound
from linkprobe.core.errors import MalformedArtifactError
from linkprobe.core.patterns import WINDOWS_LIBRARY_PATTERN, classify_tokens

if TYPE_CHECKING:
    from linkprobe.backends.backend import BackendResult
    from linkprobe.core.linkargs import LinkArgument
    from linkprobe.core.patterns import LibraryPattern

logger = logging.getLogger(__name__)

ITEM_DEFINITION_GROUP = "ItemDefinitionGroup"
LINK = "Link"
ADDITIONAL_DEPENDENCIES = "AdditionalDependencies"


def vcxproj_path(build_dir: Path, target: str) -> Path:
    """Path of the Visual Studio project CMake writes for ``target``."""
    return Path(build_dir) / f"{target}.vcxproj"


def _local_name(tag: str) -> str:
    # vcxproj elements live in the MSBuild namespace: "{uri}Link" -> "Link"
    return tag.rpartition("}")[2]


def parse_vcxproj(
    data: bytes | str,
    configuration: str,
    pattern: LibraryPattern = WINDOWS_LIBRARY_PATTERN,
    *,
    path: Path | None = None,
) -> list[LinkArgument] | None:
    """Find the linked libraries of one configuration in a vcxproj.

    Args:
        data: The project file contents.
        configuration: Configuration name; an ItemDefinitionGroup is used
            when its Condition attribute contains this text.
        pattern: Library path pattern used to recognize library files.
        path: Where the data came from, for error messages.

    Returns:
        The classified dependency list of the first matching configuration,
        or None if the document has no such list.

    Raises:
        MalformedArtifactError: If the document is not well-formed XML.
    """
    parser = ET.XMLPullParser(events=("start", "end"))
    in_item_definition = False
    in_link = False
    in_deps = False

    try:
        parser.feed(data)
        for event, elem in parser.read_events():
            name = _local_name(elem.tag)
            if event == "start":
                if name == ITEM_DEFINITION_GROUP:
                    condition = elem.get("Condition", "")
                    if configuration in condition:
                        logger.debug("vcxproj: using block %s", condition)
                        in_item_definition = True
                elif name == LINK and in_item_definition:
                    in_link = True
                elif name == ADDITIONAL_DEPENDENCIES and in_link:
                    in_deps = in_item_definition
            else:
                if name == ADDITIONAL_DEPENDENCIES:
                    if in_deps and elem.text and elem.text.strip():
                        tokens = [tok.strip() for tok in elem.text.split(";")]
                        return classify_tokens(tokens, pattern)
                    in_deps = False
                elif name == LINK:
                    in_link = False
                elif name == ITEM_DEFINITION_GROUP:
                    in_item_definition = False
        parser.close()
    except ET.ParseError as e:
        raise MalformedArtifactError(path, "vcxproj", str(e)) from e

    return None


class VcxprojBackend(BaseBackend):
    """Recover link arguments from a Visual Studio project file."""

    def __init__(self, pattern: LibraryPattern = WINDOWS_LIBRARY_PATTERN) -> None:
        super().__init__("vcxproj")
        self.pattern = pattern

    def artifact_path(self, build_dir: Path, target: str) -> Path:
        return vcxproj_path(build_dir, target)

    def extract(
        self, build_dir: Path, target: str, configuration: str
    ) -> BackendResult:
        path = self.artifact_path(build_dir, target)
        data = self._read(path)
        if data is None:
            return NotFound(f"{path} does not exist")

        arguments = parse_vcxproj(data, configuration, self.pattern, path=path)
        if arguments is None:
            return NotFound(
                f"{path} has no {ADDITIONAL_DEPENDENCIES} for {configuration!r}"
            )
        return Found(arguments)
