# SPDX-License-Identifier: MIT
"""Build settings read from the environment.

For a project named ``openexr`` the following variables are honoured:

- ``LINKPROBE_OPENEXR_BUILD_TYPE``: build configuration for the C wrapper
  and all bundled dependencies (default: "Release").
- ``LINKPROBE_OPENEXR_BUILD_LIBRARIES``: set to "1" to build the bundled
  dependencies even though ``CMAKE_PREFIX_PATH`` is set.
- ``CMAKE_PREFIX_PATH``: when set, dependencies are assumed to be installed
  on the system and are not built from ``thirdparty/``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BUILD_TYPE = "Release"


def env_prefix(project_name: str) -> str:
    """Environment variable prefix for a project.

    Example:
        >>> env_prefix("open-exr")
        'LINKPROBE_OPEN_EXR'
    """
    return "LINKPROBE_" + re.sub(r"[^A-Za-z0-9]", "_", project_name).upper()


@dataclass(frozen=True)
class BuildSettings:
    """How a project and its dependencies should be built.

    Attributes:
        build_type: CMake build configuration ("Release", "Debug", ...).
        build_libraries: Build the bundled dependencies from source.
        cmake_prefix_path: The user's CMAKE_PREFIX_PATH, if set.
    """

    build_type: str = DEFAULT_BUILD_TYPE
    build_libraries: bool = True
    cmake_prefix_path: str | None = None

    @classmethod
    def from_env(
        cls,
        project_name: str,
        environ: Mapping[str, str] | None = None,
    ) -> BuildSettings:
        """Read the settings for ``project_name`` from the environment."""
        if environ is None:
            environ = os.environ
        prefix = env_prefix(project_name)

        cmake_prefix_path = environ.get("CMAKE_PREFIX_PATH")
        if cmake_prefix_path is not None:
            build_libraries = environ.get(f"{prefix}_BUILD_LIBRARIES") == "1"
        else:
            build_libraries = True

        build_type = environ.get(f"{prefix}_BUILD_TYPE") or DEFAULT_BUILD_TYPE

        settings = cls(
            build_type=build_type,
            build_libraries=build_libraries,
            cmake_prefix_path=cmake_prefix_path,
        )
        logger.debug("Build settings for %s: %s", project_name, settings)
        return settings
