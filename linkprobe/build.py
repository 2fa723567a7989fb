# SPDX-License-Identifier: MIT
"""Build a C wrapper project and its dependencies, then link against them.

This is the full pipeline behind ``linkprobe build``:

1. Read the build settings from the environment.
2. Build the bundled dependencies (unless system ones are used), then the
   ``<project>-c`` wrapper library, with CMake.
3. Recover the wrapper's link arguments from its CMake build tree.
4. Translate everything into directives for the host build orchestrator.

On Unix the wrapper is linked statically, so it does not have to be
installed next to the final binary. On Windows it is built and linked as
a DLL: a static wrapper built in Debug would pull the debug C runtime into
a binary that links the release one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from linkprobe.cmake import CMakeConfig, build_thirdparty
from linkprobe.configure.platform import get_platform
from linkprobe.configure.settings import BuildSettings
from linkprobe.core.linkargs import describe
from linkprobe.core.selector import TargetPlatform, extract_link_arguments
from linkprobe.directives import LinkLib, LinkSearch, directives_for

if TYPE_CHECKING:
    from collections.abc import Mapping

    from linkprobe.configure.manifest import ProjectManifest
    from linkprobe.configure.platform import Platform
    from linkprobe.directives import Directive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WrapperNames:
    """Names of the C wrapper library of a project.

    Example:
        >>> names = WrapperNames("openexr", 0, 1)
        >>> names.versioned
        'openexr-c-0_1'
        >>> names.shared_versioned
        'openexr-c-0_1-shared'
    """

    project: str
    major: int
    minor: int

    @property
    def clib(self) -> str:
        """Source directory of the wrapper."""
        return f"{self.project}-c"

    @property
    def versioned(self) -> str:
        return f"{self.project}-c-{self.major}_{self.minor}"

    @property
    def shared_versioned(self) -> str:
        return f"{self.versioned}-shared"


def _cxx_runtime(platform: Platform) -> list[Directive]:
    if platform.is_linux:
        return [LinkLib("stdc++")]
    if platform.is_macos:
        return [LinkLib("c++")]
    return []


def build(
    manifest: ProjectManifest,
    target_dir: Path,
    *,
    environ: Mapping[str, str] | None = None,
    platform: Platform | None = None,
) -> list[Directive]:
    """Build a project's wrapper library and return its link directives.

    Args:
        manifest: The project to build.
        target_dir: Root of the build outputs; dependencies install into
            it, and the wrapper builds into ``<target_dir>/build-<clib>``.
        environ: Environment to read settings from and to run CMake in
            (default: os.environ).
        platform: Platform to build for (default: the host).

    Returns:
        Directives, in the order they must be given to the orchestrator.

    Raises:
        CMakeError: If any CMake build fails.
        ExtractionError: If the wrapper's link arguments cannot be recovered.
    """
    platform = platform or get_platform()
    settings = BuildSettings.from_env(manifest.name, environ)
    names = WrapperNames(manifest.name, manifest.major, manifest.minor)
    source_dir = manifest.source_dir
    target_dir = Path(target_dir)

    lib_path = target_dir / "lib"
    bin_path = target_dir / "bin"

    wrapper = CMakeConfig(
        source_dir / names.clib,
        out_dir=target_dir / f"build-{names.clib}",
        env=environ,
    )
    wrapper.profile(settings.build_type)
    wrapper.define("CMAKE_EXPORT_COMPILE_COMMANDS", "ON")

    if settings.build_libraries:
        logger.info("Building packaged dependencies %s", manifest.dependencies)
        for dep in manifest.dependencies:
            build_thirdparty(
                dep.name,
                target_dir,
                settings.build_type,
                dep.definitions,
                source_root=source_dir,
                env=environ,
            )
        wrapper.define("CMAKE_PREFIX_PATH", (lib_path / "cmake").absolute())
    else:
        logger.info(
            "Using system dependencies %s from CMAKE_PREFIX_PATH=%s",
            manifest.dependencies,
            settings.cmake_prefix_path,
        )

    dst = wrapper.build()

    link_args = extract_link_arguments(
        dst / "build",
        names.shared_versioned,
        settings.build_type,
        platform=TargetPlatform.current(platform),
    )
    logger.info("Link libs: %s", describe(link_args))

    directives: list[Directive] = [LinkSearch(str(dst))]
    if platform.is_windows:
        directives.append(LinkLib(names.shared_versioned, "dylib"))
    else:
        directives.append(LinkLib(names.versioned, "static"))

    if settings.build_libraries:
        # bin/ holds the DLLs on Windows; it must be searched for them to be found
        directives.append(LinkSearch(str(lib_path)))
        directives.append(LinkSearch(str(bin_path)))

    directives.extend(directives_for(link_args))
    directives.extend(_cxx_runtime(platform))
    return directives
