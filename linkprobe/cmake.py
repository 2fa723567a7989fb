# SPDX-License-Identifier: MIT
"""Driving CMake to build and install native libraries.

CMakeConfig configures a source tree into ``<out_dir>/build``, builds it,
and installs it into ``out_dir`` (unless CMAKE_INSTALL_PREFIX is given).
The link arguments of the result are then recovered from the build tree
with ``linkprobe.core.selector.extract_link_arguments``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from linkprobe.core.errors import CMakeError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def find_cmake(environ: Mapping[str, str] | None = None) -> str:
    """Locate the cmake executable.

    The ``CMAKE`` environment variable overrides the lookup in ``PATH``.
    Both are read from ``environ`` (default: os.environ).

    Raises:
        CMakeError: If cmake cannot be found.
    """
    if environ is None:
        environ = os.environ
    override = environ.get("CMAKE")
    if override:
        return override
    cmake = shutil.which("cmake", path=environ.get("PATH"))
    if cmake is None:
        raise CMakeError("cmake not found in PATH (install cmake or set CMAKE)")
    return cmake


class CMakeConfig:
    """Configuration for one CMake build.

    Example:
        dst = (
            CMakeConfig("thirdparty/zlib", out_dir=target_dir / "build-zlib")
            .profile("Release")
            .define("BUILD_SHARED_LIBS", "ON")
            .build()
        )
        # dst is the install prefix, dst / "build" the build tree
    """

    def __init__(
        self,
        source_dir: Path | str,
        *,
        out_dir: Path | str,
        generator: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Create a CMake configuration.

        Args:
            source_dir: Directory containing CMakeLists.txt.
            out_dir: Output directory; the build tree is ``out_dir/build``.
            generator: Optional CMake generator name (``-G``).
            env: Environment for cmake (default: inherit os.environ).
        """
        self.source_dir = Path(source_dir)
        self.out_dir = Path(out_dir)
        self.generator = generator
        self.env = dict(env) if env is not None else None
        self._profile = "Release"
        self._definitions: dict[str, str] = {}

    def profile(self, profile: str) -> CMakeConfig:
        """Set the build configuration (CMAKE_BUILD_TYPE / --config)."""
        self._profile = profile
        return self

    def define(self, key: str, value: Path | str) -> CMakeConfig:
        """Add a ``-D<key>=<value>`` definition."""
        self._definitions[key] = str(value)
        return self

    @property
    def build_dir(self) -> Path:
        return self.out_dir / "build"

    def configure_command(self, cmake: str) -> list[str]:
        cmd = [cmake, str(self.source_dir.absolute())]
        if self.generator:
            cmd.extend(["-G", self.generator])
        definitions = {
            "CMAKE_INSTALL_PREFIX": str(self.out_dir.absolute()),
            "CMAKE_BUILD_TYPE": self._profile,
        }
        definitions.update(self._definitions)
        cmd.extend(f"-D{key}={value}" for key, value in definitions.items())
        return cmd

    def build_command(self, cmake: str) -> list[str]:
        return [
            cmake,
            "--build",
            ".",
            "--target",
            "install",
            "--config",
            self._profile,
        ]

    def build(self) -> Path:
        """Configure, build and install.

        Returns:
            The output directory (the default install prefix).

        Raises:
            CMakeError: If cmake is missing or any step fails.
        """
        if not self.source_dir.is_dir():
            raise CMakeError("source directory does not exist", self.source_dir)

        cmake = find_cmake(self.env)
        self.build_dir.mkdir(parents=True, exist_ok=True)

        logger.info("Configuring %s (%s)", self.source_dir, self._profile)
        _run(self.configure_command(cmake), self.build_dir, self.env)
        logger.info("Building %s", self.source_dir)
        _run(self.build_command(cmake), self.build_dir, self.env)
        return self.out_dir

    def __repr__(self) -> str:
        return (
            f"CMakeConfig({str(self.source_dir)!r}, out_dir={str(self.out_dir)!r}, "
            f"profile={self._profile!r})"
        )


def _run(cmd: list[str], cwd: Path, env: dict[str, str] | None) -> None:
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, cwd=cwd, env=env)
    except OSError as e:
        raise CMakeError(f"failed to run {cmd[0]}: {e}", cwd) from e
    if result.returncode != 0:
        raise CMakeError(
            f"'{' '.join(cmd[1:3])}' exited with status {result.returncode}",
            cwd,
            returncode=result.returncode,
        )


def build_thirdparty(
    name: str,
    target_dir: Path,
    profile: str,
    definitions: dict[str, str],
    *,
    source_root: Path = Path("."),
    env: Mapping[str, str] | None = None,
) -> Path:
    """Build a bundled dependency from ``<source_root>/thirdparty/<name>``.

    The dependency is built in its own ``<target_dir>/build-<name>``
    directory, so that CMake does not wipe it and rebuild every time, and
    installed into ``target_dir``.

    Returns:
        The dependency's output directory.

    Raises:
        CMakeError: If the build directory cannot be created or CMake fails.
    """
    out_dir = target_dir / f"build-{name}"
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CMakeError(f"could not create build directory: {e}", out_dir) from e

    config = CMakeConfig(
        source_root / "thirdparty" / name, out_dir=out_dir, env=env
    )
    config.profile(profile)
    config.define("CMAKE_INSTALL_PREFIX", target_dir.absolute())
    config.define("CMAKE_PREFIX_PATH", (target_dir / "lib" / "cmake").absolute())
    for key, value in definitions.items():
        config.define(key, value)

    return config.build()
