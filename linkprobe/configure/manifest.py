# SPDX-License-Identifier: MIT
"""Project manifest (linkprobe.toml).

The manifest names the C wrapper project, its version, and the bundled
dependencies to build before it, in order::

    [project]
    name = "openexr"
    major = 0
    minor = 1

    [[dependencies]]
    name = "zlib"

    [[dependencies]]
    name = "openexr"
    definitions = { OPENEXR_BUILD_UTILS = "OFF", BUILD_TESTING = false }

Each dependency's sources live in ``thirdparty/<name>`` next to the
manifest. Definitions are passed to CMake as ``-D<key>=<value>`` in the
order written; booleans become ON/OFF.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from linkprobe.core.errors import ConfigurationError

MANIFEST_NAME = "linkprobe.toml"


@dataclass
class Dependency:
    """A bundled native dependency.

    Attributes:
        name: Directory name under ``thirdparty/``.
        definitions: CMake definitions, in the order they are applied.
    """

    name: str
    definitions: dict[str, str] = field(default_factory=dict)

    def __repr__(self) -> str:
        return self.name


@dataclass
class ProjectManifest:
    """A parsed linkprobe.toml.

    Attributes:
        name: Project name; the C wrapper lives in ``<name>-c``.
        major: Major version, baked into the wrapper library name.
        minor: Minor version, baked into the wrapper library name.
        dependencies: Bundled dependencies, in build order.
        source_dir: Directory containing the manifest.
    """

    name: str
    major: int
    minor: int
    dependencies: list[Dependency] = field(default_factory=list)
    source_dir: Path = field(default_factory=Path)


def _definition_value(value: Any) -> str:
    if isinstance(value, bool):
        return "ON" if value else "OFF"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"unsupported definition value {value!r}")


def _parse_dependency(index: int, raw: Any, path: Path) -> Dependency:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        raise ConfigurationError(f"dependencies[{index}] needs a 'name'", path)

    raw_defs = raw.get("definitions", {})
    if not isinstance(raw_defs, dict):
        raise ConfigurationError(
            f"dependencies[{index}].definitions must be a table", path
        )
    try:
        definitions = {key: _definition_value(val) for key, val in raw_defs.items()}
    except TypeError as e:
        raise ConfigurationError(f"dependencies[{index}]: {e}", path) from None

    return Dependency(name=raw["name"], definitions=definitions)


def parse_manifest(data: dict[str, Any], path: Path) -> ProjectManifest:
    """Build a ProjectManifest from decoded TOML data.

    Raises:
        ConfigurationError: If required keys are missing or have the
            wrong type.
    """
    project = data.get("project")
    if not isinstance(project, dict):
        raise ConfigurationError("missing [project] table", path)

    name = project.get("name")
    if not isinstance(name, str) or not name:
        raise ConfigurationError("[project] needs a 'name'", path)

    versions = []
    for key in ("major", "minor"):
        value = project.get(key, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigurationError(
                f"[project] {key} must be a non-negative integer", path
            )
        versions.append(value)

    raw_deps = data.get("dependencies", [])
    if not isinstance(raw_deps, list):
        raise ConfigurationError("'dependencies' must be an array of tables", path)

    return ProjectManifest(
        name=name,
        major=versions[0],
        minor=versions[1],
        dependencies=[
            _parse_dependency(i, raw, path) for i, raw in enumerate(raw_deps)
        ],
        source_dir=path.parent,
    )


def load_manifest(path: Path | str = MANIFEST_NAME) -> ProjectManifest:
    """Load a project manifest from a TOML file.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read manifest: {e.strerror}", path) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"invalid TOML: {e}", path) from e

    return parse_manifest(data, path.absolute())
