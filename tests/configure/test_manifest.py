# SPDX-License-Identifier: MIT
"""Tests for linkprobe.configure.manifest."""

from pathlib import Path

import pytest

from linkprobe.configure.manifest import (
    Dependency,
    load_manifest,
    parse_manifest,
)
from linkprobe.core.errors import ConfigurationError

MANIFEST = """\
[project]
name = "openexr"
major = 0
minor = 1

[[dependencies]]
name = "zlib"

[[dependencies]]
name = "openexr"
definitions = { OPENEXR_BUILD_UTILS = "OFF", BUILD_TESTING = false, PYTHON = true, JOBS = 4 }
"""


class TestLoadManifest:
    """Tests for load_manifest."""

    def test_load(self, tmp_path):
        path = tmp_path / "linkprobe.toml"
        path.write_text(MANIFEST)

        manifest = load_manifest(path)

        assert manifest.name == "openexr"
        assert (manifest.major, manifest.minor) == (0, 1)
        assert [dep.name for dep in manifest.dependencies] == ["zlib", "openexr"]
        assert manifest.source_dir == tmp_path.absolute()

    def test_definitions_keep_order_and_convert_values(self, tmp_path):
        path = tmp_path / "linkprobe.toml"
        path.write_text(MANIFEST)

        definitions = load_manifest(path).dependencies[1].definitions

        assert list(definitions.items()) == [
            ("OPENEXR_BUILD_UTILS", "OFF"),
            ("BUILD_TESTING", "OFF"),
            ("PYTHON", "ON"),
            ("JOBS", "4"),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot read manifest"):
            load_manifest(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "linkprobe.toml"
        path.write_text("[project\n")
        with pytest.raises(ConfigurationError, match="invalid TOML") as exc_info:
            load_manifest(path)
        assert exc_info.value.path == path


class TestParseManifest:
    """Tests for parse_manifest validation."""

    path = Path("/src/linkprobe.toml")

    def test_minimal(self):
        manifest = parse_manifest({"project": {"name": "foo"}}, self.path)
        assert (manifest.major, manifest.minor) == (0, 0)
        assert manifest.dependencies == []
        assert manifest.source_dir == Path("/src")

    def test_missing_project(self):
        with pytest.raises(ConfigurationError, match=r"missing \[project\] table"):
            parse_manifest({}, self.path)

    def test_missing_name(self):
        with pytest.raises(ConfigurationError, match="needs a 'name'"):
            parse_manifest({"project": {"major": 1}}, self.path)

    @pytest.mark.parametrize("value", [-1, "1", 1.5, True])
    def test_bad_version(self, value):
        with pytest.raises(ConfigurationError, match="major must be"):
            parse_manifest({"project": {"name": "foo", "major": value}}, self.path)

    def test_dependencies_must_be_array(self):
        data = {"project": {"name": "foo"}, "dependencies": {"name": "zlib"}}
        with pytest.raises(ConfigurationError, match="array of tables"):
            parse_manifest(data, self.path)

    def test_dependency_needs_name(self):
        data = {"project": {"name": "foo"}, "dependencies": [{"definitions": {}}]}
        with pytest.raises(ConfigurationError, match=r"dependencies\[0\] needs"):
            parse_manifest(data, self.path)

    def test_definitions_must_be_table(self):
        data = {
            "project": {"name": "foo"},
            "dependencies": [{"name": "zlib", "definitions": ["A=1"]}],
        }
        with pytest.raises(ConfigurationError, match="must be a table"):
            parse_manifest(data, self.path)

    def test_unsupported_definition_value(self):
        data = {
            "project": {"name": "foo"},
            "dependencies": [{"name": "zlib", "definitions": {"A": [1, 2]}}],
        }
        with pytest.raises(ConfigurationError, match="unsupported definition"):
            parse_manifest(data, self.path)

    def test_dependency_repr(self):
        assert repr(Dependency("zlib")) == "zlib"
