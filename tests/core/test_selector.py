# SPDX-License-Identifier: MIT
"""Tests for backend selection and extract_link_arguments."""

from pathlib import Path

import pytest

from linkprobe import extract_link_arguments
from linkprobe.backends import (
    BaseBackend,
    Found,
    LinkBackend,
    LinkTxtBackend,
    NmakeBackend,
    NotFound,
    VcxprojBackend,
    build_make_path,
    link_txt_path,
)
from linkprobe.configure.platform import Platform
from linkprobe.core.errors import (
    ExtractionError,
    MalformedArtifactError,
    MissingArtifactError,
    NoLinkArgumentsError,
)
from linkprobe.core.linkargs import LinkDirectory, LinkLibrary
from linkprobe.core.patterns import UNIX_LIBRARY_PATTERN, WINDOWS_LIBRARY_PATTERN
from linkprobe.core.selector import TargetPlatform, select_first

TARGET = "openexr-c-0_1-shared"

VCXPROJ = """\
<Project xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <ItemDefinitionGroup Condition="'$(Configuration)|$(Platform)'=='Debug|x64'">
    <Link><AdditionalDependencies>C:\\lib\\foo_d.lib;%(AdditionalDependencies)</AdditionalDependencies></Link>
  </ItemDefinitionGroup>
  <ItemDefinitionGroup Condition="'$(Configuration)|$(Platform)'=='Release|x64'">
    <Link><AdditionalDependencies>C:\\lib\\foo.lib;%(AdditionalDependencies)</AdditionalDependencies></Link>
  </ItemDefinitionGroup>
</Project>
"""


class FakeBackend(BaseBackend):
    """Backend returning a canned result and recording calls."""

    def __init__(self, name, result):
        super().__init__(name)
        self.result = result
        self.calls = []

    def artifact_path(self, build_dir, target):
        return Path(build_dir) / target

    def extract(self, build_dir, target, configuration):
        self.calls.append((build_dir, target, configuration))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class TestTargetPlatform:
    def test_current_from_platform(self):
        windows = Platform(os="windows", arch="x86_64")
        linux = Platform(os="linux", arch="x86_64")
        macos = Platform(os="darwin", arch="arm64")
        assert TargetPlatform.current(windows) is TargetPlatform.WINDOWS
        assert TargetPlatform.current(linux) is TargetPlatform.UNIX
        assert TargetPlatform.current(macos) is TargetPlatform.UNIX

    def test_library_pattern(self):
        assert TargetPlatform.UNIX.library_pattern is UNIX_LIBRARY_PATTERN
        assert TargetPlatform.WINDOWS.library_pattern is WINDOWS_LIBRARY_PATTERN

    def test_unix_backends(self):
        backends = TargetPlatform.UNIX.backends()
        assert [type(b) for b in backends] == [LinkTxtBackend]

    def test_windows_backend_order(self):
        backends = TargetPlatform.WINDOWS.backends()
        assert [type(b) for b in backends] == [VcxprojBackend, NmakeBackend]

    def test_backends_satisfy_protocol(self):
        for platform in TargetPlatform:
            for backend in platform.backends():
                assert isinstance(backend, LinkBackend)


class TestSelectFirst:
    """Tests for select_first."""

    def test_first_result_wins(self, tmp_path):
        first = FakeBackend("first", Found([LinkLibrary("a")]))
        second = FakeBackend("second", Found([LinkLibrary("b")]))

        result = select_first([first, second], tmp_path, TARGET, "Release")

        assert result == [LinkLibrary("a")]
        assert second.calls == []

    def test_falls_through_not_found(self, tmp_path):
        first = FakeBackend("first", NotFound("nothing here"))
        second = FakeBackend("second", Found([LinkLibrary("b")]))

        result = select_first([first, second], tmp_path, TARGET, "Debug")

        assert result == [LinkLibrary("b")]
        assert first.calls == [(tmp_path, TARGET, "Debug")]
        assert second.calls == [(tmp_path, TARGET, "Debug")]

    def test_empty_result_is_a_result(self, tmp_path):
        first = FakeBackend("first", Found([]))
        second = FakeBackend("second", Found([LinkLibrary("b")]))
        assert select_first([first, second], tmp_path, TARGET, "Release") == []

    def test_all_not_found(self, tmp_path):
        backends = [
            FakeBackend("first", NotFound("no project")),
            FakeBackend("second", NotFound("no recipe")),
        ]
        with pytest.raises(NoLinkArgumentsError) as exc_info:
            select_first(backends, tmp_path, TARGET, "Release")

        assert exc_info.value.attempts == [
            ("first", "no project"),
            ("second", "no recipe"),
        ]
        assert "first: no project" in str(exc_info.value)
        assert all(len(b.calls) == 1 for b in backends)

    def test_hard_failure_stops_selection(self, tmp_path):
        error = MalformedArtifactError(None, "first", "broken")
        first = FakeBackend("first", error)
        second = FakeBackend("second", Found([LinkLibrary("b")]))

        with pytest.raises(MalformedArtifactError):
            select_first([first, second], tmp_path, TARGET, "Release")
        assert second.calls == []

    def test_no_backends(self, tmp_path):
        with pytest.raises(NoLinkArgumentsError):
            select_first([], tmp_path, TARGET, "Release")


class TestExtractUnix:
    """End-to-end extraction from a link.txt build tree."""

    def write(self, build_dir, text):
        path = link_txt_path(build_dir, TARGET)
        path.parent.mkdir(parents=True)
        path.write_text(text)

    def test_extract(self, tmp_path):
        self.write(
            tmp_path, "c++ -shared -o libx.so x.o -L/opt/lib -lz /opt/lib/libfoo.so.3"
        )

        result = extract_link_arguments(
            tmp_path, TARGET, platform=TargetPlatform.UNIX
        )

        assert result[:2] == [LinkDirectory("/opt/lib"), LinkLibrary("z")]
        assert result[2].basename == "foo"

    def test_accepts_string_build_dir(self, tmp_path):
        self.write(tmp_path, "cc -o out -lz")
        result = extract_link_arguments(
            str(tmp_path), TARGET, platform=TargetPlatform.UNIX
        )
        assert result == [LinkLibrary("z")]

    def test_missing_transcript_is_fatal(self, tmp_path):
        with pytest.raises(MissingArtifactError):
            extract_link_arguments(tmp_path, TARGET, platform=TargetPlatform.UNIX)

    def test_repeatable(self, tmp_path):
        self.write(tmp_path, "cc -o out -L/a -lb /c/libd.so")
        first = extract_link_arguments(tmp_path, TARGET, platform=TargetPlatform.UNIX)
        second = extract_link_arguments(tmp_path, TARGET, platform=TargetPlatform.UNIX)
        assert first == second


class TestExtractWindows:
    """End-to-end extraction with the Windows backends."""

    def test_vcxproj_release(self, tmp_path):
        (tmp_path / f"{TARGET}.vcxproj").write_text(VCXPROJ)
        result = extract_link_arguments(
            tmp_path, TARGET, "Release", platform=TargetPlatform.WINDOWS
        )
        assert [arg.basename for arg in result] == ["foo"]

    def test_vcxproj_debug(self, tmp_path):
        (tmp_path / f"{TARGET}.vcxproj").write_text(VCXPROJ)
        result = extract_link_arguments(
            tmp_path, TARGET, "Debug", platform=TargetPlatform.WINDOWS
        )
        assert [arg.basename for arg in result] == ["foo_d"]

    def test_vcxproj_preferred_over_nmake(self, tmp_path):
        (tmp_path / f"{TARGET}.vcxproj").write_text(VCXPROJ)
        recipe = build_make_path(tmp_path, TARGET)
        recipe.parent.mkdir(parents=True)
        recipe.write_text("link /dll C:\\lib\\other.lib\n<<\n")

        result = extract_link_arguments(
            tmp_path, TARGET, "Release", platform=TargetPlatform.WINDOWS
        )
        assert [arg.basename for arg in result] == ["foo"]

    def test_falls_back_to_nmake(self, tmp_path):
        recipe = build_make_path(tmp_path, TARGET)
        recipe.parent.mkdir(parents=True)
        recipe.write_text("link /dll C:\\lib\\other.lib\n<<\n")

        result = extract_link_arguments(
            tmp_path, TARGET, "Release", platform=TargetPlatform.WINDOWS
        )
        assert [arg.basename for arg in result] == ["other"]

    def test_nothing_found_is_fatal(self, tmp_path):
        with pytest.raises(NoLinkArgumentsError) as exc_info:
            extract_link_arguments(
                tmp_path, TARGET, "Release", platform=TargetPlatform.WINDOWS
            )
        assert [name for name, _ in exc_info.value.attempts] == ["vcxproj", "nmake"]
        assert isinstance(exc_info.value, ExtractionError)
