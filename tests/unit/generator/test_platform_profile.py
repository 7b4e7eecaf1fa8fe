"""
Unit tests for platform profiles.

Tests target triple parsing, the default library table and its version gates.
"""

import logging

import pytest
from semver import Version

from cmakecargo.generator.platform_profile import (
    PlatformProfile,
    ProfileUnsupportedError,
    TargetTriple,
    ToolchainVersionError,
    check_profile_supported,
    parse_toolchain_version,
)


def profile(triple, version="1.60.0"):
    return PlatformProfile.from_target(triple, Version.parse(version))


class TestTargetTriple:
    """Test suite for TargetTriple.parse."""

    @pytest.mark.parametrize(
        "triple,os_name,env",
        [
            ("x86_64-pc-windows-msvc", "windows", "msvc"),
            ("i686-pc-windows-gnu", "windows", "gnu"),
            ("x86_64-pc-windows-gnullvm", "windows", "gnu"),
            ("x86_64-unknown-linux-gnu", "linux", "gnu"),
            ("x86_64-unknown-linux-musl", "linux", "musl"),
            ("armv7-unknown-linux-gnueabihf", "linux", "gnu"),
            ("aarch64-apple-darwin", "macos", None),
            ("aarch64-linux-android", "android", None),
            ("x86_64-unknown-freebsd", "freebsd", None),
            ("thumbv7em-none-eabihf", "none", "eabi"),
            ("wasm32-unknown-unknown", "unknown", None),
            ("mips64el-unknown-linux-gnuabi64", "linux", "gnu"),
            ("armv7-unknown-linux-musleabihf", "linux", "musl"),
        ],
    )
    def test_parse_known(self, triple, os_name, env):
        """Test that known triples are split into OS and environment."""
        parsed = TargetTriple.parse(triple)

        assert parsed is not None
        assert parsed.os == os_name
        assert parsed.env == env
        assert parsed.triple == triple

    @pytest.mark.parametrize("triple", ["", "garbage", "foo-bar-baz", "x86_64-pc-plan9"])
    def test_parse_unknown(self, triple):
        """Test that unrecognised triples return None."""
        assert TargetTriple.parse(triple) is None


class TestDefaultLibraries:
    """Test suite for the default library table."""

    def test_linux(self):
        """Test Linux default libraries."""
        p = profile("x86_64-unknown-linux-gnu")

        assert p.libs == ["dl", "rt", "pthread", "gcc_s", "c", "m", "util"]
        assert p.libs_debug == []
        assert p.libs_release == []

    def test_macos(self):
        """Test macOS default libraries."""
        p = profile("x86_64-apple-darwin")

        assert p.libs == ["System", "resolv", "c", "m"]
        assert p.libs_debug == []
        assert p.libs_release == []

    def test_windows_msvc(self):
        """Test MSVC gets the CRT split into debug and release libraries."""
        p = profile("x86_64-pc-windows-msvc", "1.50.0")

        assert p.libs == ["advapi32", "userenv", "ws2_32"]
        assert p.libs_debug == ["msvcrtd"]
        assert p.libs_release == ["msvcrt"]

    def test_windows_gnu(self):
        """Test GNU-like Windows adds gcc_eh and pthread."""
        p = profile("x86_64-pc-windows-gnu", "1.50.0")

        assert p.libs == ["advapi32", "userenv", "ws2_32", "gcc_eh", "pthread"]
        assert p.libs_debug == []
        assert p.libs_release == []

    @pytest.mark.parametrize(
        "triple",
        [
            "thumbv7neon-unknown-linux-gnueabihf",
            "aarch64_be-unknown-linux-gnu",
            "sparc-unknown-linux-gnu",
            "armv4t-unknown-linux-gnueabi",
        ],
    )
    def test_linux_any_architecture(self, triple, caplog):
        """Test Linux targets get the Linux libraries whatever the architecture."""
        with caplog.at_level(logging.WARNING):
            p = profile(triple)

        assert p.target is not None
        assert p.target.env == "gnu"
        assert p.libs == ["dl", "rt", "pthread", "gcc_s", "c", "m", "util"]
        assert "not recognized" not in caplog.text

    def test_other_os_is_empty(self):
        """Test that recognised but unlisted operating systems link nothing."""
        p = profile("x86_64-unknown-freebsd")

        assert p.target is not None
        assert p.libs == []
        assert p.libs_debug == []
        assert p.libs_release == []


class TestVersionGates:
    """Test suite for version-dependent Windows libraries."""

    def test_legacy_libs_before_1_33(self):
        """Test shell32 and kernel32 are linked before 1.33.0."""
        p = profile("x86_64-pc-windows-msvc", "1.32.9")

        assert "shell32" in p.libs
        assert "kernel32" in p.libs
        assert p.libs == ["advapi32", "userenv", "ws2_32", "shell32", "kernel32"]

    def test_no_legacy_libs_from_1_33(self):
        """Test shell32 and kernel32 are dropped at 1.33.0."""
        p = profile("x86_64-pc-windows-msvc", "1.33.0")

        assert "shell32" not in p.libs
        assert "kernel32" not in p.libs

    def test_no_bcrypt_before_1_57(self):
        """Test bcrypt is not linked at 1.56.9."""
        p = profile("x86_64-pc-windows-msvc", "1.56.9")

        assert "bcrypt" not in p.libs

    def test_bcrypt_from_1_57(self):
        """Test bcrypt is appended last from 1.57.0."""
        p = profile("x86_64-pc-windows-gnu", "1.57.0")

        assert p.libs == ["advapi32", "userenv", "ws2_32", "gcc_eh", "pthread", "bcrypt"]

    def test_version_gates_do_not_apply_to_linux(self):
        """Test that the Windows gates leave other platforms untouched."""
        old = profile("x86_64-unknown-linux-gnu", "1.20.0")
        new = profile("x86_64-unknown-linux-gnu", "1.70.0")

        assert old.libs == new.libs


class TestPredicates:
    """Test suite for ABI predicates."""

    def test_msvc(self):
        p = profile("x86_64-pc-windows-msvc")

        assert p.is_windows
        assert p.is_msvc
        assert not p.is_gnu_windows
        assert not p.is_macos

    def test_windows_gnu(self):
        p = profile("x86_64-pc-windows-gnu")

        assert p.is_windows
        assert not p.is_msvc
        assert p.is_gnu_windows

    def test_macos(self):
        p = profile("aarch64-apple-darwin")

        assert p.is_macos
        assert not p.is_windows

    def test_linux_gnu_is_not_windows_gnu(self):
        p = profile("x86_64-unknown-linux-gnu")

        assert not p.is_windows
        assert not p.is_gnu_windows


class TestUnknownTarget:
    """Test suite for unrecognised targets."""

    def test_unknown_triple_degrades(self, caplog):
        """Test an unknown triple gives an empty profile and a warning."""
        with caplog.at_level(logging.WARNING):
            p = profile("not-a-triple")

        assert p.target is None
        assert p.libs == []
        assert p.libs_debug == []
        assert p.libs_release == []
        assert not p.is_windows
        assert not p.is_macos
        assert "not recognized" in caplog.text

    def test_missing_triple_degrades(self, caplog):
        """Test that no triple at all behaves like an unknown one."""
        with caplog.at_level(logging.WARNING):
            p = PlatformProfile.from_target(None, Version.parse("1.60.0"))

        assert p.target is None
        assert "not recognized" in caplog.text


class TestToolchainVersion:
    """Test suite for version parsing and profile checks."""

    def test_parse_version(self):
        assert parse_toolchain_version("1.57.0") == Version.parse("1.57.0")

    def test_parse_version_strips_whitespace(self):
        assert parse_toolchain_version(" 1.60.1\n") == Version.parse("1.60.1")

    def test_parse_prerelease(self):
        """Test a nightly toolchain version is accepted."""
        version = parse_toolchain_version("1.75.0-nightly")

        assert (version.major, version.minor, version.patch) == (1, 75, 0)
        assert version.prerelease == "nightly"

    @pytest.mark.parametrize("text", ["", "latest", "one.two.three", "1.57", "1"])
    def test_malformed_version(self, text):
        """Test malformed versions are fatal."""
        with pytest.raises(ToolchainVersionError, match="semver-compatible"):
            parse_toolchain_version(text)

    def test_prerelease_orders_before_release(self):
        """Test a 1.57.0 nightly is still older than the bcrypt and profile thresholds."""
        version = parse_toolchain_version("1.57.0-nightly")

        assert "bcrypt" not in PlatformProfile.from_target("x86_64-pc-windows-msvc", version).libs
        with pytest.raises(ProfileUnsupportedError):
            check_profile_supported("dist", version)

    def test_profile_requires_1_57(self):
        """Test a custom profile is rejected before 1.57.0."""
        with pytest.raises(ProfileUnsupportedError, match="1.57.0"):
            check_profile_supported("dist", Version.parse("1.56.1"))

    def test_profile_allowed_from_1_57(self):
        check_profile_supported("dist", Version.parse("1.57.0"))

    def test_no_profile_always_allowed(self):
        check_profile_supported(None, Version.parse("1.20.0"))
