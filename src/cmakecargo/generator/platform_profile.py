"""Platform Profile Resolution.

This module resolves a (target triple, toolchain version) pair into the
default system libraries a Rust static library needs and the ABI predicates
used to name build artifacts.

Supported Operating Systems:
    - Windows: msvc and gnu-like (gnu, gnullvm) environments
    - macOS: *-apple-darwin
    - Linux: *-linux-* (any architecture, any environment)
    - Anything else is recognised but links no default libraries
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from semver import Version

logger = logging.getLogger(__name__)

# Version thresholds for the Windows default library set
WINDOWS_LEGACY_LIBS_BEFORE = Version(1, 33, 0)
WINDOWS_BCRYPT_SINCE = Version(1, 57, 0)

# Cargo only supports --profile from this version on
CUSTOM_PROFILE_SINCE = Version(1, 57, 0)

# Triple component -> operating system
KNOWN_OS = {
    "windows": "windows",
    "darwin": "macos",
    "linux": "linux",
    "android": "android",
    "androideabi": "android",
    "ios": "ios",
    "freebsd": "freebsd",
    "netbsd": "netbsd",
    "openbsd": "openbsd",
    "dragonfly": "dragonfly",
    "illumos": "illumos",
    "solaris": "solaris",
    "fuchsia": "fuchsia",
    "redox": "redox",
    "haiku": "haiku",
    "wasi": "wasi",
    "emscripten": "emscripten",
    "none": "none",
    "unknown": "unknown",
}

# Environment prefix -> ABI environment (gnueabihf, gnullvm, musleabi, ...)
KNOWN_ENV_PREFIXES = (
    ("msvc", "msvc"),
    ("gnu", "gnu"),
    ("musl", "musl"),
    ("uclibc", "uclibc"),
    ("sgx", "sgx"),
    ("eabi", "eabi"),
)


def _environment(component: str) -> Optional[str]:
    for prefix, env in KNOWN_ENV_PREFIXES:
        if component.startswith(prefix):
            return env
    return None


class ToolchainVersionError(Exception):
    """Raised when the toolchain version string cannot be parsed."""

    pass


class ProfileUnsupportedError(Exception):
    """Raised when a custom cargo profile is requested from a toolchain that cannot honor it."""

    pass


@dataclass(frozen=True)
class TargetTriple:
    """Components of a recognised target triple."""

    triple: str
    arch: str
    os: str
    env: Optional[str] = None

    @staticmethod
    def parse(triple: str) -> Optional["TargetTriple"]:
        """Parse a target triple such as ``x86_64-pc-windows-msvc``.

        Args:
            triple: Target triple string

        Returns:
            TargetTriple, or None if the OS is not recognised
        """
        parts = triple.strip().lower().split("-")
        # Any architecture is accepted, the OS and environment decide the profile.
        if len(parts) < 2 or not parts[0]:
            return None

        # Prefer a concrete OS over the "unknown"/"none" placeholders, which
        # also appear in the vendor position.
        candidates = [
            KNOWN_OS[part]
            for part in parts[1:]
            if part in KNOWN_OS and KNOWN_OS[part] not in ("unknown", "none")
        ]
        os_name = candidates[0] if candidates else None
        # android triples also carry "linux"
        if "android" in candidates:
            os_name = "android"
        if os_name is None:
            if "none" in parts[1:]:
                os_name = "none"
            elif len(parts) == 3 and parts[2] in KNOWN_OS:
                os_name = KNOWN_OS[parts[2]]
            else:
                return None

        env = _environment(parts[-1]) if len(parts) > 2 else None
        return TargetTriple(triple=triple, arch=parts[0], os=os_name, env=env)


def parse_toolchain_version(version: str) -> Version:
    """Parse a rustc/cargo semver version string (e.g. ``1.57.0`` or ``1.75.0-nightly``).

    Raises:
        ToolchainVersionError: If the version is malformed
    """
    try:
        return Version.parse(version.strip())
    except ValueError as e:
        raise ToolchainVersionError(
            f"cargo-version must be a semver-compatible version, got '{version}'"
        ) from e


def check_profile_supported(profile: Optional[str], version: Version) -> None:
    """Fail when a custom profile is selected on a toolchain older than 1.57.0."""
    if profile is not None and version < CUSTOM_PROFILE_SINCE:
        raise ProfileUnsupportedError(
            "Selecting a custom cargo profile requires rust/cargo >= 1.57.0 "
            + f"(found {version})"
        )


def _default_libraries(
    target: TargetTriple, version: Version
) -> Tuple[List[str], List[str], List[str]]:
    """Return (libs, libs_debug, libs_release) for a recognised target."""
    if target.os == "windows":
        libs = ["advapi32", "userenv", "ws2_32"]
        libs_debug: List[str] = []
        libs_release: List[str] = []

        if target.env == "msvc":
            libs_debug.append("msvcrtd")
            libs_release.append("msvcrt")
        elif target.env == "gnu":
            libs.extend(["gcc_eh", "pthread"])

        if version < WINDOWS_LEGACY_LIBS_BEFORE:
            libs.extend(["shell32", "kernel32"])

        if version >= WINDOWS_BCRYPT_SINCE:
            libs.append("bcrypt")

        return libs, libs_debug, libs_release

    if target.os == "macos":
        return ["System", "resolv", "c", "m"], [], []

    if target.os == "linux":
        return ["dl", "rt", "pthread", "gcc_s", "c", "m", "util"], [], []

    return [], [], []


@dataclass(frozen=True)
class PlatformProfile:
    """Default link libraries and ABI predicates for one target."""

    target: Optional[TargetTriple]
    version: Version
    libs: List[str] = field(default_factory=list)
    libs_debug: List[str] = field(default_factory=list)
    libs_release: List[str] = field(default_factory=list)

    @staticmethod
    def from_target(triple: Optional[str], version: Version) -> "PlatformProfile":
        """Build the profile for a target triple and toolchain version.

        An unrecognised or missing triple yields an empty "unknown" profile
        and logs a warning; it is never fatal.

        Args:
            triple: Cargo target triple (may be None)
            version: Parsed toolchain version

        Returns:
            PlatformProfile for the target
        """
        target = TargetTriple.parse(triple) if triple else None
        if target is None:
            logger.warning(f"The target was not recognized: {triple or '<none>'}")
            return PlatformProfile(target=None, version=version)

        libs, libs_debug, libs_release = _default_libraries(target, version)
        return PlatformProfile(
            target=target,
            version=version,
            libs=libs,
            libs_debug=libs_debug,
            libs_release=libs_release,
        )

    @property
    def is_windows(self) -> bool:
        return self.target is not None and self.target.os == "windows"

    @property
    def is_msvc(self) -> bool:
        return self.is_windows and self.target is not None and self.target.env == "msvc"

    @property
    def is_gnu_windows(self) -> bool:
        return self.is_windows and self.target is not None and self.target.env == "gnu"

    @property
    def is_macos(self) -> bool:
        return self.target is not None and self.target.os == "macos"
