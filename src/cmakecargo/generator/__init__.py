"""CMake generation for cargo workspaces.

This module provides:
- Platform profiles (default link libraries, ABI predicates)
- Build unit classification and artifact naming
- Single/multi configuration contexts
- The two-phase CMake directive emitter
"""

from .platform_profile import (
    PlatformProfile,
    ProfileUnsupportedError,
    TargetTriple,
    ToolchainVersionError,
    check_profile_supported,
    parse_toolchain_version,
)
from .target_model import BuildUnit, Executable, Library, classify
from .configuration import (
    ConfigurationError,
    MultiConfiguration,
    SingleConfiguration,
    configuration_context,
    target_folder,
)
from .emitter import CMakeEmitter, EmitterError, build_target_name
from .gen_cmake import generate

__all__ = [
    "PlatformProfile",
    "ProfileUnsupportedError",
    "TargetTriple",
    "ToolchainVersionError",
    "check_profile_supported",
    "parse_toolchain_version",
    "BuildUnit",
    "Executable",
    "Library",
    "classify",
    "ConfigurationError",
    "MultiConfiguration",
    "SingleConfiguration",
    "configuration_context",
    "target_folder",
    "CMakeEmitter",
    "EmitterError",
    "build_target_name",
    "generate",
]
