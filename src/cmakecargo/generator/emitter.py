"""CMake directive emitter.

Writes the CMake code that imports cargo build outputs in two phases:

    Phase A (declare): one block per build unit with the IMPORTED targets,
        their default link libraries, the INTERFACE umbrella target and the
        ``_add_cargo_build`` record that tells the CMake side how to run cargo.
    Phase B (locate): once per configuration root, the IMPORTED_LOCATION /
        IMPORTED_IMPLIB of every declared target.

The whole stream is buffered and only written out once both phases have
completed, so a failure never leaves a partially valid file behind.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

from .platform_profile import PlatformProfile
from .target_model import BuildUnit

HEADER = "cmake_minimum_required(VERSION 3.15)"

BUILD_TARGET_PREFIX = "cargo-build"

RELEASE_CONFIGS = ("RELEASE", "MINSIZEREL", "RELWITHDEBINFO")

# Artifact kinds declared per unit
STATIC = "static"
SHARED = "shared"
EXECUTABLE = "executable"


class EmitterError(Exception):
    """Raised when the two-phase protocol is violated or output cannot be written."""

    pass


def build_target_name(unit_name: str) -> str:
    """Name of the custom target that runs cargo for a unit."""
    return f"{BUILD_TARGET_PREFIX}_{unit_name}"


def cmake_path(path: Union[str, Path]) -> str:
    """Render a path for CMake, always with forward slashes."""
    return str(path).replace("\\", "/")


class CMakeEmitter:
    """Append-only writer for the imported-target directive stream.

    Usage:
        emitter = CMakeEmitter(platform, cargo_profile=None)
        emitter.emit_header()
        for unit in units:
            emitter.declare(unit)
        emitter.end_declarations()
        for unit in units:
            emitter.locate(unit, artifact_dir, property_suffix="_DEBUG")
        emitter.write(out_file)
    """

    def __init__(
        self,
        platform: PlatformProfile,
        cargo_profile: Optional[str] = None,
        include_platform_libs: bool = True,
    ):
        """Initialize emitter.

        Args:
            platform: Resolved platform profile for the target triple
            cargo_profile: Custom cargo profile passed to the build record
            include_platform_libs: Attach the platform's default libraries
                to static libraries (disable for no_std crates)
        """
        self.platform = platform
        self.cargo_profile = cargo_profile
        self.include_platform_libs = include_platform_libs
        self._lines: List[str] = []
        # unit name -> declared artifact kind -> CMake target name
        self._declared: Dict[str, Dict[str, str]] = {}

    def _write(self, text: str = "") -> None:
        self._lines.append(text)

    def emit_header(self) -> None:
        self._write(HEADER)
        self._write()

    def declare(self, unit: BuildUnit) -> None:
        """Phase A: declare the imported targets and build record of a unit."""
        if unit.name in self._declared:
            raise EmitterError(f"Target '{unit.name}' was already declared")

        declared: Dict[str, str] = {}
        build_target = build_target_name(unit.name)

        if unit.is_executable:
            self._write(f"add_executable({unit.name} IMPORTED GLOBAL)")
            self._write(f"add_dependencies({unit.name} {build_target})")
            declared[EXECUTABLE] = unit.name
        else:
            if unit.has_static:
                static_target = f"{unit.name}-static"
                self._write(f"add_library({static_target} STATIC IMPORTED GLOBAL)")
                self._write(f"add_dependencies({static_target} {build_target})")
                self._emit_platform_libs(static_target)
                declared[STATIC] = static_target

            if unit.has_dynamic:
                shared_target = f"{unit.name}-shared"
                self._write(f"add_library({shared_target} SHARED IMPORTED GLOBAL)")
                self._write(f"add_dependencies({shared_target} {build_target})")
                declared[SHARED] = shared_target

            self._emit_umbrella(unit)

        self._emit_build_record(unit)
        self._write()
        self._declared[unit.name] = declared

    def _emit_platform_libs(self, target: str) -> None:
        if not self.include_platform_libs:
            return

        platform = self.platform
        if platform.libs:
            self._write(
                f"set_property(TARGET {target} PROPERTY INTERFACE_LINK_LIBRARIES "
                + f"{' '.join(platform.libs)})"
            )
        if platform.libs_debug:
            self._write(
                f"set_property(TARGET {target} PROPERTY INTERFACE_LINK_LIBRARIES_DEBUG "
                + f"{' '.join(platform.libs_debug)})"
            )
        if platform.libs_release:
            for config in RELEASE_CONFIGS:
                self._write(
                    f"set_property(TARGET {target} PROPERTY INTERFACE_LINK_LIBRARIES_{config} "
                    + f"{' '.join(platform.libs_release)})"
                )

    def _emit_umbrella(self, unit: BuildUnit) -> None:
        name = unit.name
        self._write(f"add_library({name} INTERFACE)")
        if unit.has_static and unit.has_dynamic:
            self._write("if (BUILD_SHARED_LIBS)")
            self._write(f"    target_link_libraries({name} INTERFACE {name}-shared)")
            self._write("else()")
            self._write(f"    target_link_libraries({name} INTERFACE {name}-static)")
            self._write("endif()")
        elif unit.has_dynamic:
            self._write(f"target_link_libraries({name} INTERFACE {name}-shared)")
        else:
            self._write(f"target_link_libraries({name} INTERFACE {name}-static)")

    def _emit_build_record(self, unit: BuildUnit) -> None:
        self._write("_add_cargo_build(")
        self._write(f"    PACKAGE {unit.package_name}")
        self._write(f"    TARGET {unit.name}")
        self._write(f'    MANIFEST_PATH "{cmake_path(unit.manifest_path)}"')
        if self.cargo_profile is not None:
            self._write(f'    PROFILE "{self.cargo_profile}"')
        self._write(f"    TARGET_KIND {unit.kind.target_kind}")
        self._write(f"    BYPRODUCTS {' '.join(unit.byproducts(self.platform))}")
        self._write(")")

    def end_declarations(self) -> None:
        self._write()

    def is_declared(self, unit: BuildUnit, artifact_kind: str) -> bool:
        return artifact_kind in self._declared.get(unit.name, {})

    def _bind(
        self, unit: BuildUnit, artifact_kind: str, prop: str, path: str
    ) -> None:
        if not self.is_declared(unit, artifact_kind):
            raise EmitterError(
                f"Internal error: location for undeclared {artifact_kind} target of '{unit.name}'"
            )
        target = self._declared[unit.name][artifact_kind]
        self._write(f'set_property(TARGET {target} PROPERTY {prop} "{path}")')

    def locate(
        self, unit: BuildUnit, artifact_dir: Union[str, Path], property_suffix: str = ""
    ) -> None:
        """Phase B: bind the artifact locations of one configuration.

        Args:
            unit: A unit previously passed to declare()
            artifact_dir: Directory holding this configuration's cargo outputs
            property_suffix: ``_<CONFIG>`` under multi-config generators, else empty

        Raises:
            EmitterError: If the unit (or one of its artifacts) was never declared
        """
        directory = cmake_path(artifact_dir).rstrip("/")
        location = f"IMPORTED_LOCATION{property_suffix}"
        platform = self.platform

        if unit.is_executable:
            self._bind(unit, EXECUTABLE, location, f"{directory}/{unit.exe_name(platform)}")
            return

        if unit.has_static:
            self._bind(unit, STATIC, location, f"{directory}/{unit.static_lib_name(platform)}")

        if unit.has_dynamic:
            self._bind(unit, SHARED, location, f"{directory}/{unit.dynamic_lib_name(platform)}")
            implib = unit.implib_name(platform)
            if implib is not None:
                self._bind(
                    unit, SHARED, f"IMPORTED_IMPLIB{property_suffix}", f"{directory}/{implib}"
                )

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n"

    def write(self, out_file: Optional[Path] = None) -> None:
        """Write the buffered stream to out_file, or stdout when None.

        Raises:
            EmitterError: If the output file or its directory cannot be created
        """
        text = self.getvalue()
        if out_file is None:
            sys.stdout.write(text)
            sys.stdout.flush()
            return

        try:
            out_file.parent.mkdir(parents=True, exist_ok=True)
            out_file.write_text(text, encoding="utf-8")
        except OSError as e:
            raise EmitterError(f"Unable to write output file {out_file}: {e}") from e
