"""
Command-line interface for cmake-cargo.

This module provides the `cmake-cargo` CLI tool that CMake calls to import
cargo build outputs and to drive `cargo build`.
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from cmakecargo.build.cargo_invoker import (
    CargoBuildError,
    CargoBuildInvoker,
    CargoBuildRequest,
)
from cmakecargo.build.linker_preference import (
    LinkerPreferenceError,
    describe,
    load_linker_preferences,
    resolve_linker_overrides,
)
from cmakecargo.cli_utils import ErrorFormatter, ManifestDetector, split_list
from cmakecargo.generator.configuration import ConfigurationError, configuration_context
from cmakecargo.generator.emitter import EmitterError
from cmakecargo.generator.gen_cmake import generate
from cmakecargo.generator.platform_profile import (
    PlatformProfile,
    ProfileUnsupportedError,
    ToolchainVersionError,
    check_profile_supported,
    parse_toolchain_version,
)
from cmakecargo.integrator import IntegratorError, link_hints
from cmakecargo.workspace.locator import ConfigurationLocator
from cmakecargo.workspace.metadata import CargoMetadataInspector, WorkspaceError

logger = logging.getLogger(__name__)


@dataclass
class PrintRootArgs:
    """Arguments for the print-root command."""

    manifest_path: Optional[Path] = None
    cargo: str = "cargo"
    verbose: bool = False


@dataclass
class GenCmakeArgs:
    """Arguments for the gen-cmake command."""

    target: str
    cargo_version: str
    manifest_path: Optional[Path] = None
    cargo: str = "cargo"
    profile: Optional[str] = None
    crates: List[str] = field(default_factory=list)
    no_default_libraries: bool = False
    out_file: Optional[Path] = None
    configuration_type: Optional[str] = None
    configuration_types: List[str] = field(default_factory=list)
    configuration_root: Path = Path(".")
    verbose: bool = False


@dataclass
class BuildCrateArgs:
    """Arguments for the build-crate command."""

    target: str
    package: str
    manifest_path: Optional[Path] = None
    cargo: str = "cargo"
    release: bool = False
    profile: Optional[str] = None
    features: List[str] = field(default_factory=list)
    rustflags: Optional[str] = None
    verbose: bool = False


def print_root_command(args: PrintRootArgs) -> None:
    """Print the root directory of the cargo workspace."""
    try:
        manifest = ManifestDetector.detect_manifest(args.manifest_path)
        workspace = CargoMetadataInspector(manifest, cargo=args.cargo).inspect()
        print(workspace.workspace_root)
        sys.exit(0)

    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except WorkspaceError as e:
        ErrorFormatter.handle_error("Workspace error", e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def gen_cmake_command(args: GenCmakeArgs) -> None:
    """Generate CMake imported targets for the workspace.

    Examples:
        cmake-cargo gen-cmake --target x86_64-unknown-linux-gnu --cargo-version 1.60.0
        cmake-cargo gen-cmake ... --configuration-types Debug,Release --configuration-root build
        cmake-cargo gen-cmake ... --crates my-crate -o cargo/generated.cmake
    """
    try:
        version = parse_toolchain_version(args.cargo_version)
        check_profile_supported(args.profile, version)

        platform = PlatformProfile.from_target(args.target, version)
        context = configuration_context(args.configuration_type, args.configuration_types or None)

        manifest = ManifestDetector.detect_manifest(args.manifest_path)
        workspace = CargoMetadataInspector(manifest, cargo=args.cargo).inspect()

        # Re-queries run from inside each configuration root, so they need
        # an absolute manifest.
        scoped_inspector = CargoMetadataInspector(workspace.manifest_path, cargo=args.cargo)
        locator = ConfigurationLocator(
            scoped_inspector.inspect,
            target_triple=args.target,
            cargo_profile=args.profile,
        )

        emitter = generate(
            workspace,
            platform,
            context,
            locator,
            configuration_root=args.configuration_root,
            crates=args.crates,
            cargo_profile=args.profile,
            include_platform_libs=not args.no_default_libraries,
        )
        emitter.write(args.out_file)
        sys.exit(0)

    except (ToolchainVersionError, ProfileUnsupportedError, ConfigurationError) as e:
        ErrorFormatter.handle_error("Configuration error", e)
    except WorkspaceError as e:
        ErrorFormatter.handle_error("Workspace error", e)
    except EmitterError as e:
        ErrorFormatter.handle_error("Generation failed", e)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def build_crate_command(args: BuildCrateArgs) -> None:
    """Build one package with cargo, linking through CMake's preferred compiler.

    Examples:
        cmake-cargo build-crate --target x86_64-pc-windows-msvc --package my-crate
        cmake-cargo build-crate ... --release --features simd,serde
    """
    try:
        manifest = ManifestDetector.detect_manifest(args.manifest_path)

        preferences = load_linker_preferences(os.environ)
        overrides = resolve_linker_overrides(args.target, preferences, args.rustflags)
        if preferences:
            logger.debug(
                f"Linker languages: {', '.join(describe(preferences))} -> {overrides.language}"
            )

        request = CargoBuildRequest(
            manifest_path=manifest,
            target=args.target,
            package=args.package,
            release=args.release,
            profile=args.profile,
            features=args.features,
            verbose=args.verbose,
        )
        invoker = CargoBuildInvoker(cargo=args.cargo, show_command=args.verbose)
        sys.exit(invoker.build(request, overrides))

    except LinkerPreferenceError as e:
        ErrorFormatter.handle_error("Configuration error", e)
    except CargoBuildError as e:
        ErrorFormatter.handle_error("Build failed", e)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def print_link_hints_command(verbose: bool = False) -> None:
    """Print cargo link directives for a build script."""
    try:
        for hint in link_hints(os.environ):
            print(hint)
        sys.exit(0)

    except IntegratorError as e:
        ErrorFormatter.handle_error("Not a CMake build", e)
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, verbose)


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr; stdout is reserved for command output."""
    level = logging.DEBUG if verbose else logging.WARNING

    package_logger = logging.getLogger("cmakecargo")
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_formatter = logging.Formatter("cmake-cargo: %(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)
    package_logger.addHandler(console_handler)


def main() -> None:
    """cmake-cargo - Import cargo build outputs into CMake."""
    parser = argparse.ArgumentParser(
        prog="cmake-cargo",
        description="CMake Generator for Cargo",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="cmake-cargo 0.1.0",
    )
    parser.add_argument(
        "--manifest-path",
        type=Path,
        default=None,
        help="Specifies the target Cargo project (default: ./Cargo.toml)",
    )
    parser.add_argument(
        "--cargo",
        default="cargo",
        metavar="EXECUTABLE",
        help="Path to the cargo executable to use",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # print-root command
    subparsers.add_parser(
        "print-root",
        help="Print the root directory of the cargo workspace",
    )

    # gen-cmake command
    gen_parser = subparsers.add_parser(
        "gen-cmake",
        help="Generate CMake imported targets for the workspace",
    )
    gen_parser.add_argument(
        "--target",
        required=True,
        metavar="TRIPLE",
        help="The build target being used",
    )
    gen_parser.add_argument(
        "--cargo-version",
        required=True,
        metavar="VERSION",
        help="Version of target cargo",
    )
    gen_parser.add_argument(
        "--profile",
        default=None,
        help="Custom cargo profile to select (requires cargo >= 1.57.0)",
    )
    gen_parser.add_argument(
        "--crates",
        default=None,
        help="Comma-separated list of workspace crates to import (default: all)",
    )
    gen_parser.add_argument(
        "--no-default-libraries",
        action="store_true",
        help="Do not include libraries usually included by default. Use for no-std crates",
    )
    gen_parser.add_argument(
        "-o",
        "--out-file",
        type=Path,
        default=None,
        metavar="FILE",
        help="Output CMake file name (default: stdout)",
    )
    config_group = gen_parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "--configuration-type",
        default=None,
        metavar="TYPE",
        help="Configuration type to use in a single configuration environment",
    )
    config_group.add_argument(
        "--configuration-types",
        default=None,
        metavar="TYPES",
        help="Comma-separated configuration types for a multi-configuration environment",
    )
    gen_parser.add_argument(
        "--configuration-root",
        type=Path,
        default=Path("."),
        metavar="DIRECTORY",
        help="Root directory for configuration folders, e.g. Win32 in the VS generator",
    )

    # build-crate command
    build_parser = subparsers.add_parser(
        "build-crate",
        help="Build a package with cargo",
    )
    build_parser.add_argument(
        "--target",
        required=True,
        metavar="TRIPLE",
        help="The target triple to build for",
    )
    build_parser.add_argument(
        "--package",
        required=True,
        help="The name of the package being built with cargo",
    )
    build_parser.add_argument(
        "--release",
        action="store_true",
        help="Build with the release profile",
    )
    build_parser.add_argument(
        "--profile",
        default=None,
        help="Custom cargo profile (takes precedence over --release)",
    )
    build_parser.add_argument(
        "--features",
        default=None,
        help="Comma-separated list of crate features to enable",
    )
    build_parser.add_argument(
        "--rustflags",
        default=None,
        help="Extra RUSTFLAGS appended after the generated linker flags",
    )

    # print-link-hints command
    subparsers.add_parser(
        "print-link-hints",
        help="Print cargo link directives for the CMake-provided libraries",
    )

    # Parse arguments
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    setup_logging(parsed_args.verbose)

    # Execute command
    if parsed_args.command == "print-root":
        print_root_command(
            PrintRootArgs(
                manifest_path=parsed_args.manifest_path,
                cargo=parsed_args.cargo,
                verbose=parsed_args.verbose,
            )
        )
    elif parsed_args.command == "gen-cmake":
        gen_args = GenCmakeArgs(
            target=parsed_args.target,
            cargo_version=parsed_args.cargo_version,
            manifest_path=parsed_args.manifest_path,
            cargo=parsed_args.cargo,
            profile=parsed_args.profile,
            crates=split_list(parsed_args.crates),
            no_default_libraries=parsed_args.no_default_libraries,
            out_file=parsed_args.out_file,
            configuration_type=parsed_args.configuration_type,
            configuration_types=split_list(parsed_args.configuration_types),
            configuration_root=parsed_args.configuration_root,
            verbose=parsed_args.verbose,
        )
        gen_cmake_command(gen_args)
    elif parsed_args.command == "build-crate":
        build_args = BuildCrateArgs(
            target=parsed_args.target,
            package=parsed_args.package,
            manifest_path=parsed_args.manifest_path,
            cargo=parsed_args.cargo,
            release=parsed_args.release,
            profile=parsed_args.profile,
            features=split_list(parsed_args.features),
            rustflags=parsed_args.rustflags,
            verbose=parsed_args.verbose,
        )
        build_crate_command(build_args)
    elif parsed_args.command == "print-link-hints":
        print_link_hints_command(parsed_args.verbose)


if __name__ == "__main__":
    main()
