"""Cargo build invocation.

This module builds and runs the ``cargo build`` command for one package,
applying the linker overrides chosen from CMake's language preferences.
"""

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .linker_preference import LinkerOverrides


class CargoBuildError(Exception):
    """Raised when cargo cannot be started."""

    pass


@dataclass
class CargoBuildRequest:
    """Everything needed to build one package."""

    manifest_path: Path
    target: str
    package: str
    release: bool = False
    profile: Optional[str] = None
    features: List[str] = field(default_factory=list)
    verbose: bool = False


class CargoBuildInvoker:
    """Runs ``cargo build`` and reports success as an exit code."""

    def __init__(self, cargo: str = "cargo", show_command: bool = False):
        """Initialize the invoker.

        Args:
            cargo: Cargo executable to run
            show_command: Print the command and its overrides before running
        """
        self.cargo = cargo
        self.show_command = show_command

    def command(self, request: CargoBuildRequest) -> List[str]:
        cmd = [
            self.cargo,
            "build",
            "--target",
            request.target,
            "--package",
            request.package,
            "--manifest-path",
            str(request.manifest_path),
        ]

        if request.features:
            cmd.extend(["--features", ",".join(request.features)])

        if request.verbose:
            cmd.append("--verbose")

        if request.profile is not None:
            cmd.extend(["--profile", request.profile])
        elif request.release:
            cmd.append("--release")

        return cmd

    def environment(
        self, overrides: LinkerOverrides, base: Optional[Mapping[str, str]] = None
    ) -> Dict[str, str]:
        env = dict(os.environ if base is None else base)
        env.update(overrides.env)
        return env

    def build(self, request: CargoBuildRequest, overrides: LinkerOverrides) -> int:
        """Run cargo.

        Returns:
            0 if cargo succeeded, 1 otherwise

        Raises:
            CargoBuildError: If the cargo executable cannot be run
        """
        cmd = self.command(request)

        if self.show_command:
            for key, value in sorted(overrides.env.items()):
                print(f"cmake-cargo: {key}={value}")
            print(f"cmake-cargo: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, env=self.environment(overrides))
        except OSError as e:
            raise CargoBuildError(f"Failed to run {self.cargo}: {e}") from e

        return 0 if result.returncode == 0 else 1
