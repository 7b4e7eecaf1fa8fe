"""Cargo workspace metadata.

This module queries ``cargo metadata`` and parses its JSON output into a
small, ordered model of the workspace packages and their targets.

Metadata Structure (format version 1, abridged):
    {
        "packages": [
            {
                "name": "my-crate",
                "id": "...",
                "manifest_path": "/ws/my-crate/Cargo.toml",
                "targets": [{"name": "my-crate", "kind": ["staticlib", "cdylib"]}]
            }
        ],
        "workspace_members": ["..."],
        "workspace_root": "/ws",
        "target_directory": "/ws/target"
    }
"""

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..generator.target_model import BuildUnit

logger = logging.getLogger(__name__)


class WorkspaceError(Exception):
    """Raised when workspace metadata cannot be retrieved or parsed."""

    pass


@dataclass(frozen=True)
class CargoTarget:
    """A target of a package with its raw kind tags."""

    name: str
    kinds: List[str]


@dataclass(frozen=True)
class Package:
    """A workspace member package."""

    name: str
    manifest_path: str
    targets: List[CargoTarget] = field(default_factory=list)

    def build_units(self) -> List[BuildUnit]:
        """Importable units of this package, in target order."""
        units = []
        for target in self.targets:
            unit = BuildUnit.from_target(self.name, self.manifest_path, target.name, target.kinds)
            if unit is None:
                logger.debug(f"Skipping target {self.name}/{target.name} ({', '.join(target.kinds)})")
                continue
            units.append(unit)
        return units


@dataclass(frozen=True)
class Workspace:
    """Ordered packages of a cargo workspace."""

    workspace_root: str
    target_directory: str
    packages: List[Package] = field(default_factory=list)

    @property
    def manifest_path(self) -> Path:
        return Path(self.workspace_root) / "Cargo.toml"

    def package(self, name: str) -> Optional[Package]:
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def select(self, names: Optional[Sequence[str]] = None) -> List[Package]:
        """Packages restricted to names (all packages when empty), in workspace order."""
        if not names:
            return list(self.packages)
        return [package for package in self.packages if package.name in names]

    def build_units(self, names: Optional[Sequence[str]] = None) -> List[BuildUnit]:
        units: List[BuildUnit] = []
        for package in self.select(names):
            units.extend(package.build_units())
        return units

    @staticmethod
    def from_metadata(metadata: Dict[str, Any]) -> "Workspace":
        """Build the workspace model from parsed ``cargo metadata`` JSON.

        Only workspace members are kept, in the order cargo reports them.

        Raises:
            WorkspaceError: If required keys are missing
        """
        try:
            members = set(metadata.get("workspace_members") or [])
            packages = []
            for pkg in metadata["packages"]:
                if members and pkg.get("id") not in members:
                    continue
                packages.append(
                    Package(
                        name=pkg["name"],
                        manifest_path=pkg["manifest_path"],
                        targets=[
                            CargoTarget(name=t["name"], kinds=list(t["kind"]))
                            for t in pkg.get("targets", [])
                        ],
                    )
                )
            return Workspace(
                workspace_root=metadata["workspace_root"],
                target_directory=metadata["target_directory"],
                packages=packages,
            )
        except (KeyError, TypeError) as e:
            raise WorkspaceError(f"Malformed cargo metadata: missing {e}") from e


class CargoMetadataInspector:
    """Runs ``cargo metadata`` for a manifest."""

    def __init__(self, manifest_path: Path, cargo: str = "cargo"):
        """Initialize the inspector.

        Args:
            manifest_path: Path to the workspace (or package) Cargo.toml
            cargo: Cargo executable to run
        """
        self.manifest_path = Path(manifest_path)
        self.cargo = cargo

    def command(self) -> List[str]:
        return [
            self.cargo,
            "metadata",
            "--format-version",
            "1",
            "--no-deps",
            "--manifest-path",
            str(self.manifest_path),
        ]

    def inspect(self) -> Workspace:
        """Query cargo from the current working directory.

        Cargo picks up ``.cargo/config`` files relative to the working
        directory, so re-running this from a configuration root yields that
        configuration's target directory.

        Raises:
            WorkspaceError: If cargo fails or prints something that is not metadata
        """
        cmd = self.command()
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
            )
        except OSError as e:
            raise WorkspaceError(f"Failed to run {self.cargo}: {e}") from e

        if result.returncode != 0:
            raise WorkspaceError(
                f"cargo metadata failed for {self.manifest_path} "
                + f"(exit code {result.returncode}):\n{result.stderr.strip()}"
            )

        try:
            metadata = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise WorkspaceError(f"cargo metadata returned invalid JSON: {e}") from e

        return Workspace.from_metadata(metadata)
