"""Configuration root lookup.

Each CMake configuration gets its own root directory holding a
``.cargo/config`` that points cargo at a configuration specific target
directory. Locating a configuration means entering that root, asking cargo
for the workspace metadata again and deriving the artifact directory from
the target directory it reports.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional

from ..generator.configuration import ConfigurationError, target_folder
from .metadata import Workspace

MARKER_FILES = (Path(".cargo") / "config", Path(".cargo") / "config.toml")


@contextmanager
def scoped_working_directory(path: Path) -> Iterator[Path]:
    """Change into path for the duration of the block.

    The previous working directory is restored on exit, including when the
    block raises.
    """
    previous = Path.cwd()
    os.chdir(path)
    try:
        yield Path.cwd()
    finally:
        os.chdir(previous)


class ConfigurationLocator:
    """Resolves the cargo artifact directory of each configuration root."""

    def __init__(
        self,
        query: Callable[[], Workspace],
        target_triple: Optional[str],
        cargo_profile: Optional[str] = None,
    ):
        """Initialize the locator.

        Args:
            query: Re-runs the workspace metadata query from the current directory
            target_triple: Target triple cargo builds for (adds a path component)
            cargo_profile: Custom cargo profile, which decides the output folder
        """
        self.query = query
        self.target_triple = target_triple
        self.cargo_profile = cargo_profile

    @staticmethod
    def check_marker(root: Path) -> None:
        """Fail unless root contains a cargo configuration file.

        Raises:
            ConfigurationError: If no marker file exists
        """
        if not any((root / marker).is_file() for marker in MARKER_FILES):
            raise ConfigurationError(
                f"Target config_folder '{root}' must contain a '.cargo/config'."
            )

    def locate(self, root: Path, label: Optional[str]) -> Path:
        """Return the artifact directory for one configuration root.

        Args:
            root: Configuration root directory
            label: CMake configuration type (e.g. ``Debug``), if any

        Returns:
            Absolute directory in which cargo places this configuration's outputs

        Raises:
            ConfigurationError: If the marker is missing or the label is unknown
            WorkspaceError: If the metadata query fails
        """
        self.check_marker(root)
        folder = target_folder(label, self.cargo_profile)

        with scoped_working_directory(root):
            workspace = self.query()

        artifact_dir = Path(workspace.target_directory)
        if self.target_triple:
            artifact_dir = artifact_dir / self.target_triple
        return artifact_dir / folder
