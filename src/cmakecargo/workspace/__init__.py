"""Cargo workspace metadata and configuration roots."""

from .locator import ConfigurationLocator, scoped_working_directory
from .metadata import CargoMetadataInspector, CargoTarget, Package, Workspace, WorkspaceError

__all__ = [
    "ConfigurationLocator",
    "scoped_working_directory",
    "CargoMetadataInspector",
    "CargoTarget",
    "Package",
    "Workspace",
    "WorkspaceError",
]
