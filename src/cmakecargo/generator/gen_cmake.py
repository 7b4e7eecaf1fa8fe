"""Imported-target generation for a cargo workspace.

Ties the pieces together: selects the build units of the workspace, declares
them (phase A) and binds their locations for every configuration root in
order (phase B).
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from .configuration import ConfigurationContext
from .emitter import CMakeEmitter
from .platform_profile import PlatformProfile

if TYPE_CHECKING:
    from ..workspace.metadata import Workspace

logger = logging.getLogger(__name__)


class ArtifactLocator(Protocol):
    def locate(self, root: Path, label: Optional[str]) -> Path: ...


def generate(
    workspace: "Workspace",
    platform: PlatformProfile,
    context: ConfigurationContext,
    locator: ArtifactLocator,
    configuration_root: Path = Path("."),
    crates: Optional[Sequence[str]] = None,
    cargo_profile: Optional[str] = None,
    include_platform_libs: bool = True,
) -> CMakeEmitter:
    """Generate the directive stream for a workspace.

    Configuration roots are validated as they are located; any failure
    propagates before anything is written.

    Args:
        workspace: Workspace metadata
        platform: Platform profile of the target
        context: Single- or multi-configuration context
        locator: Resolves each configuration root to its artifact directory
        configuration_root: Directory holding the configuration roots
        crates: Package names to import (all workspace members when empty)
        cargo_profile: Custom cargo profile
        include_platform_libs: Attach default platform libraries

    Returns:
        Emitter holding the complete stream
    """
    units = workspace.build_units(crates)
    logger.info(f"Importing {len(units)} targets from {workspace.workspace_root}")

    emitter = CMakeEmitter(
        platform,
        cargo_profile=cargo_profile,
        include_platform_libs=include_platform_libs,
    )
    emitter.emit_header()

    for unit in units:
        emitter.declare(unit)
    emitter.end_declarations()

    for label, root in context.roots(configuration_root):
        artifact_dir = locator.locate(root, label)
        suffix = context.property_suffix(label)
        logger.debug(f"Configuration {label or '<default>'}: {artifact_dir}")
        for unit in units:
            emitter.locate(unit, artifact_dir, property_suffix=suffix)

    return emitter
