"""CMake configuration contexts.

Single-configuration generators (Makefiles, Ninja) build one configuration
per build tree; multi-configuration generators (Visual Studio, Xcode, Ninja
Multi-Config) hold several side by side. The context decides how imported
location properties are named and where each configuration's cargo artifacts
live.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

# CMake configuration -> cargo output directory
CONFIG_TYPE_TARGET_FOLDERS = {
    "Debug": "debug",
    "Release": "release",
    "RelWithDebInfo": "release",
    "MinSizeRel": "release",
}

# cargo profile -> output directory, when it differs from the profile name
PROFILE_TARGET_FOLDERS = {
    "dev": "debug",
    "test": "debug",
    "bench": "release",
}


class ConfigurationError(Exception):
    """Raised for invalid configuration types or configuration roots."""

    pass


@dataclass(frozen=True)
class SingleConfiguration:
    """One configuration per build tree, optionally labelled (e.g. ``Debug``)."""

    label: Optional[str] = None

    is_multi_config = False

    def property_suffix(self, label: Optional[str]) -> str:
        return ""

    def roots(self, configuration_root: Path) -> List[Tuple[Optional[str], Path]]:
        """The configuration root itself, paired with the optional label."""
        return [(self.label, configuration_root)]


@dataclass(frozen=True)
class MultiConfiguration:
    """Several configurations, each in ``<configuration_root>/<label>``."""

    labels: Tuple[str, ...]

    is_multi_config = True

    def __post_init__(self):
        if not self.labels:
            raise ConfigurationError("A multi-configuration context needs at least one configuration type")

    def property_suffix(self, label: Optional[str]) -> str:
        if label is None:
            return ""
        return f"_{label.upper()}"

    def roots(self, configuration_root: Path) -> List[Tuple[Optional[str], Path]]:
        return [(label, configuration_root / label) for label in self.labels]


ConfigurationContext = Union[SingleConfiguration, MultiConfiguration]


def configuration_context(
    configuration_type: Optional[str] = None,
    configuration_types: Optional[List[str]] = None,
) -> ConfigurationContext:
    """Build the configuration context from command-line values.

    Args:
        configuration_type: Label for a single-configuration build tree
        configuration_types: Ordered labels for a multi-configuration build tree

    Returns:
        MultiConfiguration when configuration_types is given, else SingleConfiguration

    Raises:
        ConfigurationError: If both are given
    """
    if configuration_types:
        if configuration_type is not None:
            raise ConfigurationError(
                "--configuration-type and --configuration-types are mutually exclusive"
            )
        return MultiConfiguration(labels=tuple(configuration_types))
    return SingleConfiguration(label=configuration_type)


def target_folder(label: Optional[str], profile: Optional[str] = None) -> str:
    """Return the cargo output folder name for a configuration.

    A custom cargo profile always decides the folder. Otherwise the CMake
    configuration is mapped onto cargo's debug/release folders.

    Raises:
        ConfigurationError: If the configuration type has no cargo equivalent
    """
    if profile is not None:
        return PROFILE_TARGET_FOLDERS.get(profile, profile)
    if label is None:
        return "debug"
    try:
        return CONFIG_TYPE_TARGET_FOLDERS[label]
    except KeyError:
        raise ConfigurationError(
            f"Unknown configuration type '{label}'. "
            + f"Known types: {', '.join(CONFIG_TYPE_TARGET_FOLDERS)}"
        ) from None
