"""Build unit classification and artifact naming.

A build unit is one artifact-producing cargo target (a ``bin``, ``staticlib``
or ``cdylib``) inside a workspace package. This module turns the raw kind tags
reported by ``cargo metadata`` into a closed set of unit kinds and derives the
file names cargo will produce for each unit on a given platform.

Naming follows rustc's conventions:

    ============  ==================  ==================  ==============
    artifact      windows-msvc        windows-gnu         unix
    ============  ==================  ==================  ==============
    static        name.lib            libname.a           libname.a
    dynamic       name.dll            name.dll            libname.so /
                                                          libname.dylib
    import lib    name.dll.lib        libname.dll.a       -
    debug info    name.pdb            -                   -
    executable    name.exe            name.exe            name
    ============  ==================  ==================  ==============
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from .platform_profile import PlatformProfile

STATICLIB = "staticlib"
CDYLIB = "cdylib"
BIN = "bin"


@dataclass(frozen=True)
class Executable:
    """A ``bin`` target."""

    target_kind = "bin"


@dataclass(frozen=True)
class Library:
    """A ``staticlib`` and/or ``cdylib`` target."""

    has_static: bool
    has_dynamic: bool

    target_kind = "lib"

    def __post_init__(self):
        if not (self.has_static or self.has_dynamic):
            raise ValueError("A library unit must produce a static or a dynamic library")


UnitKind = Union[Executable, Library]


def classify(kind_tags: Iterable[str]) -> Optional[UnitKind]:
    """Classify a cargo target from its kind tags.

    Library kinds win over ``bin``; targets with neither (``lib``, ``rlib``,
    ``proc-macro``, ``example``, ...) are not imported.

    Args:
        kind_tags: Kind tags as reported by cargo metadata

    Returns:
        Executable, Library, or None if the target is not imported
    """
    tags = set(kind_tags)
    has_static = STATICLIB in tags
    has_dynamic = CDYLIB in tags

    if has_static or has_dynamic:
        return Library(has_static=has_static, has_dynamic=has_dynamic)
    if BIN in tags:
        return Executable()
    return None


@dataclass(frozen=True)
class BuildUnit:
    """One importable cargo target.

    The owning package is referenced by name and manifest path only.
    """

    package_name: str
    manifest_path: str
    name: str
    kind: UnitKind

    @staticmethod
    def from_target(
        package_name: str, manifest_path: str, name: str, kind_tags: Iterable[str]
    ) -> Optional["BuildUnit"]:
        """Create a unit from a cargo target, or None if it is not importable."""
        kind = classify(kind_tags)
        if kind is None:
            return None
        return BuildUnit(
            package_name=package_name,
            manifest_path=manifest_path,
            name=name,
            kind=kind,
        )

    @property
    def is_executable(self) -> bool:
        return isinstance(self.kind, Executable)

    @property
    def has_static(self) -> bool:
        return isinstance(self.kind, Library) and self.kind.has_static

    @property
    def has_dynamic(self) -> bool:
        return isinstance(self.kind, Library) and self.kind.has_dynamic

    @property
    def artifact_stem(self) -> str:
        # rustc replaces dashes in crate names
        return self.name.replace("-", "_")

    def static_lib_name(self, platform: PlatformProfile) -> str:
        if platform.is_msvc:
            return f"{self.artifact_stem}.lib"
        return f"lib{self.artifact_stem}.a"

    def dynamic_lib_name(self, platform: PlatformProfile) -> str:
        if platform.is_windows:
            return f"{self.artifact_stem}.dll"
        if platform.is_macos:
            return f"lib{self.artifact_stem}.dylib"
        return f"lib{self.artifact_stem}.so"

    def implib_name(self, platform: PlatformProfile) -> Optional[str]:
        """Import library accompanying a Windows DLL, None on other platforms."""
        if platform.is_msvc:
            return f"{self.artifact_stem}.dll.lib"
        if platform.is_gnu_windows:
            return f"lib{self.artifact_stem}.dll.a"
        return None

    def pdb_name(self, platform: PlatformProfile) -> Optional[str]:
        """Debug symbol file, None when the unit produces none.

        Only MSVC DLLs and executables get a PDB; a static-only library never
        does.
        """
        if platform.is_msvc and (self.has_dynamic or self.is_executable):
            return f"{self.artifact_stem}.pdb"
        return None

    def exe_name(self, platform: PlatformProfile) -> str:
        if platform.is_windows:
            return f"{self.name}.exe"
        return self.name

    def byproducts(self, platform: PlatformProfile) -> List[str]:
        """All files ``cargo build`` is expected to produce for this unit.

        Generators like Ninja need the complete list to know the custom
        command's outputs.
        """
        files: List[str] = []
        if self.has_static:
            files.append(self.static_lib_name(platform))
        if self.has_dynamic:
            files.append(self.dynamic_lib_name(platform))
            implib = self.implib_name(platform)
            if implib is not None:
                files.append(implib)
        if self.is_executable:
            files.append(self.exe_name(platform))

        pdb = self.pdb_name(platform)
        if pdb is not None:
            files.append(pdb)
        return files
