"""Build-script link hints.

A crate built by cmake-cargo can link against libraries produced by the CMake
side. CMake passes the search directories and library names through the
environment and a build script turns them into cargo directives:

    CMAKECARGO_BUILD_DIR           set for every CMake-initiated build
    CMAKECARGO_LINK_DIRECTORIES    dir1:dir2
    CMAKECARGO_LINK_LIBRARIES      foo:bar
"""

from typing import List, Mapping

BUILD_DIR_VAR = "CMAKECARGO_BUILD_DIR"
LINK_DIRECTORIES_VAR = "CMAKECARGO_LINK_DIRECTORIES"
LINK_LIBRARIES_VAR = "CMAKECARGO_LINK_LIBRARIES"


class IntegratorError(Exception):
    """Raised when link hints are requested outside a CMake-initiated build."""

    pass


def is_cmakecargo_build(environ: Mapping[str, str]) -> bool:
    return BUILD_DIR_VAR in environ


def _split(value: str) -> List[str]:
    return [item for item in value.split(":") if item]


def link_hints(environ: Mapping[str, str]) -> List[str]:
    """Cargo directives for the CMake-provided link directories and libraries.

    Raises:
        IntegratorError: If the build was not initiated from CMake
    """
    if not is_cmakecargo_build(environ):
        raise IntegratorError(
            f"{BUILD_DIR_VAR} environment variable not set - build must be initiated from CMake."
        )

    hints = [
        f"cargo:rustc-link-search={directory}"
        for directory in _split(environ.get(LINK_DIRECTORIES_VAR, ""))
    ]
    hints.extend(
        f"cargo:rustc-link-lib={library}"
        for library in _split(environ.get(LINK_LIBRARIES_VAR, ""))
    )
    return hints
