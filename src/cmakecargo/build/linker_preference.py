"""Linker selection for mixed-language links.

When C or C++ objects take part in the final link of a Rust artifact, the
link has to run through one of their compiler drivers so that the right
standard and implicit libraries are pulled in. CMake advertises every
participating language through the environment:

    CMAKECARGO_LINKER_LANGUAGES            C;CXX
    CMAKECARGO_<LANG>_LINKER_PREFERENCE    integer, higher wins
    CMAKECARGO_<LANG>_COMPILER             path to the compiler driver
    CMAKECARGO_<LANG>_COMPILER_TARGET      clang --target value, if any

The environment is read once into a typed mapping; resolving the winner and
assembling the RUSTFLAGS / linker override is pure.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

ENV_PREFIX = "CMAKECARGO"
LANGUAGES_VAR = f"{ENV_PREFIX}_LINKER_LANGUAGES"

DEFAULT_LINKER_LIBRARIES_FLAG = "-C default-linker-libraries=yes"
LINK_TARGET_FLAG = "-C link-args=--target="


class LinkerPreferenceError(Exception):
    """Raised when a linker preference in the environment is malformed."""

    pass


@dataclass(frozen=True)
class LinkerPreference:
    """What CMake reports about one participating language."""

    language: str
    preference: Optional[int] = None
    compiler: Optional[str] = None
    compiler_target: Optional[str] = None


@dataclass
class LinkerOverrides:
    """Environment overrides for the cargo invocation."""

    env: Dict[str, str] = field(default_factory=dict)
    language: Optional[str] = None

    @property
    def rustflags(self) -> Optional[str]:
        return self.env.get("RUSTFLAGS")


def load_linker_preferences(environ: Mapping[str, str]) -> Dict[str, LinkerPreference]:
    """Read the linker preference surface from an environment mapping.

    Args:
        environ: Environment variables (usually os.environ)

    Returns:
        Language -> preference, in the order CMake listed the languages

    Raises:
        LinkerPreferenceError: If a preference is not an integer
    """
    languages = [lang for lang in environ.get(LANGUAGES_VAR, "").split(";") if lang]

    preferences: Dict[str, LinkerPreference] = {}
    for language in languages:
        raw = environ.get(f"{ENV_PREFIX}_{language}_LINKER_PREFERENCE")
        preference = None
        if raw is not None:
            try:
                preference = int(raw.strip())
            except ValueError:
                raise LinkerPreferenceError(
                    f"{ENV_PREFIX}_{language}_LINKER_PREFERENCE must be an integer, got '{raw}'"
                ) from None

        preferences[language] = LinkerPreference(
            language=language,
            preference=preference,
            compiler=environ.get(f"{ENV_PREFIX}_{language}_COMPILER"),
            compiler_target=environ.get(f"{ENV_PREFIX}_{language}_COMPILER_TARGET"),
        )
    return preferences


def select_linker_language(
    preferences: Mapping[str, LinkerPreference],
) -> Optional[LinkerPreference]:
    """Pick the language whose compiler drives the link.

    Folds over the languages in order. A numeric preference beats no
    preference, a strictly higher preference beats a lower one, and on ties
    (or when the incoming language has no preference) the earliest language
    is kept.

    Returns:
        The winning preference, or None when no language participates
    """
    best: Optional[LinkerPreference] = None
    for candidate in preferences.values():
        if best is None:
            best = candidate
        elif candidate.preference is None:
            continue
        elif best.preference is None or candidate.preference > best.preference:
            best = candidate
    return best


def linker_env_var(target_triple: str) -> str:
    """Cargo's per-target linker override, e.g. CARGO_TARGET_X86_64_PC_WINDOWS_MSVC_LINKER."""
    return f"CARGO_TARGET_{target_triple.replace('-', '_').upper()}_LINKER"


def resolve_linker_overrides(
    target_triple: str,
    preferences: Mapping[str, LinkerPreference],
    extra_rustflags: Optional[str] = None,
) -> LinkerOverrides:
    """Assemble the environment overrides for ``cargo build``.

    Args:
        target_triple: Target triple cargo builds for
        preferences: Participating languages, in order
        extra_rustflags: Raw flags appended verbatim after the generated ones

    Returns:
        LinkerOverrides with the linker variable and RUSTFLAGS (when non-empty)
    """
    overrides = LinkerOverrides()
    flags = ""

    winner = select_linker_language(preferences)
    if winner is not None:
        overrides.language = winner.language
        flags = DEFAULT_LINKER_LIBRARIES_FLAG

        if winner.compiler:
            overrides.env[linker_env_var(target_triple)] = winner.compiler
        if winner.compiler_target:
            flags += f" {LINK_TARGET_FLAG}{winner.compiler_target}"

    if extra_rustflags:
        flags += f" {extra_rustflags}"

    flags = flags.strip()
    if flags:
        overrides.env["RUSTFLAGS"] = flags
    return overrides


def describe(preferences: Mapping[str, LinkerPreference]) -> Tuple[str, ...]:
    """Short ``LANG(preference)`` descriptions for verbose output."""
    return tuple(
        f"{p.language}({p.preference if p.preference is not None else '-'})"
        for p in preferences.values()
    )
