"""Cargo build invocation and linker selection."""

from .cargo_invoker import CargoBuildError, CargoBuildInvoker, CargoBuildRequest
from .linker_preference import (
    LinkerOverrides,
    LinkerPreference,
    LinkerPreferenceError,
    load_linker_preferences,
    resolve_linker_overrides,
    select_linker_language,
)

__all__ = [
    "CargoBuildError",
    "CargoBuildInvoker",
    "CargoBuildRequest",
    "LinkerOverrides",
    "LinkerPreference",
    "LinkerPreferenceError",
    "load_linker_preferences",
    "resolve_linker_overrides",
    "select_linker_language",
]
