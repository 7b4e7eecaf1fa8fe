"""CLI utility functions for cmake-cargo.

This module provides common utilities used across CLI commands including:
- Cargo manifest detection
- Comma-separated option parsing
- Error handling and formatting
"""

import sys
from pathlib import Path
from typing import List, Optional


class ManifestDetector:
    """Handles Cargo.toml detection."""

    @staticmethod
    def detect_manifest(manifest_path: Optional[Path] = None) -> Path:
        """Detect or validate the Cargo manifest.

        Args:
            manifest_path: Optional explicit path to a Cargo.toml

        Returns:
            Absolute path to the manifest

        Raises:
            FileNotFoundError: If the manifest doesn't exist
        """
        if manifest_path is None:
            manifest_path = Path.cwd() / "Cargo.toml"

        if not manifest_path.is_file():
            raise FileNotFoundError(f"Cargo.toml not found: {manifest_path}")

        return manifest_path.resolve()


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated option value, dropping empty items.

    Example:
        >>> split_list("Debug,Release")
        ['Debug', 'Release']
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes.

    Everything goes to stderr so that stdout can carry generated CMake code.
    """

    # ANSI color codes
    RED = "\033[1;31m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Configuration error")
            message: Error message details
        """
        print(file=sys.stderr)
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        print(file=sys.stderr)
        print(message, file=sys.stderr)
        print(file=sys.stderr)

    @staticmethod
    def print_warning(message: str) -> None:
        print(file=sys.stderr)
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}", file=sys.stderr)

    @staticmethod
    def handle_error(title: str, error: Exception) -> None:
        """Report a fatal error and exit with status 1."""
        ErrorFormatter.print_error(title, str(error))
        sys.exit(1)

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        """Handle FileNotFoundError with standard formatting.

        Args:
            error: The FileNotFoundError to handle
        """
        ErrorFormatter.print_error("Error: File not found", str(error))
        print(
            "Pass --manifest-path or run from a directory containing Cargo.toml.",
            file=sys.stderr,
        )
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)

        sys.exit(1)
