"""cmake-cargo - Import cargo build outputs into CMake."""

__version__ = "0.1.0"
