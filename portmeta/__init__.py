"""Extract CMake consumption metadata from packaged ports."""

__version__ = "0.1.0"
