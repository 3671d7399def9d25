"""Threadview: terminal client for a threaded comment service."""

from importlib import metadata

__all__ = ["cli", "core", "tui"]

try:
    __version__ = metadata.version("threadview")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
