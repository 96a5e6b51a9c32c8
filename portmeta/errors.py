"""Exception hierarchy shared by portmeta components."""

from __future__ import annotations

from pathlib import Path


class PortMetaError(RuntimeError):
    """Base class for every error raised by portmeta."""


class SetupError(PortMetaError):
    """Raised when the run itself cannot proceed (temp dirs, output files)."""


class PackageError(PortMetaError):
    """Raised when a single package cannot be processed; the batch continues."""


class ExtractionError(PackageError):
    """Raised when an archive cannot be materialized on disk."""


class ManifestError(PackageError):
    """Raised when a package manifest cannot be read or understood."""


class ManifestNotFoundError(ManifestError):
    """Raised when a package root carries no manifest file at all."""


class ManifestParseError(ManifestError):
    """Raised when a manifest exists but its contents are malformed."""


class FileReadError(PortMetaError):
    """Raised when a file cannot be read.

    ``reason`` is one of ``"not_found"``, ``"permission"`` or ``"io"`` so callers
    can tell a missing file apart from an unreadable one.
    """

    def __init__(self, path: Path, reason: str, detail: str = "") -> None:
        self.path = path
        self.reason = reason
        self.detail = detail
        message = f"Cannot read {path} ({reason})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


__all__ = [
    "ExtractionError",
    "FileReadError",
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestParseError",
    "PackageError",
    "PortMetaError",
    "SetupError",
]
