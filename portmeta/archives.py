"""Materialize packaged port archives on disk."""

from __future__ import annotations

import shutil
import tarfile
import zipfile
from pathlib import Path

from .errors import ExtractionError
from .logging import get_logger

_TAR_SUFFIXES = (".tar", ".tar.gz", ".tgz", ".tar.bz2", ".tbz2", ".tar.xz", ".txz")


def archive_stem(path: Path) -> str:
    """Return the archive name without its archive suffix."""
    name = path.name
    for suffix in sorted(_TAR_SUFFIXES, key=len, reverse=True):
        if name.lower().endswith(suffix):
            return name[: -len(suffix)]
    return path.stem


class ArchiveExtractor:
    """Extracts zip and tar archives into a destination directory."""

    def __init__(self) -> None:
        self.logger = get_logger("archives")

    def extract(self, archive_path: Path, dest_dir: Path) -> Path:
        if not archive_path.is_file():
            raise ExtractionError(f"Archive not found: {archive_path}")
        if dest_dir.exists():
            self.logger.debug("Reusing extracted tree at %s", dest_dir)
            return dest_dir

        self.logger.debug("Extracting %s to %s", archive_path, dest_dir)
        try:
            if zipfile.is_zipfile(archive_path):
                with zipfile.ZipFile(archive_path) as archive:
                    archive.extractall(dest_dir)
            elif tarfile.is_tarfile(archive_path):
                with tarfile.open(archive_path) as archive:
                    archive.extractall(dest_dir, filter="data")
            else:
                raise ExtractionError(f"Unsupported archive format: {archive_path}")
        except (OSError, zipfile.BadZipFile, tarfile.TarError) as exc:
            shutil.rmtree(dest_dir, ignore_errors=True)
            raise ExtractionError(f"Failed extracting {archive_path}: {exc}") from exc
        return dest_dir


__all__ = ["ArchiveExtractor", "archive_stem"]
