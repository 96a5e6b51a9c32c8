"""Filesystem listing and reading for unpacked ports."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from .errors import FileReadError
from .models import InstalledTree

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            yield current_dir / filename


def list_files_recursive(directory: Path) -> list[str]:
    """Return POSIX paths, relative to ``directory``, of every file below it.

    A missing directory yields an empty list; a port without a metadata tree is
    a normal case rather than an error.
    """
    if not directory.is_dir():
        return []
    return sorted(path.relative_to(directory).as_posix() for path in _iter_files(directory))


def read_text(path: Path) -> str:
    """Read ``path`` as UTF-8 text, raising :class:`FileReadError` on failure."""
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise FileReadError(path, "not_found") from exc
    except PermissionError as exc:
        raise FileReadError(path, "permission") from exc
    except OSError as exc:
        raise FileReadError(path, "io", str(exc)) from exc
    return data.decode("utf-8", errors="replace")


class TreeScanner:
    """Walks an unpacked port to produce a normalized file listing."""

    def scan(self, root: str) -> InstalledTree:
        """Return every file below ``root``, as sorted root-relative paths."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Package path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Package path is not a directory: {root}")
        return InstalledTree(root=str(root_path), files=list_files_recursive(root_path))


__all__ = ["TreeScanner", "list_files_recursive", "read_text"]
