"""Capture of free-text usage notes shipped with a port."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..errors import FileReadError
from ..logging import get_logger
from ..names import escape_string
from ..tree_scanner import read_text
from .utils import MetadataLayout

FIND_PACKAGE_PATTERN = re.compile(r"\bfind_package\(\s*([^\s)]+)")


@dataclass(frozen=True)
class UsageNote:
    """A usage file's contents, raw and escaped for the report."""

    raw: str = ""
    escaped: str = ""

    @property
    def empty(self) -> bool:
        return not self.escaped


def discover_package_names(text: str) -> List[str]:
    """Return names requested via ``find_package(`` in first-seen order, once each."""
    names: List[str] = []
    for match in FIND_PACKAGE_PATTERN.finditer(text):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


class UsageExtractor:
    """Locates and reads the ``usage`` note under the shared metadata tree."""

    def __init__(
        self,
        layout: MetadataLayout | None = None,
        reader: Callable[[Path], str] = read_text,
    ) -> None:
        self.layout = layout or MetadataLayout()
        self._reader = reader
        self.logger = get_logger("analyzers.usage")

    def locate(self, files: Iterable[str]) -> Optional[str]:
        return next((path for path in files if self.layout.is_usage_file(path)), None)

    def extract(self, root: Path, files: Iterable[str]) -> UsageNote:
        rel_path = self.locate(files)
        if rel_path is None:
            return UsageNote()
        try:
            contents = self._reader(root / rel_path)
        except FileReadError as exc:
            self.logger.debug("Ignoring unreadable usage file %s (%s)", rel_path, exc.reason)
            return UsageNote()
        return UsageNote(raw=contents, escaped=escape_string(contents))

    @staticmethod
    def seed_names(targets: Dict[str, List[str]], note: UsageNote) -> None:
        """Register names mentioned in ``note`` when no build script declared any."""
        if targets:
            return
        for name in discover_package_names(note.raw):
            targets.setdefault(name, [])


__all__ = [
    "FIND_PACKAGE_PATTERN",
    "UsageExtractor",
    "UsageNote",
    "discover_package_names",
]
