"""Extraction of CMake library targets from installed build scripts."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Dict, Iterable, List

from ..errors import FileReadError
from ..logging import get_logger
from ..tree_scanner import read_text
from .utils import MetadataLayout, declaring_name

ADD_LIBRARY_PATTERN = re.compile(r"\badd_library\(\s*([^\s)]+)")

TargetMap = Dict[str, List[str]]


def extract_targets(text: str) -> List[str]:
    """Return the first argument of every ``add_library(`` call, in textual order."""
    return [match.group(1) for match in ADD_LIBRARY_PATTERN.finditer(text)]


class TargetScanner:
    """Maps each declaring directory to the library targets its scripts add."""

    def __init__(
        self,
        layout: MetadataLayout | None = None,
        reader: Callable[[Path], str] = read_text,
    ) -> None:
        self.layout = layout or MetadataLayout()
        self._reader = reader
        self.logger = get_logger("analyzers.targets")

    def scan(self, root: Path, files: Iterable[str]) -> TargetMap:
        targets: TargetMap = {}
        for rel_path in files:
            if self.layout.is_build_script(rel_path):
                self.collect(root, rel_path, targets)
        return targets

    def collect(self, root: Path, rel_path: str, targets: TargetMap) -> None:
        """Append the targets declared in one build script to ``targets``."""
        try:
            contents = self._reader(root / rel_path)
        except FileReadError as exc:
            self.logger.debug("Skipping unreadable script %s (%s)", rel_path, exc.reason)
            return

        found = extract_targets(contents)
        if found:
            targets.setdefault(declaring_name(rel_path), []).extend(found)


__all__ = ["ADD_LIBRARY_PATTERN", "TargetMap", "TargetScanner", "extract_targets"]
