"""Parsing of port manifest records (CONTROL paragraphs and vcpkg.json)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from .errors import FileReadError, ManifestNotFoundError, ManifestParseError
from .logging import get_logger
from .models import PackageManifest
from .tree_scanner import read_text

CONTROL_FILENAME = "CONTROL"
JSON_MANIFEST_FILENAME = "vcpkg.json"

_LOGGER = get_logger("control")


class RecordParser:
    """Splits ``Field: value`` text into paragraphs of fields.

    Paragraphs are separated by blank lines. Lines starting with whitespace
    continue the previous field's value, and lines starting with ``#`` are
    comments only in the first column.
    """

    def parse(self, text: str, *, origin: str = "<string>") -> List[Dict[str, str]]:
        paragraphs: List[Dict[str, str]] = []
        current: Dict[str, str] = {}
        last_field: Optional[str] = None

        for number, raw in enumerate(text.splitlines(), start=1):
            line = raw.rstrip()
            if not line.strip():
                if current:
                    paragraphs.append(current)
                current = {}
                last_field = None
                continue
            if line[0] in " \t":
                if last_field is None:
                    raise ManifestParseError(
                        f"{origin}:{number}: continuation line without a field"
                    )
                current[last_field] = f"{current[last_field]}\n{line.strip()}"
                continue
            if line.startswith("#"):
                continue
            if ":" not in line:
                raise ManifestParseError(f"{origin}:{number}: expected 'Field: value'")
            name, value = line.split(":", 1)
            name = name.strip()
            if not name:
                raise ManifestParseError(f"{origin}:{number}: empty field name")
            if name in current:
                raise ManifestParseError(f"{origin}:{number}: duplicate field '{name}'")
            current[name] = value.strip()
            last_field = name

        if current:
            paragraphs.append(current)
        return paragraphs


class ManifestReader:
    """Reads the name and description of a port from its package root."""

    def __init__(self, parser: RecordParser | None = None) -> None:
        self.parser = parser or RecordParser()

    def read(self, package_root: Path) -> PackageManifest:
        control_path = package_root / CONTROL_FILENAME
        if control_path.exists():
            return self._read_control(control_path)

        json_path = package_root / JSON_MANIFEST_FILENAME
        if json_path.exists():
            return self._read_json(json_path)

        raise ManifestNotFoundError(f"{control_path} does not exist.")

    def _read_control(self, path: Path) -> PackageManifest:
        text = self._read(path)
        paragraphs = self.parser.parse(text, origin=str(path))
        if not paragraphs:
            raise ManifestParseError(f"Error parsing CONTROL file '{path}': no paragraphs")

        first = paragraphs[0]
        # Source paragraphs describe ports, Package paragraphs describe built binaries.
        name = first.get("Source") or first.get("Package")
        if not name:
            raise ManifestParseError(
                f"Error parsing CONTROL file '{path}': missing 'Source' or 'Package' field"
            )
        description = first.get("Description")
        _LOGGER.debug("Read CONTROL manifest for %s", name)
        return PackageManifest(name=name, description=description or None)

    def _read_json(self, path: Path) -> PackageManifest:
        text = self._read(path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestParseError(f"Error parsing manifest '{path}': {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestParseError(f"Error parsing manifest '{path}': expected an object")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestParseError(f"Error parsing manifest '{path}': missing 'name'")

        description = data.get("description")
        if isinstance(description, list):
            description = "\n".join(str(item) for item in description)
        elif not isinstance(description, str):
            description = None
        _LOGGER.debug("Read JSON manifest for %s", name)
        return PackageManifest(name=name, description=description or None)

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return read_text(path)
        except FileReadError as exc:
            if exc.reason == "not_found":
                raise ManifestNotFoundError(f"{path} does not exist.") from exc
            raise ManifestParseError(f"Cannot read manifest '{path}': {exc.reason}") from exc


__all__ = ["ManifestReader", "RecordParser"]
