"""Shared helpers for locating build-integration files in a port."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from ..config import ScanConfig
from ..names import contains_ignore_case


@dataclass(frozen=True)
class MetadataLayout:
    """Describes where a port keeps its build-integration files."""

    metadata_dir: str = "share"
    script_suffix: str = ".cmake"
    usage_filename: str = "usage"

    @classmethod
    def from_config(cls, config: ScanConfig) -> "MetadataLayout":
        return cls(
            metadata_dir=config.metadata_dir,
            script_suffix=config.script_suffix,
            usage_filename=config.usage_filename,
        )

    @property
    def marker(self) -> str:
        return f"/{self.metadata_dir.strip('/')}/"

    def in_metadata_tree(self, rel_path: str) -> bool:
        return contains_ignore_case(f"/{rel_path}", self.marker)

    def is_build_script(self, rel_path: str) -> bool:
        """True for files like ``share/<name>/<file>.cmake``."""
        return self.in_metadata_tree(rel_path) and rel_path.endswith(self.script_suffix)

    def is_usage_file(self, rel_path: str) -> bool:
        return self.in_metadata_tree(rel_path) and PurePosixPath(rel_path).name == self.usage_filename


def declaring_name(rel_path: str) -> str:
    """Return the immediate parent directory name of ``rel_path``, verbatim."""
    return PurePosixPath(rel_path).parent.name


__all__ = ["MetadataLayout", "declaring_name"]
