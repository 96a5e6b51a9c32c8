"""Detection of canonical CMake package config files."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Iterable, Optional, Tuple

from ..names import equals_ignore_case, strip_suffix
from .utils import MetadataLayout, declaring_name

ConfigMap = Dict[str, str]


class ConfigFileResolver:
    """Binds ``<Name>Config.cmake`` and ``<name>-config.cmake`` to their directory.

    The directory name is the key; the file name root, in its original case,
    is the display name used in the report.
    """

    def __init__(self, layout: MetadataLayout | None = None) -> None:
        self.layout = layout or MetadataLayout()

    @property
    def suffixes(self) -> Tuple[str, ...]:
        # Order matters: the first matching suffix wins.
        return (f"Config{self.layout.script_suffix}", f"-config{self.layout.script_suffix}")

    def resolve(self, files: Iterable[str]) -> ConfigMap:
        config_files: ConfigMap = {}
        for rel_path in files:
            if self.layout.is_build_script(rel_path):
                self.collect(rel_path, config_files)
        return config_files

    def collect(self, rel_path: str, config_files: ConfigMap) -> None:
        package_name = declaring_name(rel_path)
        root = self.bind(PurePosixPath(rel_path).name, package_name)
        if root is not None:
            config_files[package_name] = root

    def bind(self, filename: str, package_name: str) -> Optional[str]:
        """Return the config root of ``filename`` when it names ``package_name``."""
        for suffix in self.suffixes:
            root = strip_suffix(filename, suffix)
            if root is None:
                continue
            if root and equals_ignore_case(root, package_name):
                return root
            return None
        return None


__all__ = ["ConfigFileResolver", "ConfigMap"]
