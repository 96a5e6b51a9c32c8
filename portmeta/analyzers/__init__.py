"""Analyzers that read build-integration files from an unpacked port."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from ..config import ScanConfig
from ..logging import get_logger
from ..models import InstalledTree, ScanResult
from ..tree_scanner import read_text
from .configs import ConfigFileResolver, ConfigMap
from .targets import TargetMap, TargetScanner, extract_targets
from .usage import UsageExtractor, UsageNote, discover_package_names
from .utils import MetadataLayout, declaring_name


class PackageAnalyzer:
    """Runs the target, config and usage analyzers over one installed tree."""

    def __init__(
        self,
        scan_config: ScanConfig | None = None,
        reader: Callable[[Path], str] = read_text,
    ) -> None:
        self.layout = MetadataLayout.from_config(scan_config or ScanConfig())
        self.targets = TargetScanner(self.layout, reader)
        self.configs = ConfigFileResolver(self.layout)
        self.usage = UsageExtractor(self.layout, reader)
        self.logger = get_logger("analyzers")

    def analyze(self, tree: InstalledTree) -> ScanResult:
        root = Path(tree.root)
        result = ScanResult()

        for rel_path in tree.files:
            if not self.layout.is_build_script(rel_path):
                continue
            self.targets.collect(root, rel_path, result.targets)
            self.configs.collect(rel_path, result.config_files)

        note = self.usage.extract(root, tree.files)
        self.usage.seed_names(result.targets, note)
        result.usage = note.escaped

        self.logger.debug(
            "Found %d target group(s) and %d config file(s) in %s",
            len(result.targets),
            len(result.config_files),
            root,
        )
        return result


__all__ = [
    "ConfigFileResolver",
    "ConfigMap",
    "MetadataLayout",
    "PackageAnalyzer",
    "TargetMap",
    "TargetScanner",
    "UsageExtractor",
    "UsageNote",
    "declaring_name",
    "discover_package_names",
    "extract_targets",
]
