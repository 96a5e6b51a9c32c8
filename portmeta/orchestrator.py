"""Pipeline orchestration for analyzing batches of packaged ports."""

from __future__ import annotations

import shutil
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from .analyzers import PackageAnalyzer
from .archives import ArchiveExtractor, archive_stem
from .assembler import MetadataAssembler
from .config import PortMetaConfig
from .control import ManifestReader
from .errors import PackageError, SetupError
from .logging import get_logger
from .models import PackageRecord
from .progress import ProgressReporter
from .report import ReportSerializer
from .tree_scanner import TreeScanner


@dataclass
class PackageOutcome:
    """Result of processing one input path."""

    source: str
    record: Optional[PackageRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class _WorkItem:
    source: str
    path: Path
    destination: Optional[Path]


@contextmanager
def working_directory(parent: Path | None = None) -> Iterator[Path]:
    """Create a scratch directory for extracted archives and always remove it."""
    try:
        if parent is not None:
            parent.mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix="portmeta-", dir=parent))
    except OSError as exc:
        raise SetupError(f"Failed creating temp directory: {exc}") from exc
    try:
        yield path
    except BaseException:
        # Cleanup failure must not replace the error already propagating.
        try:
            shutil.rmtree(path)
        except OSError as exc:
            get_logger("orchestrator").warning("Failed removing temp directory %s: %s", path, exc)
        raise
    try:
        shutil.rmtree(path)
    except OSError as exc:
        raise SetupError(f"Failed removing temp directory: {exc}") from exc


class Orchestrator:
    """Coordinates extraction, analysis, assembly and rendering for many ports."""

    def __init__(
        self,
        config: PortMetaConfig | None = None,
        *,
        extractor: ArchiveExtractor | None = None,
        manifest_reader: ManifestReader | None = None,
        scanner: TreeScanner | None = None,
        analyzer: PackageAnalyzer | None = None,
        assembler: MetadataAssembler | None = None,
        progress: ProgressReporter | None = None,
    ) -> None:
        self.config = config or PortMetaConfig(root=Path.cwd())
        self.extractor = extractor or ArchiveExtractor()
        self.manifest_reader = manifest_reader or ManifestReader()
        self.scanner = scanner or TreeScanner()
        self.analyzer = analyzer or PackageAnalyzer(self.config.scan)
        self.assembler = assembler or MetadataAssembler(
            self.config.report.usage_template,
            dedupe_targets=self.config.report.dedupe_targets,
        )
        self.progress = progress or ProgressReporter(quiet=self.config.run.quiet)
        self.logger = get_logger("orchestrator")

    def run(self, inputs: Sequence[str]) -> str:
        """Analyze every input and return the rendered report."""
        outcomes = self.process(inputs)
        records = [outcome.record for outcome in outcomes if outcome.record is not None]
        serializer = ReportSerializer(self.config.report.format)
        return serializer.render(records)

    def process(self, inputs: Sequence[str]) -> List[PackageOutcome]:
        """Return one outcome per input, in input order."""
        self.logger.info("Analyzing %d input(s)", len(inputs))
        with working_directory(self.config.run.temp_dir) as temp_dir:
            items = self._plan(inputs, temp_dir)
            locks: Dict[Path, threading.Lock] = {
                item.destination: threading.Lock()
                for item in items
                if item.destination is not None
            }

            def _run(item: _WorkItem) -> PackageOutcome:
                return self._process_item(item, locks)

            jobs = max(1, self.config.run.jobs)
            if jobs == 1 or len(items) <= 1:
                outcomes = []
                for item in items:
                    outcomes.append(_run(item))
                    self._report(outcomes[-1])
                return outcomes

            outcomes = []
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                # map() yields in submission order, keeping the report deterministic.
                for outcome in pool.map(_run, items):
                    self._report(outcome)
                    outcomes.append(outcome)
            return outcomes

    def analyze_directory(self, root: Path) -> PackageRecord:
        """Analyze an already unpacked port rooted at ``root``."""
        manifest = self.manifest_reader.read(root)
        tree = self.scanner.scan(str(root))
        scan = self.analyzer.analyze(tree)
        return self.assembler.assemble(manifest, scan)

    def _plan(self, inputs: Sequence[str], temp_dir: Path) -> List[_WorkItem]:
        items: List[_WorkItem] = []
        destinations: Dict[Path, Path] = {}
        taken: set[Path] = set()
        for source in inputs:
            path = Path(source).expanduser()
            if path.is_dir():
                items.append(_WorkItem(source=source, path=path, destination=None))
                continue
            resolved = path.resolve()
            destination = destinations.get(resolved)
            if destination is None:
                stem = archive_stem(path)
                destination = temp_dir / stem
                counter = 1
                while destination in taken:
                    counter += 1
                    destination = temp_dir / f"{stem}-{counter}"
                destinations[resolved] = destination
                taken.add(destination)
            items.append(_WorkItem(source=source, path=path, destination=destination))
        return items

    def _process_item(self, item: _WorkItem, locks: Dict[Path, threading.Lock]) -> PackageOutcome:
        try:
            if item.destination is None:
                root = item.path
            else:
                with locks[item.destination]:
                    root = self.extractor.extract(item.path, item.destination)
            record = self.analyze_directory(root)
        except (PackageError, FileNotFoundError, NotADirectoryError) as exc:
            self.logger.debug("Skipping %s: %s", item.source, exc)
            return PackageOutcome(source=item.source, error=str(exc))
        return PackageOutcome(source=item.source, record=record)

    def _report(self, outcome: PackageOutcome) -> None:
        if outcome.record is not None:
            self.progress.succeeded(outcome.source, outcome.record)
        else:
            self.progress.failed(outcome.source, outcome.error or "unknown error")


__all__ = ["Orchestrator", "PackageOutcome", "working_directory"]
