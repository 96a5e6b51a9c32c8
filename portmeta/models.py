"""Core data models shared across portmeta components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class PackageManifest:
    """Name and description read from a port's manifest record."""

    name: str
    description: Optional[str] = None


@dataclass
class InstalledTree:
    """Sorted, root-relative view of an unpacked package's files."""

    root: str
    files: List[str]


@dataclass
class ScanResult:
    """Raw findings from one walk over a package's build scripts."""

    targets: Dict[str, List[str]] = field(default_factory=dict)
    config_files: Dict[str, str] = field(default_factory=dict)
    usage: str = ""


@dataclass(frozen=True)
class PackageEntry:
    """One discovered consumption name and the targets it exposes."""

    display_name: str
    targets: Tuple[str, ...]


@dataclass(frozen=True)
class PackageRecord:
    """Assembled metadata for one processed port."""

    port_name: str
    port_description: str
    usage: str
    entries: Tuple[PackageEntry, ...]

    @property
    def target_count(self) -> int:
        return sum(len(entry.targets) for entry in self.entries)
