"""Configuration loading for portmeta (.portmeta.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import PortMetaError

CONFIG_FILENAME = ".portmeta.yml"


class ConfigError(PortMetaError):
    """Raised when the configuration file cannot be parsed."""


class ReportFormat:
    """Output variants understood by the report serializer.

    ``object`` wraps the report in braces and includes ``portDescription``;
    ``fragment`` emits bare comma-separated entries without the description.
    """

    OBJECT = "object"
    FRAGMENT = "fragment"

    CHOICES = (OBJECT, FRAGMENT)

    @classmethod
    def validate(cls, value: str) -> str:
        lowered = value.strip().lower()
        if lowered not in cls.CHOICES:
            choices = ", ".join(cls.CHOICES)
            raise ConfigError(f"Unknown report format '{value}' (expected one of: {choices})")
        return lowered


@dataclass
class ScanConfig:
    """Where build-integration files live inside an unpacked port."""

    metadata_dir: str = "share"
    script_suffix: str = ".cmake"
    usage_filename: str = "usage"


@dataclass
class ReportConfig:
    """Report rendering options."""

    format: str = ReportFormat.OBJECT
    dedupe_targets: bool = False
    usage_template: Optional[str] = None


@dataclass
class RunConfig:
    """Batch execution settings."""

    quiet: bool = False
    jobs: int = 1
    temp_dir: Optional[Path] = None


@dataclass
class PortMetaConfig:
    """Represents the settings defined in .portmeta.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    run: RunConfig = field(default_factory=RunConfig)


def load_config(config_path: Path) -> PortMetaConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PortMetaConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        scan.metadata_dir = _as_str(scan_data.get("metadata_dir")) or scan.metadata_dir
        scan.script_suffix = _as_str(scan_data.get("script_suffix")) or scan.script_suffix
        scan.usage_filename = _as_str(scan_data.get("usage_filename")) or scan.usage_filename

    report = ReportConfig()
    report_data = _as_dict(data.get("report"))
    if report_data:
        format_value = _as_str(report_data.get("format"))
        if format_value:
            report.format = ReportFormat.validate(format_value)
        dedupe = _as_bool(report_data.get("dedupe_targets"))
        if dedupe is not None:
            report.dedupe_targets = dedupe
        report.usage_template = _as_str(report_data.get("usage_template"))

    run = RunConfig()
    run_data = _as_dict(data.get("run"))
    if run_data:
        quiet = _as_bool(run_data.get("quiet"))
        if quiet is not None:
            run.quiet = quiet
        jobs = _as_int(run_data.get("jobs"))
        if jobs is not None and jobs > 0:
            run.jobs = jobs
        temp_dir = _as_str(run_data.get("temp_dir"))
        if temp_dir:
            run.temp_dir = (root / temp_dir).resolve()

    return PortMetaConfig(root=root, scan=scan, report=report, run=run)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None

