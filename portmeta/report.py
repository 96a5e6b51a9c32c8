"""Rendering of assembled port records into the usage report."""

from __future__ import annotations

from typing import Iterable, List

from .config import ReportFormat
from .models import PackageEntry, PackageRecord
from .names import escape_string


class ReportSerializer:
    """Renders records as comma-separated JSON object lines."""

    def __init__(self, report_format: str = ReportFormat.OBJECT) -> None:
        self.report_format = ReportFormat.validate(report_format)

    @property
    def include_description(self) -> bool:
        return self.report_format == ReportFormat.OBJECT

    def render(self, records: Iterable[PackageRecord]) -> str:
        lines: List[str] = []
        for record in records:
            lines.extend(self.render_record(record))

        body = ",\n".join(lines)
        if self.report_format == ReportFormat.OBJECT:
            return f"{{\n{body}\n}}\n"
        return f"{body}\n"

    def render_record(self, record: PackageRecord) -> List[str]:
        """Return one line per entry, or a single ``_<port>`` line when empty."""
        if not record.entries:
            fallback = PackageEntry(display_name=f"_{record.port_name}", targets=())
            return [self._render_entry(record, fallback)]
        return [self._render_entry(record, entry) for entry in record.entries]

    def _render_entry(self, record: PackageRecord, entry: PackageEntry) -> str:
        name = escape_string(entry.display_name)
        targets = ", ".join(f'"{escape_string(target)}"' for target in entry.targets)
        fields = [
            f'"name": "{name}"',
            f'"targets": [{targets}]',
            f'"portName": "{escape_string(record.port_name)}"',
        ]
        if self.include_description:
            fields.append(f'"portDescription": "{escape_string(record.port_description)}"')
        # Usage text is escaped when it is captured or synthesized.
        fields.append(f'"description": "{record.usage}"')
        return f'    "{name}": {{ {", ".join(fields)} }}'


__all__ = ["ReportSerializer"]
