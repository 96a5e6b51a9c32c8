"""Human-readable progress lines for batch runs."""

from __future__ import annotations

import sys
from typing import TextIO

from .models import PackageRecord


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


class ProgressReporter:
    """Writes one status line per processed package unless ``quiet`` is set."""

    def __init__(self, stream: TextIO | None = None, *, quiet: bool = False) -> None:
        self._stream = stream
        self.quiet = quiet

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def message(self, text: str) -> None:
        if self.quiet:
            return
        self.stream.write(f"{text}\n")
        self.stream.flush()

    def succeeded(self, source: str, record: PackageRecord) -> None:
        packages = _plural(len(record.entries), "package")
        targets = _plural(record.target_count, "target")
        self.message(
            f"Processing {source}...done (port '{record.port_name}' provides {packages}, {targets})"
        )

    def failed(self, source: str, reason: str) -> None:
        self.message(f"Processing {source}...failed: {reason}")


__all__ = ["ProgressReporter"]
