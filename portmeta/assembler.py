"""Reconcile manifest fields and scan results into one record per port."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from jinja2 import Environment, TemplateSyntaxError

from .config import ConfigError
from .models import PackageEntry, PackageManifest, PackageRecord, ScanResult
from .names import escape_string

# Rendered text is already in escaped form: ``\r\n`` below are literal backslash pairs.
DEFAULT_USAGE_TEMPLATE = (
    r"The package {{ port_name }} provides CMake targets:\r\n\r\n"
    r"    find_package({{ package_name }} CONFIG REQUIRED)\r\n"
    r"    target_link_libraries(main PRIVATE {{ targets | join(' ') }})\r\n"
)


class MetadataAssembler:
    """Builds :class:`PackageRecord` objects from validated, optional inputs.

    The assembler never raises for missing data: absent bindings fall back to
    the discovered name, absent targets to an empty list and an absent usage
    note to a note synthesized from the first entry.
    """

    def __init__(
        self,
        usage_template: str | None = None,
        *,
        dedupe_targets: bool = False,
    ) -> None:
        self._env = Environment(autoescape=False, keep_trailing_newline=True)
        try:
            self._template = self._env.from_string(usage_template or DEFAULT_USAGE_TEMPLATE)
        except TemplateSyntaxError as exc:
            raise ConfigError(f"Invalid usage template: {exc}") from exc
        self.dedupe_targets = dedupe_targets

    def assemble(self, manifest: PackageManifest, scan: ScanResult) -> PackageRecord:
        keys = sorted(set(scan.targets) | set(scan.config_files))
        display_names = _display_names(keys, scan.config_files)

        entries = tuple(
            PackageEntry(
                display_name=display_names[key],
                targets=self._sorted_targets(scan.targets.get(key, [])),
            )
            for key in keys
        )

        usage = scan.usage
        if not usage and entries:
            first = entries[0]
            usage = self.render_usage(manifest.name, first.display_name, first.targets)

        return PackageRecord(
            port_name=manifest.name,
            port_description=manifest.description or "",
            usage=usage,
            entries=entries,
        )

    def render_usage(self, port_name: str, package_name: str, targets: Sequence[str]) -> str:
        """Render the fallback usage note in its escaped form."""
        rendered = self._template.render(
            port_name=port_name,
            package_name=package_name,
            targets=list(targets),
        )
        return escape_string(rendered)

    def _sorted_targets(self, targets: Iterable[str]) -> tuple[str, ...]:
        if self.dedupe_targets:
            return tuple(sorted(set(targets)))
        return tuple(sorted(targets))


def _display_names(keys: List[str], bindings: Dict[str, str]) -> Dict[str, str]:
    """Pick a unique display name per key, preferring the config-file binding."""
    key_set = set(keys)
    used: set[str] = set()
    names: Dict[str, str] = {}
    for key in keys:
        display = bindings.get(key, key)
        if display != key and (display in key_set or display in used):
            display = key
        names[key] = display
        used.add(display)
    return names


__all__ = ["DEFAULT_USAGE_TEMPLATE", "MetadataAssembler"]
