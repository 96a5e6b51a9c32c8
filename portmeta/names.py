"""String helpers for comparing and embedding package names."""

from __future__ import annotations

from typing import Optional

_ESCAPES = (
    ("\r", "\\r"),
    ("\n", "\\n"),
    ('"', '\\"'),
)


def escape_string(value: str) -> str:
    """Escape carriage returns, newlines and double quotes for the report."""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def equals_ignore_case(left: str, right: str) -> bool:
    return left.lower() == right.lower()


def contains_ignore_case(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def strip_suffix(value: str, suffix: str) -> Optional[str]:
    """Return ``value`` without ``suffix``, or None when it does not end with it."""
    if not suffix or not value.endswith(suffix):
        return None
    return value[: -len(suffix)]


__all__ = ["contains_ignore_case", "equals_ignore_case", "escape_string", "strip_suffix"]
