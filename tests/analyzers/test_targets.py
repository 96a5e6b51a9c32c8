"""Tests for the add_library target scanner."""

from __future__ import annotations

from pathlib import Path

from portmeta.analyzers.targets import TargetScanner, extract_targets
from portmeta.analyzers.utils import MetadataLayout
from portmeta.errors import FileReadError


def test_extract_targets_captures_first_argument_in_order() -> None:
    text = (
        "add_library(ZLIB::ZLIB UNKNOWN IMPORTED)\n"
        "add_library( zlibstatic STATIC IMPORTED)\n"
        "add_library(ZLIB::ZLIB)\n"
        "target_add_library(ignored)\n"
    )

    assert extract_targets(text) == ["ZLIB::ZLIB", "zlibstatic", "ZLIB::ZLIB"]


def test_scan_groups_targets_by_declaring_directory(port_builder) -> None:
    root = port_builder.write(
        "pkg",
        {
            "share/Foo/FooTargets.cmake": "add_library(Foo::core IMPORTED)\nadd_library(Foo::extra IMPORTED)\n",
            "share/Foo/FooTargets-release.cmake": "add_library(Foo::alpha IMPORTED)\n",
            "share/bar/bar-targets.cmake": "add_library(bar IMPORTED)\n",
            "share/empty/emptyConfig.cmake": "set(EMPTY_FOUND TRUE)\n",
            "lib/cmake/other/otherConfig.cmake": "add_library(other IMPORTED)\n",
            "share/Foo/notes.txt": "add_library(not_a_script)\n",
        },
    )
    tree = port_builder.scan(root)

    targets = TargetScanner().scan(root, tree.files)

    assert set(targets) == {"Foo", "bar"}
    # Files are walked in sorted path order: FooTargets-release before FooTargets.
    assert targets["Foo"] == ["Foo::alpha", "Foo::core", "Foo::extra"]
    assert targets["bar"] == ["bar"]


def test_scan_matches_shared_marker_case_insensitively(port_builder) -> None:
    root = port_builder.write("pkg", {"SHARE/Qux/qux.cmake": "add_library(Qux::Qux IMPORTED)\n"})

    targets = TargetScanner().scan(root, port_builder.scan(root).files)

    assert targets == {"Qux": ["Qux::Qux"]}


def test_scan_skips_unreadable_files(tmp_path: Path) -> None:
    def _reader(path: Path) -> str:
        if path.name == "broken.cmake":
            raise FileReadError(path, "permission")
        return "add_library(ok IMPORTED)\n"

    scanner = TargetScanner(MetadataLayout(), reader=_reader)
    targets = scanner.scan(tmp_path, ["share/a/broken.cmake", "share/b/fine.cmake"])

    assert targets == {"b": ["ok"]}
