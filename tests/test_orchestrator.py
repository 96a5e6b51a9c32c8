"""End-to-end tests for portmeta.orchestrator."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from portmeta.config import PortMetaConfig, ReportFormat
from portmeta.errors import SetupError
from portmeta.orchestrator import Orchestrator, working_directory
from portmeta.progress import ProgressReporter

ZLIB_FILES = {
    "CONTROL": "Source: zlib\nVersion: 1.2.11\n",
    "share/zlib/zlibConfig.cmake": "add_library(ZLIB::ZLIB IMPORTED)\n",
}


def _orchestrator(tmp_path: Path, stream: io.StringIO | None = None, **run) -> Orchestrator:
    config = PortMetaConfig(root=tmp_path)
    config.run.temp_dir = tmp_path / "work"
    for key, value in run.items():
        setattr(config.run, key, value)
    progress = ProgressReporter(stream or io.StringIO(), quiet=config.run.quiet)
    return Orchestrator(config, progress=progress)


def test_zlib_archive_end_to_end(port_builder, tmp_path: Path) -> None:
    archive = port_builder.zip("zlib_x64-windows", ZLIB_FILES)

    report = _orchestrator(tmp_path).run([str(archive)])

    assert report == (
        "{\n"
        '    "zlib": { "name": "zlib", "targets": ["ZLIB::ZLIB"], "portName": "zlib", '
        '"portDescription": "", "description": "The package zlib provides CMake targets:'
        "\\r\\n\\r\\n    find_package(zlib CONFIG REQUIRED)\\r\\n"
        '    target_link_libraries(main PRIVATE ZLIB::ZLIB)\\r\\n" }\n'
        "}\n"
    )


def test_manifest_only_package_emits_fallback_entry(port_builder, tmp_path: Path) -> None:
    root = port_builder.write("foo", {"CONTROL": "Package: foo\n"})

    report = _orchestrator(tmp_path).run([str(root)])

    parsed = json.loads(report)
    assert parsed == {
        "_foo": {
            "name": "_foo",
            "targets": [],
            "portName": "foo",
            "portDescription": "",
            "description": "",
        }
    }


def test_usage_only_package_reports_mentioned_packages(port_builder, tmp_path: Path) -> None:
    root = port_builder.write(
        "ssl-helpers",
        {
            "CONTROL": "Source: ssl-helpers\nDescription: Helpers\n",
            "share/ssl-helpers/usage": "find_package(Zlib REQUIRED)\nfind_package(OpenSSL)\n",
        },
    )

    report = _orchestrator(tmp_path).run([str(root)])
    parsed = json.loads(report)

    assert list(parsed) == ["OpenSSL", "Zlib"]
    assert parsed["Zlib"]["targets"] == []
    assert parsed["OpenSSL"]["description"] == "find_package(Zlib REQUIRED)\nfind_package(OpenSSL)\n"
    assert parsed["Zlib"]["portDescription"] == "Helpers"


def test_failed_packages_are_skipped_and_reported(port_builder, tmp_path: Path) -> None:
    good = port_builder.zip("zlib", ZLIB_FILES)
    no_manifest = port_builder.zip("broken", {"share/broken/usage": "hi\n"})
    missing = tmp_path / "missing.zip"
    stream = io.StringIO()

    orchestrator = _orchestrator(tmp_path, stream)
    outcomes = orchestrator.process([str(no_manifest), str(missing), str(good)])

    assert [outcome.ok for outcome in outcomes] == [False, False, True]
    lines = stream.getvalue().splitlines()
    assert lines[0].startswith(f"Processing {no_manifest}...failed: ")
    assert "CONTROL does not exist" in lines[0]
    assert lines[1].startswith(f"Processing {missing}...failed: ")
    assert lines[2] == (
        f"Processing {good}...done (port 'zlib' provides 1 package, 1 target)"
    )


def test_quiet_suppresses_progress(port_builder, tmp_path: Path) -> None:
    archive = port_builder.zip("zlib", ZLIB_FILES)
    stream = io.StringIO()

    _orchestrator(tmp_path, stream, quiet=True).run([str(archive)])

    assert stream.getvalue() == ""


def test_parallel_run_preserves_input_order(port_builder, tmp_path: Path) -> None:
    inputs = []
    for name in ["delta", "alpha", "charlie", "bravo"]:
        inputs.append(
            str(
                port_builder.zip(
                    name,
                    {
                        "CONTROL": f"Source: {name}\n",
                        f"share/{name}/{name}-config.cmake": f"add_library({name}::{name} IMPORTED)\n",
                    },
                )
            )
        )

    sequential = _orchestrator(tmp_path).run(inputs)
    parallel = _orchestrator(tmp_path, jobs=4).run(inputs)

    assert parallel == sequential
    assert list(json.loads(parallel)) == ["delta", "alpha", "charlie", "bravo"]


def test_same_stem_archives_do_not_collide(port_builder, tmp_path: Path) -> None:
    first = port_builder.zip("zlib", ZLIB_FILES)
    other_dir = tmp_path / "other"
    other_dir.mkdir()
    second = other_dir / "zlib.zip"
    second.write_bytes(
        port_builder.zip("fmt", {"CONTROL": "Source: fmt\n"}).read_bytes()
    )

    outcomes = _orchestrator(tmp_path).process([str(first), str(second)])

    assert [outcome.record.port_name for outcome in outcomes] == ["zlib", "fmt"]


def test_fragment_format(port_builder, tmp_path: Path) -> None:
    archive = port_builder.zip("zlib", ZLIB_FILES)
    orchestrator = _orchestrator(tmp_path)
    orchestrator.config.report.format = ReportFormat.FRAGMENT

    report = orchestrator.run([str(archive)])

    assert report.startswith('    "zlib": {')
    assert "portDescription" not in report


def test_working_directory_is_removed(tmp_path: Path) -> None:
    with working_directory(tmp_path) as scratch:
        (scratch / "file.txt").write_text("x", encoding="utf-8")
        assert scratch.exists()

    assert not scratch.exists()


def test_working_directory_removed_after_failure(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        with working_directory(tmp_path) as scratch:
            raise ValueError("boom")

    assert not scratch.exists()


def test_working_directory_creation_failure_is_fatal(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(SetupError):
        with working_directory(blocker / "nested"):
            pass


def _failing_rmtree(path, *args, **kwargs) -> None:
    raise OSError("device busy")


def test_working_directory_cleanup_failure_keeps_original_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("portmeta.orchestrator.shutil.rmtree", _failing_rmtree)

    with pytest.raises(ValueError, match="boom"):
        with working_directory(tmp_path):
            raise ValueError("boom")


def test_working_directory_cleanup_failure_is_fatal_after_success(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("portmeta.orchestrator.shutil.rmtree", _failing_rmtree)

    with pytest.raises(SetupError, match="Failed removing temp directory"):
        with working_directory(tmp_path):
            pass
