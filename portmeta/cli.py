"""CLI entrypoints for portmeta commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, TextIO

from .config import CONFIG_FILENAME, ConfigError, PortMetaConfig, ReportFormat, load_config
from .errors import SetupError
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .progress import ProgressReporter


def _add_verbose_option(parser: argparse.ArgumentParser, default: object = False) -> None:
    # Subcommands use SUPPRESS so a flag given before the command is not reset.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Log debug diagnostics to stderr.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portmeta",
        description="Analyze packaged ports and report the CMake packages and targets they provide.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze one or more zipped packages and output CMake usage information.",
    )
    _add_verbose_option(analyze_parser, default=argparse.SUPPRESS)
    analyze_parser.add_argument(
        "packages",
        nargs="*",
        help="Package archives or unpacked package directories.",
    )
    analyze_parser.add_argument(
        "--quiet",
        action="store_true",
        default=None,
        help="Suppress per-package status messages.",
    )
    analyze_parser.add_argument(
        "--infile",
        help="Read packages from file instead of the command line (one package per line).",
    )
    analyze_parser.add_argument(
        "--outfile",
        help="Write the report to a file instead of stdout.",
    )
    analyze_parser.add_argument(
        "--format",
        choices=ReportFormat.CHOICES,
        default=None,
        help="Report layout: 'object' wraps entries in braces and includes port descriptions.",
    )
    analyze_parser.add_argument(
        "--dedupe-targets",
        action="store_true",
        default=None,
        help="Drop repeated target names within a package.",
    )
    analyze_parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Number of packages to analyze concurrently.",
    )
    analyze_parser.add_argument(
        "--config",
        default=None,
        help=f"Path to a {CONFIG_FILENAME} file (defaults to the current directory).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for portmeta commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    if args.command != "analyze":  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    if not args.infile and not args.packages:
        parser.exit(1, "No packages given. Pass package paths or --infile.\n")

    try:
        config = _load_effective_config(args)
        progress = ProgressReporter(quiet=config.run.quiet)
        orchestrator = Orchestrator(config, progress=progress)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    try:
        # An input list with no entries still yields an (empty) report.
        packages = _collect_packages(args, progress)
        with _OutputTarget(args.outfile, progress) as output:
            output.write(orchestrator.run(packages))
    except SetupError as exc:
        parser.exit(1, f"portmeta analyze failed: {exc}\n")
    logger.debug("Analysis finished")


def _load_effective_config(args: argparse.Namespace) -> PortMetaConfig:
    config_path = Path(args.config) if args.config else Path.cwd()
    config = load_config(config_path)
    if args.quiet is not None:
        config.run.quiet = args.quiet
    if args.format is not None:
        config.report.format = args.format
    if args.dedupe_targets is not None:
        config.report.dedupe_targets = args.dedupe_targets
    if args.jobs is not None:
        if args.jobs < 1:
            raise ConfigError("--jobs must be at least 1")
        config.run.jobs = args.jobs
    return config


def _collect_packages(args: argparse.Namespace, progress: ProgressReporter) -> List[str]:
    if not args.infile:
        return list(args.packages)

    infile = Path(args.infile).expanduser()
    try:
        text = infile.read_text(encoding="utf-8")
    except OSError as exc:
        raise SetupError(f"Failed opening input file '{infile}': {exc}") from exc
    progress.message(f"Input will be read from '{infile.resolve()}'.")
    return [line.strip() for line in text.splitlines() if line.strip()]


class _OutputTarget:
    """Context manager yielding stdout or an opened output file."""

    def __init__(self, path: str | None, progress: ProgressReporter) -> None:
        self._path = Path(path).expanduser() if path else None
        self._progress = progress
        self._handle: TextIO | None = None

    def __enter__(self) -> TextIO:
        if self._path is None:
            return sys.stdout
        try:
            self._handle = self._path.open("w", encoding="utf-8")
        except OSError as exc:
            raise SetupError(f"Failed opening output file '{self._path}': {exc}") from exc
        self._progress.message(f"Output will be written to '{self._path.resolve()}'.")
        return self._handle

    def __exit__(self, *exc_info: object) -> None:
        if self._handle is not None:
            self._handle.close()


if __name__ == "__main__":
    main(sys.argv[1:])
