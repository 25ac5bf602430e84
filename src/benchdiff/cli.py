#!/usr/bin/env python3
"""
benchdiff CLI -- benchmark smart-contract calls and compare two runs.

Usage:
  benchdiff compare [--threshold PCT] [--output PATH] [--reports-dir DIR]
                    [--base-suffix S] [--latest-suffix S] [--strict-duplicates]
  benchdiff run [--contracts NAME ...] [--suffix S] [--output-dir DIR]

Both commands read the ``[benchmark]`` table of ``Nargo.toml`` in the
repository root (``$GITHUB_WORKSPACE`` inside Actions, else the working
directory).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections import Counter
from pathlib import Path

from benchdiff.compare import ComparisonOrchestrator
from benchdiff.compare.report import format_threshold
from benchdiff.config import ConfigError, load_config, parse_threshold
from benchdiff.console import configure, console
from benchdiff.discovery import ReportDirectoryDiscovery
from benchdiff.domain.models import ComparisonRun, Status, UnitOutcome
from benchdiff.github import set_output
from benchdiff.results import FileReportSink, JsonResultLoader, ReportWriteError
from benchdiff.runner.suite import BenchmarkRunner

logger = logging.getLogger("benchdiff")

_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _repo_root(args: argparse.Namespace) -> Path:
    if args.repo_root:
        return Path(args.repo_root).resolve()
    workspace = os.environ.get("GITHUB_WORKSPACE")
    return Path(workspace).resolve() if workspace else Path.cwd().resolve()


def _under(root: Path, value: str | None) -> Path | None:
    """Resolve an optional CLI path against the repository root."""
    if value is None:
        return None
    return root / value


def _setup_logging(args: argparse.Namespace) -> None:
    """Configure the ``benchdiff`` logger from --verbose / --quiet / --log-file."""
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    if args.log_file:
        log_path = Path(args.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(level)


def _unit_rows(run: ComparisonRun) -> list[list[str]]:
    rows: list[list[str]] = []
    for section in run.report.sections:
        counts = Counter(e.status for e in section.entries)
        if section.outcome is UnitOutcome.COMPARED:
            detail = ", ".join(
                f"{counts[s]} {s.label.lower()}"
                for s in (Status.REGRESSION, Status.IMPROVEMENT, Status.NEW, Status.REMOVED)
                if counts[s]
            )
            detail = detail or "no significant change"
        else:
            detail = section.detail or "no comparable functions"
        rows.append([section.name, section.outcome.value, str(len(section.entries)), detail])
    return rows


# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare baseline and latest result files and write the report."""
    root = _repo_root(args)
    config = load_config(root, _under(root, args.config))
    config = config.with_overrides(
        threshold=parse_threshold(args.threshold) if args.threshold is not None else None,
        report_path=_under(root, args.output),
        reports_dir=_under(root, args.reports_dir),
        base_suffix=args.base_suffix,
        latest_suffix=args.latest_suffix,
        strict_duplicates=True if args.strict_duplicates else None,
    )

    console.step(1, 3, "Discovering contracts...")
    units = ReportDirectoryDiscovery(config).discover()
    for unit in units:
        console.step_detail(unit.name)

    console.step(2, 3, f"Comparing with threshold {format_threshold(config.threshold)}...")
    orchestrator = ComparisonOrchestrator(
        JsonResultLoader(),
        FileReportSink(config.report_path),
        strict_duplicates=config.strict_duplicates,
    )
    run = orchestrator.run(units, config.threshold)

    console.step(3, 3, "Publishing report...")
    if run.report.sections:
        console.table(
            ["Contract", "Outcome", "Functions", "Changes"],
            _unit_rows(run),
            title="Contracts",
        )
    else:
        console.warning("No benchmark results found to compare.")
    console.kv(
        {
            "Threshold": format_threshold(config.threshold),
            "Compared": f"{run.success_count}/{run.report.units_discovered}",
            "Skipped": str(run.report.units_skipped),
            "Failed": str(run.report.units_failed),
        },
        title="Summary",
    )

    set_output("comparison_markdown", run.document)
    set_output("markdown_file_path", str(config.report_path))
    set_output("units_compared", str(run.success_count))

    console.success(
        f"Compared {run.success_count}/{run.report.units_discovered} contract(s); "
        f"report written to {config.report_path}"
    )
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run benchmark suites and save their result files."""
    root = _repo_root(args)
    config = load_config(root, _under(root, args.config))
    runner = BenchmarkRunner(config)
    selected = len(runner.select(args.contracts))
    console.info(f"Running benchmarks for {selected} contract(s)")
    written = runner.run(
        args.contracts,
        suffix=args.suffix,
        output_dir=_under(root, args.output_dir),
    )

    if written:
        console.table(
            ["Contract", "Report"],
            [[name, str(path)] for name, path in written.items()],
            title="Benchmarks",
        )
    if len(written) < selected:
        console.warning(f"{selected - len(written)} contract(s) failed; see the log for details")
        return 1
    console.success("All specified benchmarks completed.")
    return 0


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="benchdiff",
        description="benchdiff -- smart-contract benchmark comparison",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--repo-root", default=None, help="Repository root (default: cwd)")
    common.add_argument(
        "--config", default=None, help="Manifest path relative to the root (default: Nargo.toml)"
    )
    common.add_argument("--verbose", action="store_true", help="Enable debug logging")
    common.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    common.add_argument("--log-file", default=None, help="Write logs to this file")
    common.add_argument(
        "--console",
        choices=["auto", "rich", "plain"],
        default="auto",
        help="Terminal output style (default: auto)",
    )

    sub = parser.add_subparsers(dest="command")

    # benchdiff compare
    compare_p = sub.add_parser("compare", parents=[common], help="Compare two benchmark runs")
    compare_p.add_argument(
        "--threshold", default=None, help="Regression threshold in percent (e.g. 2.5)"
    )
    compare_p.add_argument("--output", default=None, help="Report file (default: manifest)")
    compare_p.add_argument("--reports-dir", default=None, help="Directory holding result files")
    compare_p.add_argument("--base-suffix", default=None, help="Baseline file suffix (_base)")
    compare_p.add_argument("--latest-suffix", default=None, help="Current file suffix (_latest)")
    compare_p.add_argument(
        "--strict-duplicates",
        action="store_true",
        help="Treat a function measured twice in one run as an error",
    )

    # benchdiff run
    run_p = sub.add_parser("run", parents=[common], help="Run benchmark suites")
    run_p.add_argument("-c", "--contracts", nargs="+", default=None, help="Contracts to run")
    run_p.add_argument("-s", "--suffix", default="", help="Suffix for report file names")
    run_p.add_argument("-o", "--output-dir", default=None, help="Directory for result files")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    configure(backend=args.console)
    _setup_logging(args)

    try:
        if args.command == "compare":
            return cmd_compare(args)
        return cmd_run(args)
    except (ConfigError, ReportWriteError) as exc:
        logger.debug("Fatal error", exc_info=True)
        console.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
