"""Benchmark suites -- load user definitions and run them per contract.

A suite file is plain Python named in the manifest.  It exposes either a
``Benchmark`` class (instantiated with no arguments) or a module-level
``benchmark`` object with::

    setup() -> dict            # optional
    get_targets(context) -> list[CallTarget]
    teardown(context) -> None  # optional
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from typing import TYPE_CHECKING, Any

from benchdiff.config import RESULT_FILE_SUFFIX, ConfigError
from benchdiff.github import log_group
from benchdiff.results import write_profile_report
from benchdiff.runner.profiler import Profiler

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from benchdiff.config import BenchmarkConfig
    from benchdiff.domain.models import ProfileResult
    from benchdiff.domain.protocols import BenchmarkSuite

logger = logging.getLogger("benchdiff.runner")


class SuiteLoadError(Exception):
    """Raised when a benchmark file cannot be turned into a suite."""


def load_suite(path: Path) -> BenchmarkSuite:
    """Import the benchmark file at *path* and return its suite object."""
    if not path.is_file():
        msg = f"Benchmark file not found: {path}"
        raise SuiteLoadError(msg)

    spec = importlib.util.spec_from_file_location(f"benchdiff_suite_{path.stem}", path)
    if spec is None or spec.loader is None:
        msg = f"Cannot import benchmark file: {path}"
        raise SuiteLoadError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:  # noqa: BLE001
        sys.modules.pop(spec.name, None)
        msg = f"Importing {path} failed: {exc}"
        raise SuiteLoadError(msg) from exc

    suite_cls = getattr(module, "Benchmark", None)
    suite: Any = suite_cls() if isinstance(suite_cls, type) else getattr(module, "benchmark", None)
    if suite is None or not callable(getattr(suite, "get_targets", None)):
        msg = f"{path} does not define a Benchmark class or benchmark object with get_targets()"
        raise SuiteLoadError(msg)
    return suite


def run_suite(name: str, suite: BenchmarkSuite, profiler: Profiler) -> list[ProfileResult]:
    """Set up *suite*, profile its targets and tear it down again."""
    context: dict[str, Any] = {}
    setup = getattr(suite, "setup", None)
    if callable(setup):
        logger.info("Running setup for %s...", name)
        context = setup() or {}

    try:
        logger.info("Getting methods to benchmark for %s...", name)
        targets = list(suite.get_targets(context))
        if not targets:
            logger.warning("No benchmark methods returned for %s", name)
            return []
        logger.info("Profiling %d method(s) for %s...", len(targets), name)
        return profiler.profile(targets)
    finally:
        teardown = getattr(suite, "teardown", None)
        if callable(teardown):
            logger.info("Running teardown for %s...", name)
            teardown(context)


class BenchmarkRunner:
    """Runs the suites named in the manifest and writes one result file each."""

    def __init__(self, config: BenchmarkConfig, profiler: Profiler | None = None) -> None:
        self._config = config
        self._profiler = profiler or Profiler()

    def select(self, names: Sequence[str] | None) -> list[str]:
        """Resolve which contracts to run.  Raises ConfigError if none match."""
        available = list(self._config.contracts)
        if not available:
            msg = "No contracts found in the [benchmark] section of the manifest"
            raise ConfigError(msg)
        if not names:
            return available

        unknown = [n for n in names if n not in self._config.contracts]
        for n in unknown:
            logger.warning("Contract %s is not listed under [benchmark], ignoring", n)
        selected = [n for n in available if n in names]
        if not selected:
            msg = f"None of the specified contracts found in [benchmark]: {', '.join(names)}"
            raise ConfigError(msg)
        return selected

    def output_path(self, name: str, suffix: str, output_dir: Path) -> Path:
        return output_dir / f"{name}{suffix}{RESULT_FILE_SUFFIX}"

    def run(
        self,
        names: Sequence[str] | None = None,
        *,
        suffix: str = "",
        output_dir: Path | None = None,
    ) -> dict[str, Path]:
        """Run the selected suites.

        A contract whose suite fails to load or run is logged and skipped;
        the others still run.

        Returns:
            Mapping of contract name to the result file written for it.
        """
        target_dir = output_dir or self._config.reports_dir
        written: dict[str, Path] = {}
        for name in self.select(names):
            suite_path = self._config.contracts[name]
            out = self.output_path(name, suffix, target_dir)
            with log_group(f"Benchmarking Contract: {name}"):
                logger.info("Benchmark file: %s", suite_path)
                logger.info("Output report: %s", out)
                try:
                    suite = load_suite(suite_path)
                    results = run_suite(name, suite, self._profiler)
                except Exception as exc:  # noqa: BLE001
                    logger.error("Failed to run benchmark for %s: %s", name, exc)
                    logger.debug("Benchmark failure for %s", name, exc_info=True)
                    continue
                write_profile_report(results, out)
                written[name] = out
        return written
