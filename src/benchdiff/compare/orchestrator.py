"""Comparison orchestrator -- drive load, reconcile, classify and render per unit.

Units are processed one at a time in discovery order.  A unit that cannot be
loaded becomes an error (or "invalid input") section and the run moves on;
only delivering the final document is allowed to fail the whole run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from benchdiff.compare.classifier import classify_entry, validate_threshold
from benchdiff.compare.reconciler import DuplicateFunctionError, reconcile
from benchdiff.compare.report import assemble, format_threshold
from benchdiff.domain.models import (
    BASELINE,
    CURRENT,
    ComparisonReport,
    ComparisonRun,
    UnitOutcome,
    UnitSection,
)
from benchdiff.github import log_group
from benchdiff.results import InvalidResultSetError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from benchdiff.domain.models import DiscoveredUnit
    from benchdiff.domain.protocols import ReportSink, ResultLoader

logger = logging.getLogger("benchdiff.compare")


class ComparisonOrchestrator:
    """Compares every discovered unit and delivers one document.

    Constructor-injected ResultLoader and ReportSink handle all I/O.
    """

    def __init__(
        self,
        loader: ResultLoader,
        sink: ReportSink,
        *,
        strict_duplicates: bool = False,
    ) -> None:
        self._loader = loader
        self._sink = sink
        self._strict = strict_duplicates

    def compare_unit(self, unit: DiscoveredUnit, threshold: float) -> UnitSection:
        """Compare one unit, converting any load failure into a section."""
        logger.info("Base file: %s", unit.baseline_path)
        logger.info("PR file: %s", unit.current_path)
        try:
            baseline = self._loader.load(unit.baseline_path, unit=unit.name, label=BASELINE)
            current = self._loader.load(unit.current_path, unit=unit.name, label=CURRENT)
        except InvalidResultSetError as exc:
            logger.warning("Skipping %s: invalid benchmark JSON structure (%s)", unit.name, exc)
            return UnitSection(name=unit.name, outcome=UnitOutcome.INVALID, detail=str(exc))
        except (OSError, ValueError) as exc:
            logger.error("Error processing benchmark files for %s: %s", unit.name, exc)
            logger.debug("Load failure for %s", unit.name, exc_info=True)
            return UnitSection(name=unit.name, outcome=UnitOutcome.ERROR, detail=str(exc))

        logger.info(
            "Comparing %d base function(s) with %d PR function(s) for %s",
            len(baseline.records),
            len(current.records),
            unit.name,
        )
        try:
            entries = reconcile(baseline, current, strict=self._strict)
        except DuplicateFunctionError as exc:
            logger.error("Cannot compare %s: %s", unit.name, exc)
            return UnitSection(name=unit.name, outcome=UnitOutcome.ERROR, detail=str(exc))

        if not entries:
            logger.warning("No valid benchmark functions found for %s", unit.name)
            return UnitSection(name=unit.name, outcome=UnitOutcome.EMPTY)

        classified = sorted(
            (classify_entry(e, threshold) for e in entries),
            key=lambda e: e.name,
        )
        return UnitSection(
            name=unit.name,
            outcome=UnitOutcome.COMPARED,
            entries=tuple(classified),
        )

    def build_report(
        self, units: Sequence[DiscoveredUnit], threshold: float
    ) -> ComparisonReport:
        """Compare every unit in order without rendering or writing anything."""
        sections: list[UnitSection] = []
        for unit in units:
            with log_group(f"Comparing Contract: {unit.name}"):
                sections.append(self.compare_unit(unit, threshold))
        return ComparisonReport(threshold=threshold, sections=tuple(sections))

    def run(self, units: Sequence[DiscoveredUnit], threshold: float) -> ComparisonRun:
        """Compare *units*, render the document and deliver it.

        Raises ValueError for a negative or NaN threshold and ReportWriteError
        when the document cannot be written.
        """
        validate_threshold(threshold)

        logger.info("Starting benchmark comparison of %d contract(s)", len(units))
        logger.info("Threshold for significant change: %s", format_threshold(threshold))

        report = self.build_report(units, threshold)
        if not units:
            logger.warning("No contracts found with both base and latest benchmark files")
        elif report.units_compared == 0:
            logger.warning("Found contract pairs but failed to process or validate any")

        document = assemble(report.sections, threshold)
        logger.info(
            "Writing comparison report for %d contract(s)", report.units_compared
        )
        self._sink.write(document)
        return ComparisonRun(report=report, document=document)
