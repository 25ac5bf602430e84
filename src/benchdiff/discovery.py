"""Unit discovery -- pair up baseline and current result files.

Units are the contracts named in the manifest, in manifest order.  When the
manifest names none, the reports directory is scanned for current-run files
instead.  A unit is only discovered when both of its files exist.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from benchdiff.config import RESULT_FILE_SUFFIX
from benchdiff.domain.models import DiscoveredUnit

if TYPE_CHECKING:
    from benchdiff.config import BenchmarkConfig

logger = logging.getLogger("benchdiff.discovery")


class ReportDirectoryDiscovery:
    """UnitDiscovery over ``<reports_dir>/<unit><suffix>.benchmark.json`` files."""

    def __init__(self, config: BenchmarkConfig) -> None:
        self._config = config

    def candidate_names(self) -> list[str]:
        """Unit names to look for, before checking which files exist."""
        if self._config.contracts:
            return list(self._config.contracts)

        reports_dir = self._config.reports_dir
        if not reports_dir.is_dir():
            logger.warning("Reports directory %s does not exist", reports_dir)
            return []

        pattern = f"*{self._config.latest_suffix}{RESULT_FILE_SUFFIX}"
        trim = len(self._config.latest_suffix) + len(RESULT_FILE_SUFFIX)
        return sorted(p.name[:-trim] for p in reports_dir.glob(pattern) if p.is_file())

    def discover(self) -> list[DiscoveredUnit]:
        """Return units that have both a baseline and a current result file."""
        units: list[DiscoveredUnit] = []
        for name in self.candidate_names():
            baseline = self._config.result_path(name, self._config.base_suffix)
            current = self._config.result_path(name, self._config.latest_suffix)
            if baseline.is_file() and current.is_file():
                units.append(DiscoveredUnit(name=name, baseline_path=baseline, current_path=current))
                logger.info(" -> Found benchmark result pair for: %s", name)
            else:
                logger.info(
                    "Skipping %s: missing base (%s) or latest (%s) result file",
                    name,
                    baseline.is_file(),
                    current.is_file(),
                )

        logger.info("Found %d contract(s) with benchmark result pairs", len(units))
        return units
