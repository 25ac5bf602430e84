"""Core data types for benchdiff.

All types are frozen dataclasses with complete type annotations.
This module has ZERO imports from outside the Python standard library.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

BASELINE = "baseline"
CURRENT = "current"


class Metric(Enum):
    """A measured cost dimension of one function call."""

    GATES = "gates"
    DA_GAS = "da_gas"
    L2_GAS = "l2_gas"

    @property
    def label(self) -> str:
        """Column heading used in rendered reports."""
        return _METRIC_LABELS[self]


_METRIC_LABELS = {
    Metric.GATES: "Gates",
    Metric.DA_GAS: "DA Gas",
    Metric.L2_GAS: "L2 Gas",
}


class Status(Enum):
    """Classification of one function across baseline and current runs."""

    NEW = "new"
    REMOVED = "removed"
    REGRESSION = "regression"
    IMPROVEMENT = "improvement"
    UNCHANGED = "unchanged"

    @property
    def indicator(self) -> str:
        """Emoji shown in the status column."""
        return _STATUS_INDICATORS[self]

    @property
    def label(self) -> str:
        """Human-readable legend text."""
        return _STATUS_LABELS[self]


_STATUS_INDICATORS = {
    Status.IMPROVEMENT: "\U0001f7e2",
    Status.REGRESSION: "\U0001f534",
    Status.UNCHANGED: "\u26aa",
    Status.NEW: "\U0001f195",
    Status.REMOVED: "\U0001f6ae",
}

_STATUS_LABELS = {
    Status.IMPROVEMENT: "Improvement",
    Status.REGRESSION: "Regression",
    Status.UNCHANGED: "No significant change",
    Status.NEW: "New",
    Status.REMOVED: "Removed",
}


class UnitOutcome(Enum):
    """How a single benchmarked unit fared during comparison."""

    COMPARED = "compared"
    EMPTY = "empty"
    INVALID = "invalid"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Measurements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetricRecord:
    """Measured cost of one benchmarked function in one run.

    A missing metric is zero, never absent.  ``da_gas`` and ``l2_gas`` are
    already the sum of their execution and teardown components.
    """

    name: str
    gate_count: int = 0
    da_gas: int = 0
    l2_gas: int = 0

    @classmethod
    def zero(cls, name: str) -> MetricRecord:
        """Return an all-zero record standing in for a missing side."""
        return cls(name=name)

    def value(self, metric: Metric) -> int:
        """Return the value of *metric*."""
        if metric is Metric.GATES:
            return self.gate_count
        if metric is Metric.DA_GAS:
            return self.da_gas
        return self.l2_gas

    @property
    def is_zero(self) -> bool:
        """True when every metric is zero."""
        return all(self.value(m) == 0 for m in Metric)


@dataclass(frozen=True)
class ResultSet:
    """Ordered records for one unit in one run (``baseline`` or ``current``).

    Names are not guaranteed to be unique; the reconciler resolves that.
    """

    unit: str
    label: str
    records: tuple[MetricRecord, ...] = ()


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetricDelta:
    """Difference of one metric between baseline and current.

    ``percent`` is a fraction (0.1 == 10%).  It is ``math.inf`` when the
    baseline is zero and the current value is not, and exactly ``0.0`` when
    both are zero.
    """

    baseline: int
    current: int
    absolute: int
    percent: float

    @property
    def is_infinite(self) -> bool:
        """True for the infinite-increase sentinel."""
        return math.isinf(self.percent)

    @property
    def is_new(self) -> bool:
        """True when the metric went from zero to a positive value."""
        return self.baseline == 0 and self.current > 0

    @property
    def is_removed(self) -> bool:
        """True when the metric went from a positive value to zero."""
        return self.baseline > 0 and self.current == 0


@dataclass(frozen=True)
class ComparisonEntry:
    """One function reconciled across both runs."""

    name: str
    baseline: MetricRecord
    current: MetricRecord
    deltas: Mapping[Metric, MetricDelta] = field(
        default_factory=lambda: dict[Metric, MetricDelta]()
    )
    status: Status | None = None

    def delta(self, metric: Metric) -> MetricDelta:
        """Return the computed delta for *metric*.

        Raises KeyError if deltas have not been computed yet.
        """
        return self.deltas[metric]


@dataclass(frozen=True)
class UnitSection:
    """Comparison outcome for one benchmarked unit."""

    name: str
    outcome: UnitOutcome
    entries: tuple[ComparisonEntry, ...] = ()
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        """True when the unit was compared, even if it had no functions."""
        return self.outcome in (UnitOutcome.COMPARED, UnitOutcome.EMPTY)


@dataclass(frozen=True)
class ComparisonReport:
    """All unit sections of one comparison run plus run-level facts."""

    threshold: float
    sections: tuple[UnitSection, ...] = ()

    @property
    def units_discovered(self) -> int:
        return len(self.sections)

    @property
    def units_compared(self) -> int:
        return sum(1 for s in self.sections if s.succeeded)

    @property
    def units_skipped(self) -> int:
        """Units whose result files were not well-formed metric collections."""
        return sum(1 for s in self.sections if s.outcome is UnitOutcome.INVALID)

    @property
    def units_failed(self) -> int:
        return sum(1 for s in self.sections if s.outcome is UnitOutcome.ERROR)


@dataclass(frozen=True)
class ComparisonRun:
    """Result of a full comparison: the report and its rendered document."""

    report: ComparisonReport
    document: str

    @property
    def success_count(self) -> int:
        return self.report.units_compared


@dataclass(frozen=True)
class DiscoveredUnit:
    """A unit with both a baseline and a current result file."""

    name: str
    baseline_path: Path
    current_path: Path


# ---------------------------------------------------------------------------
# Measurement collaborator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Gas:
    """Gas amounts in both dimensions."""

    da_gas: int = 0
    l2_gas: int = 0

    @property
    def total(self) -> int:
        return self.da_gas + self.l2_gas


@dataclass(frozen=True)
class GasLimits:
    """Execution and teardown gas for one call."""

    gas_limits: Gas = field(default_factory=Gas)
    teardown_gas_limits: Gas = field(default_factory=Gas)

    @property
    def da_gas(self) -> int:
        return self.gas_limits.da_gas + self.teardown_gas_limits.da_gas

    @property
    def l2_gas(self) -> int:
        return self.gas_limits.l2_gas + self.teardown_gas_limits.l2_gas

    @property
    def total(self) -> int:
        return self.gas_limits.total + self.teardown_gas_limits.total


@dataclass(frozen=True)
class GateCount:
    """Gate count of one circuit / execution step."""

    circuit_name: str
    gate_count: int


@dataclass(frozen=True)
class ProfileResult:
    """Full measurement of one function, as persisted in result files."""

    name: str
    total_gate_count: int
    gate_counts: tuple[GateCount, ...] = ()
    gas: GasLimits = field(default_factory=GasLimits)

    def to_record(self) -> MetricRecord:
        """Collapse into the three metrics used for comparison."""
        return MetricRecord(
            name=self.name,
            gate_count=self.total_gate_count,
            da_gas=self.gas.da_gas,
            l2_gas=self.gas.l2_gas,
        )
