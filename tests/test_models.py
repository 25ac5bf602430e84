"""Tests for domain models."""

import math

from benchdiff.domain.models import (
    ComparisonReport,
    Gas,
    GasLimits,
    GateCount,
    Metric,
    MetricDelta,
    MetricRecord,
    ProfileResult,
    Status,
    UnitOutcome,
    UnitSection,
)


class TestMetricRecord:
    def test_zero_record(self) -> None:
        r = MetricRecord.zero("mint")
        assert r.name == "mint"
        assert (r.gate_count, r.da_gas, r.l2_gas) == (0, 0, 0)
        assert r.is_zero

    def test_value_by_metric(self) -> None:
        r = MetricRecord(name="mint", gate_count=1, da_gas=2, l2_gas=3)
        assert [r.value(m) for m in Metric] == [1, 2, 3]
        assert not r.is_zero


class TestMetricDelta:
    def test_flags(self) -> None:
        new = MetricDelta(baseline=0, current=5, absolute=5, percent=math.inf)
        assert new.is_new and new.is_infinite and not new.is_removed

        removed = MetricDelta(baseline=5, current=0, absolute=-5, percent=-1.0)
        assert removed.is_removed and not removed.is_new and not removed.is_infinite


class TestStatus:
    def test_every_status_has_indicator_and_label(self) -> None:
        for status in Status:
            assert status.indicator
            assert status.label

    def test_indicators_are_distinct(self) -> None:
        assert len({s.indicator for s in Status}) == len(Status)


class TestComparisonReport:
    def test_counts(self) -> None:
        report = ComparisonReport(
            threshold=0.05,
            sections=(
                UnitSection(name="a", outcome=UnitOutcome.COMPARED),
                UnitSection(name="b", outcome=UnitOutcome.EMPTY),
                UnitSection(name="c", outcome=UnitOutcome.INVALID, detail="bad"),
                UnitSection(name="d", outcome=UnitOutcome.ERROR, detail="boom"),
            ),
        )
        assert report.units_discovered == 4
        assert report.units_compared == 2
        assert report.units_skipped == 1
        assert report.units_failed == 1


class TestProfileResult:
    def test_to_record_sums_execution_and_teardown(self) -> None:
        result = ProfileResult(
            name="transfer",
            total_gate_count=1200,
            gate_counts=(GateCount("a", 1000), GateCount("b", 200)),
            gas=GasLimits(
                gas_limits=Gas(da_gas=100, l2_gas=300),
                teardown_gas_limits=Gas(da_gas=10, l2_gas=30),
            ),
        )
        rec = result.to_record()
        assert rec == MetricRecord(name="transfer", gate_count=1200, da_gas=110, l2_gas=330)
        assert result.gas.total == 440
