"""Tests for results.py -- result file parsing and writing."""

import json
from pathlib import Path

import pytest
from conftest import result_entry, write_results

from benchdiff.domain.models import CURRENT, Gas, GasLimits, GateCount, MetricRecord, ProfileResult
from benchdiff.results import (
    FileReportSink,
    InvalidResultSetError,
    JsonResultLoader,
    ReportWriteError,
    build_profile_report,
    parse_profile_result,
    parse_result_set,
    write_profile_report,
)


class TestParseResultSet:
    def test_gas_includes_teardown(self) -> None:
        data = {"results": [result_entry("mint", 1000, 100, 200, teardown_da=5, teardown_l2=7)]}
        rs = parse_result_set(data, unit="token", label=CURRENT)
        assert rs.unit == "token"
        assert rs.label == CURRENT
        assert rs.records == (MetricRecord("mint", 1000, 105, 207),)

    def test_missing_metrics_are_zero(self) -> None:
        rs = parse_result_set({"results": [{"name": "bare"}]}, unit="t", label=CURRENT)
        assert rs.records == (MetricRecord.zero("bare"),)

    def test_keeps_order_and_duplicates(self) -> None:
        data = {"results": [result_entry("b", 1), result_entry("a", 2), result_entry("b", 3)]}
        rs = parse_result_set(data, unit="t", label=CURRENT)
        assert [r.name for r in rs.records] == ["b", "a", "b"]

    def test_empty_results_list(self) -> None:
        assert parse_result_set({"results": []}, unit="t", label=CURRENT).records == ()

    @pytest.mark.parametrize(
        "data",
        [
            [],
            "results",
            {},
            {"results": {"mint": 1}},
            {"results": None},
        ],
    )
    def test_wrong_shape_is_invalid(self, data: object) -> None:
        with pytest.raises(InvalidResultSetError):
            parse_result_set(data, unit="t", label=CURRENT)

    @pytest.mark.parametrize(
        "raw",
        [
            "mint",
            {"name": 7},
            {"name": "m", "totalGateCount": "lots"},
            {"name": "m", "totalGateCount": True},
            {"name": "m", "totalGateCount": -1},
            {"name": "m", "totalGateCount": 1.5},
            {"name": "m", "gas": "cheap"},
            {"name": "m", "gas": {"gasLimits": {"daGas": "x"}}},
            {"name": "m", "gateCounts": 5},
            {"name": "m", "gateCounts": True},
            {"name": "m", "gateCounts": [3]},
            {"name": "mint\ud800"},
        ],
    )
    def test_bad_entries_are_invalid(self, raw: object) -> None:
        with pytest.raises(InvalidResultSetError):
            parse_profile_result(raw)

    def test_integral_float_accepted(self) -> None:
        assert parse_profile_result({"name": "m", "totalGateCount": 12.0}).total_gate_count == 12


class TestJsonResultLoader:
    def test_loads_file(self, tmp_path: Path) -> None:
        path = write_results(tmp_path / "a.benchmark.json", [result_entry("mint", 10, 1, 2)])
        rs = JsonResultLoader().load(path, unit="token", label=CURRENT)
        assert rs.records == (MetricRecord("mint", 10, 1, 2),)

    def test_malformed_json_raises_value_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(ValueError):
            JsonResultLoader().load(path, unit="t", label=CURRENT)

    def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            JsonResultLoader().load(tmp_path / "nope.json", unit="t", label=CURRENT)


class TestFileReportSink:
    def test_writes_and_creates_parents(self, tmp_path: Path) -> None:
        sink = FileReportSink(tmp_path / "deep" / "diff.md")
        sink.write("# hi\n")
        assert sink.path.read_text(encoding="utf-8") == "# hi\n"

    def test_unencodable_document_becomes_report_write_error(self, tmp_path: Path) -> None:
        with pytest.raises(ReportWriteError):
            FileReportSink(tmp_path / "diff.md").write("mint\ud800")

    def test_failure_becomes_report_write_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(ReportWriteError, match="Failed to write"):
            FileReportSink(blocker / "diff.md").write("x")


class TestProfileReport:
    def _result(self) -> ProfileResult:
        return ProfileResult(
            name="transfer",
            total_gate_count=1500,
            gate_counts=(GateCount("transfer", 1200), GateCount("kernel", 300)),
            gas=GasLimits(Gas(10, 20), Gas(1, 2)),
        )

    def test_summaries(self) -> None:
        report = build_profile_report([self._result()])
        assert report["summary"] == {"transfer": 1500}
        assert report["gasSummary"] == {"transfer": 33}

    def test_written_report_loads_back(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "token_latest.benchmark.json"
        write_profile_report([self._result()], path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["results"][0]["gateCounts"][1] == {"circuitName": "kernel", "gateCount": 300}
        rs = JsonResultLoader().load(path, unit="token", label=CURRENT)
        assert rs.records == (MetricRecord("transfer", 1500, 11, 22),)

    def test_empty_report(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.benchmark.json"
        write_profile_report([], path)
        assert json.loads(path.read_text()) == {"summary": {}, "results": [], "gasSummary": {}}
