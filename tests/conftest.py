"""Shared pytest fixtures for benchdiff tests.

Provides factory fixtures for domain models, a writer for benchmark result
files, and a temporary repository laid out like a real project.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from benchdiff.domain.models import BASELINE, CURRENT, MetricRecord, ResultSet

_RecordFactory = Any
_ResultSetFactory = Any
_PairFactory = Any
_ManifestWriter = Any

# ---------------------------------------------------------------------------
# Domain factories
# ---------------------------------------------------------------------------


def record(name: str, gates: int = 0, da: int = 0, l2: int = 0) -> MetricRecord:
    """Shorthand MetricRecord constructor used across test modules."""
    return MetricRecord(name=name, gate_count=gates, da_gas=da, l2_gas=l2)


@pytest.fixture()
def make_record() -> _RecordFactory:
    """Factory for MetricRecord with all metrics defaulting to zero."""
    return record


@pytest.fixture()
def make_result_set() -> _ResultSetFactory:
    """Factory for ResultSet; label defaults to baseline."""

    def _factory(
        *records: MetricRecord, unit: str = "token", label: str = BASELINE
    ) -> ResultSet:
        return ResultSet(unit=unit, label=label, records=tuple(records))

    return _factory


@pytest.fixture()
def baseline_and_current(make_result_set: _ResultSetFactory) -> _PairFactory:
    """Build a (baseline, current) pair from two record lists."""

    def _factory(
        base: list[MetricRecord], cur: list[MetricRecord], unit: str = "token"
    ) -> tuple[ResultSet, ResultSet]:
        return (
            make_result_set(*base, unit=unit, label=BASELINE),
            make_result_set(*cur, unit=unit, label=CURRENT),
        )

    return _factory


# ---------------------------------------------------------------------------
# Result files
# ---------------------------------------------------------------------------


def result_entry(
    name: str,
    gates: int = 0,
    da: int = 0,
    l2: int = 0,
    *,
    teardown_da: int = 0,
    teardown_l2: int = 0,
) -> dict[str, Any]:
    """One element of a result file's ``results`` list."""
    return {
        "name": name,
        "totalGateCount": gates,
        "gateCounts": [{"circuitName": f"{name}_circuit", "gateCount": gates}],
        "gas": {
            "gasLimits": {"daGas": da, "l2Gas": l2},
            "teardownGasLimits": {"daGas": teardown_da, "l2Gas": teardown_l2},
        },
    }


def write_results(path: Path, entries: list[dict[str, Any]]) -> Path:
    """Write a result file holding *entries* and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    document = {
        "summary": {e["name"]: e["totalGateCount"] for e in entries},
        "results": entries,
        "gasSummary": {e["name"]: 0 for e in entries},
    }
    path.write_text(json.dumps(document, indent=2))
    return path


@pytest.fixture()
def tmp_repo(tmp_path: Path) -> Path:
    """A repository root with an empty ``benchmarks/`` reports directory."""
    (tmp_path / "benchmarks").mkdir()
    return tmp_path


@pytest.fixture()
def write_manifest(tmp_repo: Path) -> _ManifestWriter:
    """Write ``Nargo.toml`` into the temporary repository."""

    def _write(content: str) -> Path:
        manifest = tmp_repo / "Nargo.toml"
        manifest.write_text(content)
        return manifest

    return _write
