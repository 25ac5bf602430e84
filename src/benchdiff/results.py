"""Result file I/O -- benchmark JSON reports and the comparison document.

Result files hold three top-level fields: ``summary`` (name -> total gates),
``results`` (detailed per-function records) and ``gasSummary`` (name ->
total gas).  Only ``results`` is read back; the summaries exist for humans
and other tools.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from benchdiff.domain.models import (
    Gas,
    GasLimits,
    GateCount,
    MetricRecord,
    ProfileResult,
    ResultSet,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

logger = logging.getLogger("benchdiff.results")


class InvalidResultSetError(ValueError):
    """Raised when a result file is not a well-formed metric collection."""


class ReportWriteError(OSError):
    """Raised when the comparison document cannot be delivered."""


# ---------------------------------------------------------------------------
# Parsing (pure -- no I/O)
# ---------------------------------------------------------------------------


def _metric(raw: dict[str, Any], key: str, where: str) -> int:
    """Read a non-negative integer metric; absent or null counts as zero."""
    value = raw.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"{where}: {key} must be a number, got {value!r}"
        raise InvalidResultSetError(msg)
    if isinstance(value, float) and not value.is_integer():
        msg = f"{where}: {key} must be an integer, got {value!r}"
        raise InvalidResultSetError(msg)
    if value < 0:
        msg = f"{where}: {key} must not be negative, got {value!r}"
        raise InvalidResultSetError(msg)
    return int(value)


def _gas(raw: object, where: str) -> Gas:
    if raw is None:
        return Gas()
    if not isinstance(raw, dict):
        msg = f"{where}: gas entry must be an object"
        raise InvalidResultSetError(msg)
    return Gas(da_gas=_metric(raw, "daGas", where), l2_gas=_metric(raw, "l2Gas", where))


def parse_profile_result(raw: object, index: int = 0) -> ProfileResult:
    """Build a ProfileResult from one element of the ``results`` list."""
    where = f"results[{index}]"
    if not isinstance(raw, dict):
        msg = f"{where} must be an object"
        raise InvalidResultSetError(msg)

    name = raw.get("name", "")
    if not isinstance(name, str):
        msg = f"{where}: name must be a string, got {name!r}"
        raise InvalidResultSetError(msg)
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        msg = f"{where}: name is not valid UTF-8 text: {name!r}"
        raise InvalidResultSetError(msg) from None

    gas_raw = raw.get("gas") or {}
    if not isinstance(gas_raw, dict):
        msg = f"{where}: gas must be an object"
        raise InvalidResultSetError(msg)

    steps = raw.get("gateCounts") or []
    if not isinstance(steps, list):
        msg = f"{where}: gateCounts must be a list"
        raise InvalidResultSetError(msg)

    gate_counts: list[GateCount] = []
    for step in steps:
        if not isinstance(step, dict):
            msg = f"{where}: gateCounts entries must be objects, got {step!r}"
            raise InvalidResultSetError(msg)
        gate_counts.append(
            GateCount(
                circuit_name=str(step.get("circuitName", "")),
                gate_count=_metric(step, "gateCount", where),
            )
        )

    return ProfileResult(
        name=name,
        total_gate_count=_metric(raw, "totalGateCount", where),
        gate_counts=tuple(gate_counts),
        gas=GasLimits(
            gas_limits=_gas(gas_raw.get("gasLimits"), where),
            teardown_gas_limits=_gas(gas_raw.get("teardownGasLimits"), where),
        ),
    )


def parse_result_set(data: object, *, unit: str, label: str) -> ResultSet:
    """Validate a decoded result document and collapse it into a ResultSet."""
    if not isinstance(data, dict):
        msg = "result document must be a JSON object"
        raise InvalidResultSetError(msg)
    results = data.get("results")
    if not isinstance(results, list):
        msg = "missing or non-array 'results' field"
        raise InvalidResultSetError(msg)

    records = tuple(
        parse_profile_result(raw, i).to_record() for i, raw in enumerate(results)
    )
    return ResultSet(unit=unit, label=label, records=records)


# ---------------------------------------------------------------------------
# File adapters
# ---------------------------------------------------------------------------


class JsonResultLoader:
    """ResultLoader backed by benchmark JSON files on disk."""

    def load(self, path: Path, *, unit: str, label: str) -> ResultSet:
        """Read and validate the result file at *path*.

        Raises OSError if the file cannot be read, json.JSONDecodeError for
        malformed JSON and InvalidResultSetError for a wrong structure.
        """
        text = path.read_text(encoding="utf-8")
        result_set = parse_result_set(json.loads(text), unit=unit, label=label)
        logger.debug("Loaded %d %s record(s) for %s", len(result_set.records), label, unit)
        return result_set


class FileReportSink:
    """ReportSink that writes the document to a file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, document: str) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(document, encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            msg = f"Failed to write comparison report to {self._path}: {exc}"
            raise ReportWriteError(msg) from exc
        logger.info("Comparison report written to %s", self._path)


# ---------------------------------------------------------------------------
# Writing profile reports
# ---------------------------------------------------------------------------


def _result_to_dict(result: ProfileResult) -> dict[str, object]:
    return {
        "name": result.name,
        "totalGateCount": result.total_gate_count,
        "gateCounts": [
            {"circuitName": g.circuit_name, "gateCount": g.gate_count}
            for g in result.gate_counts
        ],
        "gas": {
            "gasLimits": {
                "daGas": result.gas.gas_limits.da_gas,
                "l2Gas": result.gas.gas_limits.l2_gas,
            },
            "teardownGasLimits": {
                "daGas": result.gas.teardown_gas_limits.da_gas,
                "l2Gas": result.gas.teardown_gas_limits.l2_gas,
            },
        },
    }


def build_profile_report(results: Sequence[ProfileResult]) -> dict[str, object]:
    """Return the JSON-serializable report for *results*."""
    return {
        "summary": {r.name: r.total_gate_count for r in results},
        "results": [_result_to_dict(r) for r in results],
        "gasSummary": {r.name: r.gas.total for r in results},
    }


def write_profile_report(results: Sequence[ProfileResult], path: Path) -> None:
    """Write *results* to *path*; an empty sequence writes an empty report."""
    if not results:
        logger.info("No results to save for %s, writing empty report", path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(build_profile_report(results), indent=2, ensure_ascii=False) + "\n"
    path.write_text(content, encoding="utf-8")
    logger.info("Saved %d result(s) to %s", len(results), path)
