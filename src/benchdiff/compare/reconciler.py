"""Function reconciler -- merge two result sets into per-function entries.

Pure logic, no I/O.  Records whose names are placeholders for unnamed or
failed measurements are dropped here, so a failed call never shows up as a
zero-cost function.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from benchdiff.domain.models import ComparisonEntry, MetricRecord

if TYPE_CHECKING:
    from benchdiff.domain.models import ResultSet

logger = logging.getLogger("benchdiff.compare")

UNKNOWN_FUNCTION_PREFIX = "unknown_function"
FAILED_MARKER = "(FAILED)"


class DuplicateFunctionError(ValueError):
    """Raised in strict mode when a run measures the same function twice."""


def is_comparable_name(name: str) -> bool:
    """Return False for empty, auto-generated or failed-measurement names."""
    if not name:
        return False
    if name.startswith(UNKNOWN_FUNCTION_PREFIX):
        return False
    return FAILED_MARKER not in name


def _index(result_set: ResultSet, *, strict: bool) -> dict[str, MetricRecord]:
    """Map name -> record for one run.  Later duplicates replace earlier ones."""
    indexed: dict[str, MetricRecord] = {}
    for record in result_set.records:
        if not is_comparable_name(record.name):
            logger.debug(
                "Skipping malformed/failed entry in %s data for %s: %r",
                result_set.label,
                result_set.unit,
                record.name,
            )
            continue
        if record.name in indexed:
            if strict:
                msg = (
                    f"Function {record.name!r} appears more than once in the "
                    f"{result_set.label} results for {result_set.unit}"
                )
                raise DuplicateFunctionError(msg)
            logger.warning(
                "Duplicate function %r in %s results for %s; keeping the last one",
                record.name,
                result_set.label,
                result_set.unit,
            )
        indexed[record.name] = record
    return indexed


def reconcile(
    baseline: ResultSet,
    current: ResultSet,
    *,
    strict: bool = False,
) -> list[ComparisonEntry]:
    """Pair up functions from *baseline* and *current*.

    Every comparable name from either side yields one entry; the missing side
    is an all-zero record carrying the same name.  The result is in no
    particular order and is empty when neither side has comparable records.

    Raises DuplicateFunctionError when *strict* is set and a name repeats
    within one run.
    """
    base = _index(baseline, strict=strict)
    cur = _index(current, strict=strict)

    entries: list[ComparisonEntry] = []
    for name in base.keys() | cur.keys():
        entries.append(
            ComparisonEntry(
                name=name,
                baseline=base.get(name) or MetricRecord.zero(name),
                current=cur.get(name) or MetricRecord.zero(name),
            )
        )
    return entries
