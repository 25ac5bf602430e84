"""Classifier -- one status per reconciled function.

Rules, first match wins:

1. NEW          -- every baseline metric is zero, some current metric is not.
2. REMOVED      -- every current metric is zero, some baseline metric is not.
3. REGRESSION   -- some metric is an infinite increase, or grew by more than
                   the threshold.
4. IMPROVEMENT  -- some metric shrank by more than the threshold.
5. UNCHANGED    -- otherwise.

The threshold is a fraction (0.025 == 2.5%) applied to all metrics alike.
"""

from __future__ import annotations

import dataclasses
import math
from typing import TYPE_CHECKING

from benchdiff.compare.deltas import compute_deltas
from benchdiff.domain.models import Metric, Status

if TYPE_CHECKING:
    from benchdiff.domain.models import ComparisonEntry


def validate_threshold(threshold: float) -> None:
    """Raise ValueError unless *threshold* is a non-negative fraction."""
    if math.isnan(threshold) or threshold < 0:
        msg = f"threshold must be a non-negative fraction, got {threshold!r}"
        raise ValueError(msg)


def classify(entry: ComparisonEntry, threshold: float) -> Status:
    """Return the status of *entry* against *threshold*.

    Deltas are computed on the fly when the entry does not carry them yet.
    Raises ValueError for a negative or NaN threshold.
    """
    validate_threshold(threshold)

    if entry.baseline.is_zero and not entry.current.is_zero:
        return Status.NEW
    if entry.current.is_zero and not entry.baseline.is_zero:
        return Status.REMOVED

    if not entry.deltas:
        entry = compute_deltas(entry)
    percents = [entry.delta(m).percent for m in Metric]
    finite = [p for p in percents if math.isfinite(p)]

    if any(math.isinf(p) and p > 0 for p in percents):
        return Status.REGRESSION
    if any(p > threshold for p in finite):
        return Status.REGRESSION
    if any(p < -threshold for p in finite):
        return Status.IMPROVEMENT
    return Status.UNCHANGED


def classify_entry(entry: ComparisonEntry, threshold: float) -> ComparisonEntry:
    """Return *entry* with deltas computed and status assigned."""
    if not entry.deltas:
        entry = compute_deltas(entry)
    return dataclasses.replace(entry, status=classify(entry, threshold))
