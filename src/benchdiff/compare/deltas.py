"""Delta calculator -- absolute and relative change per metric."""

from __future__ import annotations

import dataclasses
import math
from typing import TYPE_CHECKING

from benchdiff.domain.models import Metric, MetricDelta

if TYPE_CHECKING:
    from benchdiff.domain.models import ComparisonEntry

# Relative changes smaller than this (0.01%) render as "no visible diff".
DISPLAY_NOISE_FLOOR = 0.0001


def compute_delta(baseline: int, current: int) -> MetricDelta:
    """Return the change from *baseline* to *current*.

    Zero baselines never divide: 0 -> 0 is a 0.0 change and 0 -> n is
    ``math.inf``.  n -> 0 falls out of the general formula as exactly -1.0.
    """
    if baseline == 0:
        percent = math.inf if current > 0 else 0.0
    else:
        percent = (current - baseline) / baseline
    return MetricDelta(
        baseline=baseline,
        current=current,
        absolute=current - baseline,
        percent=percent,
    )


def compute_deltas(entry: ComparisonEntry) -> ComparisonEntry:
    """Return *entry* with a delta for every metric."""
    deltas = {
        metric: compute_delta(entry.baseline.value(metric), entry.current.value(metric))
        for metric in Metric
    }
    return dataclasses.replace(entry, deltas=deltas)


def is_below_noise_floor(delta: MetricDelta) -> bool:
    """True when the change is too small to show; never affects classification."""
    return not delta.is_infinite and abs(delta.percent) < DISPLAY_NOISE_FLOOR
