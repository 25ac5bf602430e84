"""Profiler -- measure call targets one at a time.

Each target is gas-estimated, profiled and then sent (blocking until mined)
so that later targets see its state changes.  A failing target does not stop
the run: it is recorded under a ``(FAILED)`` name with zero metrics, which
the comparison later excludes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from benchdiff.domain.models import GateCount, ProfileResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from benchdiff.domain.models import GasLimits
    from benchdiff.domain.protocols import CallTarget, ExecutionStep

logger = logging.getLogger("benchdiff.runner")


@dataclass(frozen=True)
class NamedTarget:
    """A call target reported under a custom name.

    Lets one function appear several times with different arguments, e.g.
    ``transfer_small`` and ``transfer_large``.
    """

    name: str
    target: CallTarget

    @property
    def selector(self) -> str:
        return self.target.selector

    def estimate_gas(self) -> GasLimits:
        return self.target.estimate_gas()

    def profile(self) -> Sequence[ExecutionStep]:
        return self.target.profile()

    def send(self) -> None:
        self.target.send()


def placeholder_name(target: CallTarget) -> str:
    """Name used for a target that does not report one."""
    selector = getattr(target, "selector", None) or "no_selector"
    return f"unknown_function_{selector}"


class Profiler:
    """Measures gate counts and gas for a sequence of call targets."""

    def profile(self, targets: Sequence[CallTarget]) -> list[ProfileResult]:
        """Profile every target in order."""
        return [self.profile_one(t) for t in targets]

    def profile_one(self, target: CallTarget) -> ProfileResult:
        name = target.name
        if not name:
            name = placeholder_name(target)
            logger.warning("Function name is undefined, using placeholder %s", name)

        logger.info("Profiling %s...", name)
        try:
            gas = target.estimate_gas()
            steps = list(target.profile())
            target.send()
        except Exception as exc:  # noqa: BLE001
            logger.error("Error profiling %s: %s", name, exc)
            logger.debug("Profiling failure for %s", name, exc_info=True)
            return ProfileResult(name=f"{name} (FAILED)", total_gate_count=0)

        gate_counts = tuple(
            GateCount(circuit_name=s.function_name, gate_count=s.gate_count or 0) for s in steps
        )
        result = ProfileResult(
            name=name,
            total_gate_count=sum(s.gate_count for s in steps if s.gate_count is not None),
            gate_counts=gate_counts,
            gas=gas,
        )
        logger.info(" -> %s: %d gates", name, result.total_gate_count)
        return result
