"""Protocol interfaces for benchdiff components.

All ports are defined as typing.Protocol -- structural subtyping means any class
with matching method signatures satisfies the Protocol without inheritance.

This module has ZERO external imports -- only stdlib and typing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from benchdiff.domain.models import DiscoveredUnit, GasLimits, ResultSet


class ResultLoader(Protocol):
    """Reads one run's measurements for one unit."""

    def load(self, path: Path, *, unit: str, label: str) -> ResultSet:
        """Load the result file at *path*.

        Raises InvalidResultSetError when the file is not a well-formed
        metric collection, OSError / ValueError when it cannot be read.
        """
        ...


class UnitDiscovery(Protocol):
    """Finds the units that have both a baseline and a current result."""

    def discover(self) -> list[DiscoveredUnit]:
        """Return discovered units in a stable order."""
        ...


class ReportSink(Protocol):
    """Delivers the rendered comparison document."""

    def write(self, document: str) -> None:
        """Persist *document*.  Raises ReportWriteError on failure."""
        ...


# ---------------------------------------------------------------------------
# Measurement plugin boundary
# ---------------------------------------------------------------------------


class ExecutionStep(Protocol):
    """One circuit executed while profiling a call."""

    @property
    def function_name(self) -> str: ...

    @property
    def gate_count(self) -> int | None: ...


class CallTarget(Protocol):
    """A contract function call that can be measured.

    ``send`` blocks until the call has been included, so later targets
    observe its state changes.
    """

    @property
    def name(self) -> str | None: ...

    @property
    def selector(self) -> str: ...

    def estimate_gas(self) -> GasLimits:
        """Estimate execution and teardown gas."""
        ...

    def profile(self) -> Sequence[ExecutionStep]:
        """Run the call in full-profile mode and return its execution steps."""
        ...

    def send(self) -> None:
        """Submit the call and wait for it to be mined."""
        ...


class BenchmarkSuite(Protocol):
    """User-supplied benchmark definition for one contract.

    ``setup`` and ``teardown`` are optional; ``get_targets`` is required.
    """

    def get_targets(self, context: dict[str, Any]) -> Sequence[CallTarget]:
        """Return the calls to measure, in order."""
        ...
