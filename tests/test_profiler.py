"""Tests for runner/profiler.py."""

from __future__ import annotations

from dataclasses import dataclass, field

from benchdiff.compare.reconciler import is_comparable_name
from benchdiff.domain.models import Gas, GasLimits, GateCount
from benchdiff.runner.profiler import NamedTarget, Profiler, placeholder_name


@dataclass
class Step:
    function_name: str
    gate_count: int | None


@dataclass
class FakeTarget:
    name: str | None
    selector: str = "0x1234"
    steps: list[Step] = field(default_factory=list)
    gas: GasLimits = field(default_factory=GasLimits)
    fail_on: str = ""
    calls: list[str] = field(default_factory=list)

    def estimate_gas(self) -> GasLimits:
        self._record("estimate_gas")
        return self.gas

    def profile(self) -> list[Step]:
        self._record("profile")
        return self.steps

    def send(self) -> None:
        self._record("send")

    def _record(self, call: str) -> None:
        self.calls.append(call)
        if call == self.fail_on:
            raise RuntimeError(f"{call} reverted")


class TestProfileOne:
    def test_sums_gate_counts_and_keeps_gas(self) -> None:
        gas = GasLimits(Gas(10, 20), Gas(1, 2))
        target = FakeTarget(
            name="transfer",
            steps=[Step("transfer", 1000), Step("kernel", None), Step("tail", 50)],
            gas=gas,
        )
        result = Profiler().profile_one(target)

        assert result.name == "transfer"
        assert result.total_gate_count == 1050
        assert result.gate_counts == (
            GateCount("transfer", 1000),
            GateCount("kernel", 0),
            GateCount("tail", 50),
        )
        assert result.gas == gas
        assert target.calls == ["estimate_gas", "profile", "send"]

    def test_failure_is_recorded_not_raised(self) -> None:
        target = FakeTarget(name="mint", steps=[Step("mint", 10)], fail_on="send")
        result = Profiler().profile_one(target)
        assert result.name == "mint (FAILED)"
        assert result.total_gate_count == 0
        assert result.to_record().is_zero
        assert not is_comparable_name(result.name)

    def test_unnamed_target_gets_placeholder(self) -> None:
        result = Profiler().profile_one(FakeTarget(name=None, selector="0xabcd"))
        assert result.name == "unknown_function_0xabcd"
        assert not is_comparable_name(result.name)

    def test_placeholder_without_selector(self) -> None:
        assert placeholder_name(FakeTarget(name=None, selector="")) == "unknown_function_no_selector"


class TestProfile:
    def test_runs_in_order_and_continues_after_failure(self) -> None:
        targets = [
            FakeTarget(name="a", steps=[Step("a", 1)]),
            FakeTarget(name="b", fail_on="estimate_gas"),
            FakeTarget(name="c", steps=[Step("c", 3)]),
        ]
        results = Profiler().profile(targets)
        assert [r.name for r in results] == ["a", "b (FAILED)", "c"]
        assert targets[1].calls == ["estimate_gas"]

    def test_named_target_renames_and_delegates(self) -> None:
        inner = FakeTarget(name="transfer", selector="0x99", steps=[Step("transfer", 7)])
        wrapped = NamedTarget("transfer_large", inner)
        assert wrapped.selector == "0x99"

        (result,) = Profiler().profile([wrapped])
        assert result.name == "transfer_large"
        assert result.total_gate_count == 7
        assert inner.calls == ["estimate_gas", "profile", "send"]
