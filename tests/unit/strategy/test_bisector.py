"""Tests for the Bisector search."""

import math

import pytest

from culprit.core.errors import SetupError
from culprit.core.result import Outcome
from culprit.oracle.base import Verdict
from culprit.strategy.bisect import Bisector


class FakeOracle:
    """Oracle that reproduces when `predicate(subset)` is true."""

    def __init__(self, predicate):
        self.predicate = predicate
        self.calls = []

    def evaluate(self, subset):
        self.calls.append(list(subset))
        if not subset:
            return Verdict.INCONCLUSIVE
        if self.predicate(subset):
            return Verdict.REPRODUCES
        return Verdict.DOES_NOT_REPRODUCE


def containing(name):
    return FakeOracle(lambda subset: name in subset)


class ScriptedOracle:
    """Oracle that replays a fixed list of verdicts."""

    def __init__(self, verdicts):
        self.verdicts = list(verdicts)
        self.calls = []

    def evaluate(self, subset):
        self.calls.append(list(subset))
        return self.verdicts.pop(0)


def test_isolates_culprit_in_second_half():
    """[A,B,C,D] with C the culprit narrows via [C,D] to C."""
    oracle = containing("C")
    result = Bisector(oracle, verify_initial=False).run(["A", "B", "C", "D"])

    assert result.outcome is Outcome.CONFIRMED
    assert result.culprit == "C"
    assert oracle.calls == [
        ["A", "B"],
        ["C", "D"],
        ["C"],
        ["C"],
    ]
    assert result.oracle_calls == 4


def test_combination_stops_with_both_halves():
    """A failure needing both A and B stops at the pair."""
    oracle = FakeOracle(lambda s: {"A", "B"} <= set(s))
    result = Bisector(oracle, verify_initial=False).run(["A", "B"])

    assert result.outcome is Outcome.COMBINATION
    assert result.culprit is None
    assert result.candidates == ["A", "B"]
    assert result.first_half == ["A"]
    assert result.second_half == ["B"]
    assert oracle.calls == [["A"], ["B"]]


def test_first_half_reproducing_skips_second_half():
    oracle = containing("A")
    result = Bisector(oracle, verify_initial=False).run(["A", "B", "C", "D"])

    assert result.culprit == "A"
    assert ["C", "D"] not in oracle.calls


def test_odd_split_puts_extra_element_in_first_half():
    oracle = containing("E")
    Bisector(oracle, verify_initial=False).run(["A", "B", "C", "D", "E"])

    assert oracle.calls[0] == ["A", "B", "C"]
    assert oracle.calls[1] == ["D", "E"]


def test_single_candidate_only_verifies():
    oracle = containing("A")
    result = Bisector(oracle).run(["A"])

    assert result.outcome is Outcome.CONFIRMED
    assert oracle.calls == [["A"]]


def test_single_candidate_that_does_not_reproduce_is_unconfirmed():
    oracle = containing("Z")
    result = Bisector(oracle).run(["A"])

    assert result.outcome is Outcome.UNCONFIRMED
    assert result.culprit == "A"
    assert result.oracle_calls == 1


def test_flaky_final_verification_is_unconfirmed():
    oracle = ScriptedOracle([
        Verdict.DOES_NOT_REPRODUCE,  # [A]
        Verdict.REPRODUCES,          # [B]
        Verdict.DOES_NOT_REPRODUCE,  # verify [B]
    ])
    result = Bisector(oracle, verify_initial=False).run(["A", "B"])

    assert result.outcome is Outcome.UNCONFIRMED
    assert result.candidates == ["B"]
    assert "order" in result.describe()


def test_empty_candidates_rejected_before_any_call():
    oracle = containing("A")
    with pytest.raises(SetupError):
        Bisector(oracle).run([])
    assert oracle.calls == []


def test_initial_set_is_verified_first():
    oracle = containing("C")
    result = Bisector(oracle).run(["A", "B", "C", "D"])

    assert oracle.calls[0] == ["A", "B", "C", "D"]
    assert result.culprit == "C"
    assert result.oracle_calls == 5


def test_initial_set_not_reproducing_is_setup_error():
    oracle = containing("Z")
    with pytest.raises(SetupError, match="does not reproduce"):
        Bisector(oracle).run(["A", "B", "C"])
    assert oracle.calls == [["A", "B", "C"]]


def test_inconclusive_treated_as_not_reproducing():
    oracle = ScriptedOracle([
        Verdict.INCONCLUSIVE,  # [A]
        Verdict.REPRODUCES,    # [B]
        Verdict.REPRODUCES,    # verify [B]
    ])
    result = Bisector(oracle, verify_initial=False).run(["A", "B"])

    assert result.outcome is Outcome.CONFIRMED
    assert result.culprit == "B"


def test_oracle_errors_propagate():
    class Broken:
        def evaluate(self, subset):
            raise RuntimeError("harness exploded")

    with pytest.raises(RuntimeError, match="exploded"):
        Bisector(Broken(), verify_initial=False).run(["A", "B"])


def test_input_list_is_not_modified():
    tests = ["A", "B", "C"]
    Bisector(containing("B"), verify_initial=False).run(tests)
    assert tests == ["A", "B", "C"]


@pytest.mark.parametrize("n", [2, 3, 5, 8, 13, 64, 100])
def test_call_count_best_case(n):
    """Culprit first: one call per level plus verification."""
    tests = [f"T{i}" for i in range(n)]
    oracle = containing("T0")
    result = Bisector(oracle, verify_initial=False).run(tests)

    assert result.culprit == "T0"
    assert result.oracle_calls <= math.ceil(math.log2(n)) + 1


@pytest.mark.parametrize("n", [2, 3, 5, 8, 13, 64, 100])
def test_call_count_worst_case(n):
    """Culprit last: two calls per level plus verification."""
    tests = [f"T{i}" for i in range(n)]
    oracle = containing(tests[-1])
    result = Bisector(oracle, verify_initial=False).run(tests)

    assert result.culprit == tests[-1]
    assert result.oracle_calls <= 2 * math.ceil(math.log2(n)) + 1


@pytest.mark.parametrize("position", range(7))
def test_finds_culprit_at_every_position(position):
    tests = [f"Suite.Test{i}" for i in range(7)]
    result = Bisector(containing(tests[position])).run(tests)

    assert result.outcome is Outcome.CONFIRMED
    assert result.culprit == tests[position]
