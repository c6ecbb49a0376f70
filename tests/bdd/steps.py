from __future__ import annotations

import re
from typing import Any, Dict, List

import pytest
from pytest_bdd import given, when, then, parsers

from cukerun.core.assertions import PendingStep
from cukerun.core.executor import Executor
from cukerun.core.harness import DataHarness
from cukerun.core.model import Feature, Scenario, Step


@pytest.fixture()
def world() -> Dict[str, Any]:
    return {"steps": [], "scenarios": [], "background": None, "recorded": []}


def _parse_steps(lines: str) -> List[Step]:
    parsed = []
    for line in lines.split(";"):
        verb, _, text = line.strip().partition(" ")
        parsed.append(Step(verb=verb, text=text))
    return parsed


def _split(values: str, sep: str) -> List[str]:
    return [v.strip() for v in values.split(sep) if v.strip()]


@given(parsers.parse('a step library where "{text}" passes'))
def given_passing_step(world: Dict[str, Any], text: str) -> None:
    world["steps"].append(("step", text, lambda context: None))


@given(parsers.parse('a step library where "{text}" fails'))
def given_failing_step(world: Dict[str, Any], text: str) -> None:
    def fail(context) -> None:
        raise AssertionError(f"{text} failed on purpose")

    world["steps"].append(("step", text, fail))


@given(parsers.parse('a step library where "{text}" is pending'))
def given_pending_step(world: Dict[str, Any], text: str) -> None:
    def pending(context) -> None:
        raise PendingStep("not written yet")

    world["steps"].append(("step", text, pending))


@given("a step library that records step text")
def given_recording_steps(world: Dict[str, Any]) -> None:
    world["steps"].append(("step", re.compile(r".*"), lambda context: world["recorded"].append(context.text)))


@given(parsers.parse('a scenario with the steps "{lines}"'))
def given_scenario(world: Dict[str, Any], lines: str) -> None:
    world["scenarios"].append(Scenario(name=f"scenario {len(world['scenarios']) + 1}", steps=_parse_steps(lines)))


@given(parsers.parse('a background with the steps "{lines}"'))
def given_background(world: Dict[str, Any], lines: str) -> None:
    world["background"] = Scenario(name="Background", steps=_parse_steps(lines), background=True)


@given(parsers.parse('an outline with the steps "{lines}" and the values "{values}" for "{name}"'))
def given_outline(world: Dict[str, Any], lines: str, values: str, name: str) -> None:
    rows = [{name: value} for value in _split(values, ",")]
    world["scenarios"].append(Scenario(name="outline", steps=_parse_steps(lines), data=rows))


@when("the feature is executed", target_fixture="harness")
def when_executed(world: Dict[str, Any]) -> DataHarness:
    feature = Feature(name="under test", scenarios=world["scenarios"], background=world["background"])
    executor = Executor(extra_fields=False)
    executor.add_steps(*world["steps"])
    harness = DataHarness()
    executor.execute(feature, harness)
    return harness


@then(parsers.parse('the step statuses are "{statuses}"'))
def then_statuses(harness: DataHarness, statuses: str) -> None:
    assert [r.status for r in harness.results] == _split(statuses, ",")


@then(parsers.parse("the harness saw {count:d} finished steps"))
def then_step_count(harness: DataHarness, count: int) -> None:
    assert harness.step_count == count


@then(parsers.parse('step {number:d} was skipped as "{reason}"'))
def then_skipped(harness: DataHarness, number: int, reason: str) -> None:
    assert harness.results[number - 1].output == f"1..0 # SKIP {reason}"


@then(parsers.parse('the recorded step texts are "{texts}"'))
def then_recorded(world: Dict[str, Any], texts: str) -> None:
    assert world["recorded"] == _split(texts, ";")
