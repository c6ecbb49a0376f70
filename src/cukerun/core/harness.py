from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cukerun.core import ids
from cukerun.core.context import StepContext
from cukerun.core.model import Feature, Result, Scenario, worst_status


class Harness:
    """Observer notified as the executor walks a feature.

    Every callback is a no-op here; subclasses override what they report on.
    `step` and `step_done` are called for every step, including skipped and
    undefined ones.
    """

    def feature(self, feature: Feature) -> None:
        pass

    def feature_done(self, feature: Feature) -> None:
        pass

    def background(self, scenario: Scenario, row: dict[str, Any], longest_step_line: int | None = None) -> None:
        pass

    def background_done(self, scenario: Scenario, row: dict[str, Any]) -> None:
        pass

    def scenario(self, scenario: Scenario, row: dict[str, Any], longest_step_line: int | None = None) -> None:
        pass

    def scenario_done(self, scenario: Scenario, row: dict[str, Any]) -> None:
        pass

    def step(self, context: StepContext) -> None:
        pass

    def step_done(self, context: StepContext, result: Result) -> None:
        pass


@dataclass
class StepRecord:
    verb: str
    text: str
    result: Result

    def to_dict(self) -> dict[str, Any]:
        return {"verb": self.verb, "text": self.text, "status": self.result.status, "output": self.result.output}


@dataclass
class ScenarioRecord:
    name: str
    row: dict[str, Any]
    background: bool = False
    steps: list[StepRecord] = field(default_factory=list)

    @property
    def status(self) -> str:
        return worst_status([s.result.status for s in self.steps])

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "row": {k: str(v) for k, v in self.row.items()},
            "background": self.background,
            "status": self.status,
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass
class FeatureRecord:
    name: str
    scenarios: list[ScenarioRecord] = field(default_factory=list)


class DataHarness(Harness):
    """Keeps everything it is told in memory, for tests and JSON output."""

    def __init__(self) -> None:
        self.run_id = ids.run_id_ulid()
        self.features: list[FeatureRecord] = []
        self._open: list[ScenarioRecord] = []
        self._results: list[Result] = []

    def feature(self, feature: Feature) -> None:
        self.features.append(FeatureRecord(name=feature.name))

    def _open_scenario(self, scenario: Scenario, row: dict[str, Any], *, background: bool) -> None:
        record = ScenarioRecord(name=scenario.name, row=dict(row), background=background)
        self.features[-1].scenarios.append(record)
        self._open.append(record)

    def background(self, scenario: Scenario, row: dict[str, Any], longest_step_line: int | None = None) -> None:
        self._open_scenario(scenario, row, background=True)

    def background_done(self, scenario: Scenario, row: dict[str, Any]) -> None:
        self._open.pop()

    def scenario(self, scenario: Scenario, row: dict[str, Any], longest_step_line: int | None = None) -> None:
        self._open_scenario(scenario, row, background=False)

    def scenario_done(self, scenario: Scenario, row: dict[str, Any]) -> None:
        self._open.pop()

    def step_done(self, context: StepContext, result: Result) -> None:
        self._open[-1].steps.append(StepRecord(verb=context.verb, text=context.text, result=result))
        self._results.append(result)

    @property
    def scenarios(self) -> list[ScenarioRecord]:
        return [s for f in self.features for s in f.scenarios]

    @property
    def results(self) -> list[Result]:
        # Execution order; a Background record is opened after its scenario record.
        return list(self._results)

    @property
    def step_count(self) -> int:
        return len(self.results)

    def feature_status(self) -> str:
        return worst_status([r.status for r in self.results])

    def summary(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for result in self.results:
            counts[result.status] = counts.get(result.status, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "status": self.feature_status(),
            "summary": self.summary(),
            "features": [
                {"name": f.name, "scenarios": [s.to_dict() for s in f.scenarios]} for f in self.features
            ],
        }
