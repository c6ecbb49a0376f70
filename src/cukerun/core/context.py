from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cukerun.core.model import Feature, Scenario, Step

if TYPE_CHECKING:
    from cukerun.core.assertions import AssertionRecorder
    from cukerun.core.harness import Harness


@dataclass
class Stash:
    """Scratch space shared between step actions.

    `feature` lives for the whole feature run, `scenario` for one outline row
    (Background included), `step` for a single step.
    """

    feature: dict[str, Any] = field(default_factory=dict)
    scenario: dict[str, Any] = field(default_factory=dict)
    step: dict[str, Any] = field(default_factory=dict)


@dataclass
class OutlineStash:
    # Shared by a row's Background replay and its body; a new row gets a new one.
    short_circuit: int = 0

    @property
    def armed(self) -> bool:
        return self.short_circuit > 0

    def arm(self) -> None:
        self.short_circuit += 1


def clone_data(data: Any) -> Any:
    if isinstance(data, (dict, list, set, tuple)):
        return copy.deepcopy(data)
    return data


@dataclass
class StepContext:
    feature: Feature
    scenario: Scenario
    step: Step
    verb: str
    text: str
    harness: "Harness"
    data: Any = None
    stash: Stash = field(default_factory=Stash)
    matches: list[str | None] = field(default_factory=list)
    recorder: "AssertionRecorder | None" = None

    @classmethod
    def build(
        cls,
        *,
        feature: Feature,
        scenario: Scenario,
        step: Step,
        text: str,
        harness: "Harness",
        feature_stash: dict[str, Any],
        scenario_stash: dict[str, Any],
    ) -> "StepContext":
        return cls(
            feature=feature,
            scenario=scenario,
            step=step,
            verb=step.verb.lower(),
            text=text,
            harness=harness,
            data=clone_data(step.data),
            stash=Stash(feature=feature_stash, scenario=scenario_stash, step={}),
        )

    def _require_recorder(self) -> "AssertionRecorder":
        if self.recorder is None:
            raise RuntimeError("Assertions can only be recorded while the step is being dispatched")
        return self.recorder

    def ok(self, passed: object, name: str = "") -> bool:
        return self._require_recorder().ok(passed, name)

    def diag(self, message: str) -> None:
        self._require_recorder().diag(message)

    def todo(self, name: str, reason: str = "") -> None:
        self._require_recorder().todo(name, reason)
