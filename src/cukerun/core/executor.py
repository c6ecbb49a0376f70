from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any, Protocol, Union

from loguru import logger

from cukerun.core import config
from cukerun.core.context import OutlineStash, StepContext
from cukerun.core.dispatcher import Dispatcher
from cukerun.core.harness import Harness
from cukerun.core.model import Feature, Result, Scenario, Step
from cukerun.core.placeholders import UnresolvedPlaceholder, substitute
from cukerun.core.registry import StepAction, StepRegistry
from cukerun.core.tags import TagSpec


class TagFilter(Protocol):
    def filter(self, scenarios: list[Scenario]) -> list[Scenario]: ...


ScenarioFilter = Union[TagFilter, Callable[[list[Scenario]], list[Scenario]]]


def _apply_tag_spec(tag_spec: ScenarioFilter, scenarios: list[Scenario]) -> list[Scenario]:
    if hasattr(tag_spec, "filter"):
        return list(tag_spec.filter(scenarios))
    return list(tag_spec(scenarios))


class Executor:
    """Walks features, matching each step line to a step definition.

    Scenarios, outline rows and steps run one at a time in source order.
    Everything observable is reported through the harness; the per-step
    results are also returned from `execute_scenario` for callers that want
    them directly.
    """

    def __init__(self, registry: StepRegistry | None = None, *, extra_fields: bool | None = None) -> None:
        self.registry = registry if registry is not None else StepRegistry()
        if extra_fields is None:
            extra_fields = config.extra_fields_enabled()
        self.dispatcher = Dispatcher(self.registry, extra_fields=extra_fields)

    @property
    def extra_fields(self) -> bool:
        return self.dispatcher.extra_fields

    def add_steps(self, *steps: tuple[str, str | re.Pattern[str], StepAction]) -> None:
        self.registry.add_steps(steps)

    def execute(self, feature: Feature, harness: Harness, tag_spec: ScenarioFilter | None = None) -> None:
        feature_stash: dict[str, Any] = {}
        harness.feature(feature)

        scenarios = list(feature.scenarios)
        if isinstance(tag_spec, TagSpec):
            # Scenarios inherit the tags of their feature.
            tag_spec = tag_spec.with_feature_tags(feature.tags)
        if tag_spec is not None:
            scenarios = _apply_tag_spec(tag_spec, scenarios)
        logger.info("Running feature {!r}: {} of {} scenarios", feature.name, len(scenarios), len(feature.scenarios))

        for scenario in scenarios:
            self.execute_scenario(
                scenario,
                feature=feature,
                feature_stash=feature_stash,
                harness=harness,
                background=feature.background,
            )

        harness.feature_done(feature)

    def execute_scenario(
        self,
        scenario: Scenario,
        *,
        feature: Feature,
        feature_stash: dict[str, Any],
        harness: Harness,
        background: Scenario | None = None,
        scenario_stash: dict[str, Any] | None = None,
        outline_stash: OutlineStash | None = None,
    ) -> list[Result]:
        """Run every data row of a scenario (once, if it is not an outline).

        `scenario_stash` and `outline_stash` are only passed in when replaying a
        Background, so that it shares stash and short-circuit state with the
        row it runs in front of.
        """
        if scenario.background:
            start, stop = harness.background, harness.background_done
        else:
            start, stop = harness.scenario, harness.scenario_done

        datasets: list[dict[str, Any]] = list(scenario.data) or [{}]

        results: list[Result] = []
        for row in datasets:
            row_stash = scenario_stash if scenario_stash is not None else {}
            # Short-circuit state never crosses rows unless a Background shares it.
            outline = outline_stash if outline_stash is not None else OutlineStash()
            logger.debug("Scenario {!r} row {}", scenario.name, row)
            start(scenario, row, row_stash.get("longest_step_line"))

            if background is not None:
                results.extend(
                    self.execute_scenario(
                        background,
                        feature=feature,
                        feature_stash=feature_stash,
                        harness=harness,
                        scenario_stash=row_stash,
                        outline_stash=outline,
                    )
                )

            for step in scenario.steps:
                result = self._run_step(
                    scenario=scenario,
                    step=step,
                    row=row,
                    feature=feature,
                    feature_stash=feature_stash,
                    scenario_stash=row_stash,
                    harness=harness,
                    outline=outline,
                )
                results.append(result)
                if not result.passed:
                    outline.arm()

            stop(scenario, row)
        return results

    def _run_step(
        self,
        *,
        scenario: Scenario,
        step: Step,
        row: dict[str, Any],
        feature: Feature,
        feature_stash: dict[str, Any],
        scenario_stash: dict[str, Any],
        harness: Harness,
        outline: OutlineStash,
    ) -> Result:
        failure: UnresolvedPlaceholder | None = None
        try:
            text = substitute(step.text, row)
        except UnresolvedPlaceholder as exc:
            logger.warning("{}", exc)
            text, failure = step.text, exc

        context = StepContext.build(
            feature=feature,
            scenario=scenario,
            step=step,
            text=text,
            harness=harness,
            feature_stash=feature_stash,
            scenario_stash=scenario_stash,
        )
        # A malformed outline row fails the step rather than aborting the run.
        if failure is not None and not outline.armed:
            return self.dispatcher.fail_step(context, str(failure))
        return self.dispatcher.dispatch(context, outline.armed)


def run_feature(
    feature: Feature,
    steps: Iterable[tuple[str, str | re.Pattern[str], StepAction]],
    harness: Harness,
    *,
    tag_spec: ScenarioFilter | None = None,
    extra_fields: bool | None = None,
) -> Harness:
    executor = Executor(extra_fields=extra_fields)
    executor.add_steps(*steps)
    executor.execute(feature, harness, tag_spec)
    return harness
