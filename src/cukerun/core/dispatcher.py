from __future__ import annotations

import traceback

from loguru import logger

from cukerun.core.assertions import AssertionRecorder, PendingStep, aggregate
from cukerun.core.context import StepContext
from cukerun.core.model import FAILING, PENDING, UNDEFINED, Result
from cukerun.core.registry import StepRegistry


class Dispatcher:
    """Runs one step context against the first matching step definition.

    When `extra_fields` is on, actions are called as `action(context, stash)`
    where `stash` is the step-level stash; otherwise as `action(context)`.
    """

    def __init__(self, registry: StepRegistry, *, extra_fields: bool = False) -> None:
        self.registry = registry
        self.extra_fields = extra_fields

    def dispatch(self, context: StepContext, short_circuit: bool = False) -> Result:
        if short_circuit:
            return self.skip_step(context, PENDING, "Short-circuited from previous tests")

        found = self.registry.find(context.verb, context.text)
        if found is None:
            logger.warning("No matching step definition for: {} {}", context.verb, context.text)
            return self.skip_step(
                context,
                UNDEFINED,
                f"No matching step definition for: {context.verb} {context.text}",
            )
        definition, match = found

        recorder = AssertionRecorder()
        recorder.ok(True, f"Starting to execute step: {context.text}")
        context.recorder = recorder

        context.harness.step(context)

        context.matches = list(match.groups())
        logger.debug("Dispatching {} {} to /{}/", context.verb, context.text, definition.pattern.pattern)
        try:
            if self.extra_fields:
                definition.action(context, context.stash.step)
            else:
                definition.action(context)
        except PendingStep as exc:
            recorder.todo(f"Step is pending: {context.text}", str(exc))
        except Exception as exc:
            logger.debug("Step {} {} raised {!r}", context.verb, context.text, exc)
            recorder.ok(False, "Step ran without raising")
            recorder.diag("".join(traceback.format_exception(exc)).rstrip())
        recorder.done_testing()

        result = Result(status=aggregate(recorder.summarize()), output=recorder.output)
        context.harness.step_done(context, result)
        return result

    def skip_step(self, context: StepContext, status: str, reason: str) -> Result:
        # Observers see every step, including ones that never run.
        context.harness.step(context)
        result = Result.skipped(status, reason)
        context.harness.step_done(context, result)
        return result

    def fail_step(self, context: StepContext, reason: str) -> Result:
        """Report a step that could not be prepared, without running any action."""
        recorder = AssertionRecorder()
        context.recorder = recorder
        context.harness.step(context)
        recorder.ok(False, f"Preparing step: {context.verb} {context.text}")
        recorder.diag(reason)
        recorder.done_testing()
        result = Result(status=FAILING, output=recorder.output)
        context.harness.step_done(context, result)
        return result
