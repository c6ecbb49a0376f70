from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Final

from loguru import logger

# Definitions registered under this verb are tried for every verb.
WILDCARD_VERB: Final[str] = "step"

StepAction = Callable[..., Any]
_TRAILING_COLON_RE = re.compile(r":\s*$")


@dataclass(frozen=True)
class StepDefinition:
    verb: str
    pattern: re.Pattern[str]
    action: StepAction


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Turn literal step text into a case-insensitive prefix matcher.

    Already-compiled patterns are used as given. Literal text drops a trailing
    colon, is escaped, and then matches from the start of the step text with
    an optional trailing colon.
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    literal = _TRAILING_COLON_RE.sub("", pattern)
    return re.compile(f"^{re.escape(literal)}:?", re.IGNORECASE)


class StepRegistry:
    def __init__(self) -> None:
        self._steps: dict[str, list[StepDefinition]] = {}

    def add(self, verb: str, pattern: str | re.Pattern[str], action: StepAction) -> StepDefinition:
        if not callable(action):
            raise TypeError(f"Step action for {verb} {pattern!r} is not callable")
        definition = StepDefinition(verb=verb.lower(), pattern=compile_pattern(pattern), action=action)
        self._steps.setdefault(definition.verb, []).append(definition)
        logger.debug("Registered step {} /{}/", definition.verb, definition.pattern.pattern)
        return definition

    def add_steps(self, steps: Iterable[tuple[str, str | re.Pattern[str], StepAction]]) -> None:
        for verb, pattern, action in steps:
            self.add(verb, pattern, action)

    def definitions(self, verb: str) -> list[StepDefinition]:
        return list(self._steps.get(verb.lower(), []))

    def candidates(self, verb: str) -> list[StepDefinition]:
        """Definitions in the order they are tried: verb bucket, then wildcard."""
        verb = verb.lower()
        found = self.definitions(verb)
        if verb != WILDCARD_VERB:
            found.extend(self.definitions(WILDCARD_VERB))
        return found

    def find(self, verb: str, text: str) -> tuple[StepDefinition, re.Match[str]] | None:
        for definition in self.candidates(verb):
            match = definition.pattern.search(text)
            if match:
                return definition, match
        return None

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._steps.values())
