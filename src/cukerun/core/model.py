from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

# Result statuses are a wire contract: reporters key off these exact strings.
PASSING: Final[str] = "passing"
FAILING: Final[str] = "failing"
PENDING: Final[str] = "pending"
UNDEFINED: Final[str] = "undefined"

STATUSES: Final[tuple[str, ...]] = (PASSING, FAILING, PENDING, UNDEFINED)

SKIP_PREFIX: Final[str] = "1..0 # SKIP "


@dataclass(frozen=True)
class Step:
    verb: str
    text: str
    data: Any = None
    line: int | None = None


@dataclass(frozen=True)
class Scenario:
    name: str
    steps: list[Step] = field(default_factory=list)
    data: list[dict[str, Any]] = field(default_factory=list)
    background: bool = False
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Feature:
    name: str
    scenarios: list[Scenario] = field(default_factory=list)
    background: Scenario | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Result:
    status: str
    output: str = ""

    def __post_init__(self) -> None:
        if self.status not in STATUSES:
            raise ValueError(f"Unknown result status: {self.status!r} (expected one of {', '.join(STATUSES)})")

    @property
    def passed(self) -> bool:
        return self.status == PASSING

    @classmethod
    def skipped(cls, status: str, reason: str) -> "Result":
        """Build a result for a step that never ran its action.

        The output keeps the TAP-style `1..0 # SKIP` marker that downstream
        reporters match on.
        """
        return cls(status=status, output=f"{SKIP_PREFIX}{reason}")


def worst_status(statuses: list[str]) -> str:
    """Collapse many step statuses into one, e.g. for a scenario summary."""
    for status in (FAILING, UNDEFINED, PENDING):
        if status in statuses:
            return status
    return PASSING
