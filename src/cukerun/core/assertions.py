from __future__ import annotations

from dataclasses import dataclass

from cukerun.core.model import FAILING, PASSING, PENDING


class PendingStep(Exception):
    """Raised from a step action to mark it as not yet implemented."""


@dataclass(frozen=True)
class Summary:
    passed: int
    failed: int
    todo: int


@dataclass(frozen=True)
class Outcome:
    kind: str  # pass | fail | todo
    name: str


class AssertionRecorder:
    """Collects the assertions made while one step action runs.

    A recorder is created per dispatch and owns its own output buffer, so
    nothing recorded for one step can leak into another.
    """

    def __init__(self) -> None:
        self._outcomes: list[Outcome] = []
        self._lines: list[str] = []
        self._done = False

    @property
    def output(self) -> str:
        return "\n".join(self._lines) + ("\n" if self._lines else "")

    def _record(self, kind: str, name: str, line: str) -> None:
        if self._done:
            raise RuntimeError("Assertion recorded after done_testing()")
        self._outcomes.append(Outcome(kind=kind, name=name))
        self._lines.append(line)

    def ok(self, passed: object, name: str = "") -> bool:
        number = len(self._outcomes) + 1
        label = f" - {name}" if name else ""
        if passed:
            self._record("pass", name, f"ok {number}{label}")
            return True
        self._record("fail", name, f"not ok {number}{label}")
        return False

    def todo(self, name: str, reason: str = "") -> None:
        number = len(self._outcomes) + 1
        self._record("todo", name, f"not ok {number} - {name} # TODO {reason}".rstrip())

    def diag(self, message: str) -> None:
        for line in str(message).splitlines() or [""]:
            self._lines.append(f"# {line}".rstrip())

    def done_testing(self) -> None:
        if not self._done:
            self._lines.append(f"1..{len(self._outcomes)}")
            self._done = True

    def summarize(self) -> Summary:
        kinds = [o.kind for o in self._outcomes]
        return Summary(passed=kinds.count("pass"), failed=kinds.count("fail"), todo=kinds.count("todo"))


def aggregate(summary: Summary) -> str:
    # fail beats todo beats pass
    if summary.failed:
        return FAILING
    if summary.todo:
        return PENDING
    return PASSING
