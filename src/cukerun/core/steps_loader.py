from __future__ import annotations

import importlib
import re
from typing import Any

from loguru import logger

from cukerun.core.registry import StepAction


class StepLibraryError(RuntimeError):
    def __init__(self, module: str, reason: str) -> None:
        super().__init__(f"Cannot load step library {module!r}: {reason}")
        self.module = module
        self.reason = reason


def load_steps(module_name: str) -> list[tuple[str, str | re.Pattern[str], StepAction]]:
    """Import `module_name` and return the `(verb, pattern, action)` triples in its `STEPS`."""
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:
        # Step libraries are user code: syntax errors and import-time failures land here too.
        raise StepLibraryError(module_name, f"{type(exc).__name__}: {exc}") from exc

    steps: Any = getattr(module, "STEPS", None)
    if steps is None:
        raise StepLibraryError(module_name, "module has no STEPS attribute")

    triples = []
    for i, entry in enumerate(steps):
        if not isinstance(entry, (tuple, list)) or len(entry) != 3:
            raise StepLibraryError(module_name, f"STEPS[{i}] is not a (verb, pattern, action) triple")
        verb, pattern, action = entry
        if not isinstance(verb, str):
            raise StepLibraryError(module_name, f"STEPS[{i}] verb must be a string, got {type(verb).__name__}")
        if not isinstance(pattern, (str, re.Pattern)):
            raise StepLibraryError(module_name, f"STEPS[{i}] pattern must be text or a compiled regex")
        if not callable(action):
            raise StepLibraryError(module_name, f"STEPS[{i}] action is not callable")
        triples.append((verb, pattern, action))
    logger.debug("Loaded {} step definitions from {}", len(triples), module_name)
    return triples
