from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema

from cukerun.core.model import Feature, Scenario, Step

# Shape of an already-parsed feature. Gherkin parsing happens elsewhere.
_STEP_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["verb", "text"],
    "properties": {
        "verb": {"type": "string", "minLength": 1},
        "text": {"type": "string"},
        "data": {},
        "line": {"type": "integer"},
    },
    "additionalProperties": False,
}

_SCENARIO_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["steps"],
    "properties": {
        "name": {"type": "string"},
        "steps": {"type": "array", "items": _STEP_SCHEMA},
        "data": {"type": "array", "items": {"type": "object"}},
        "tags": {"type": "array", "items": {"type": "string"}},
    },
    "additionalProperties": False,
}

FEATURE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name", "scenarios"],
    "properties": {
        "name": {"type": "string"},
        "tags": {"type": "array", "items": {"type": "string"}},
        "background": _SCENARIO_SCHEMA,
        "scenarios": {"type": "array", "items": _SCENARIO_SCHEMA},
    },
    "additionalProperties": False,
}


def _step(raw: Dict[str, Any]) -> Step:
    return Step(verb=raw["verb"], text=raw["text"], data=raw.get("data"), line=raw.get("line"))


def _scenario(raw: Dict[str, Any], *, background: bool = False) -> Scenario:
    return Scenario(
        name=raw.get("name", "Background" if background else ""),
        steps=[_step(s) for s in raw["steps"]],
        data=[] if background else [dict(row) for row in raw.get("data", [])],
        background=background,
        tags=list(raw.get("tags", [])),
    )


def feature_from_dict(doc: Dict[str, Any]) -> Feature:
    try:
        jsonschema.validate(doc, FEATURE_SCHEMA)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ValueError(f"Invalid feature document at {location}: {exc.message}") from exc
    background = doc.get("background")
    return Feature(
        name=doc["name"],
        scenarios=[_scenario(s) for s in doc["scenarios"]],
        background=_scenario(background, background=True) if background is not None else None,
        tags=list(doc.get("tags", [])),
    )


def load_feature(path: str | Path) -> Feature:
    p = Path(path).expanduser()
    try:
        doc = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Feature file is not valid JSON: {p}") from exc
    return feature_from_dict(doc)
