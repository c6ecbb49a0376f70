from __future__ import annotations

import re

import ulid

RUN_ULID_RE = re.compile(r"^run_[0-9A-Z]{26}$")


def run_id_ulid() -> str:
    return f"run_{ulid.new()}"


def is_run_id(value: str) -> bool:
    return bool(RUN_ULID_RE.fullmatch(value))
