from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from cukerun.core.steps_loader import StepLibraryError, load_steps


def _module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, name: str, body: str) -> str:
    (tmp_path / f"{name}.py").write_text(textwrap.dedent(body), encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


def test_loads_triples(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    name = _module(
        tmp_path,
        monkeypatch,
        "loader_ok_steps",
        """
        def noop(context):
            pass

        STEPS = [("Given", "a", noop), ["Then", "b", noop]]
        """,
    )
    steps = load_steps(name)
    assert [(verb, pattern) for verb, pattern, _ in steps] == [("Given", "a"), ("Then", "b")]


def test_missing_module(tmp_path: Path) -> None:
    with pytest.raises(StepLibraryError) as excinfo:
        load_steps("loader_does_not_exist")
    assert excinfo.value.module == "loader_does_not_exist"


def test_module_without_steps(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    name = _module(tmp_path, monkeypatch, "loader_empty_steps", "VALUE = 1\n")
    with pytest.raises(StepLibraryError, match="no STEPS"):
        load_steps(name)


def test_malformed_entry(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    name = _module(tmp_path, monkeypatch, "loader_bad_steps", 'STEPS = [("Given", "a")]\n')
    with pytest.raises(StepLibraryError, match=r"STEPS\[0\]"):
        load_steps(name)


def test_syntax_error_in_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    name = _module(tmp_path, monkeypatch, "loader_syntax_steps", "STEPS = [(\n")
    with pytest.raises(StepLibraryError, match="SyntaxError"):
        load_steps(name)


def test_error_raised_at_import(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    name = _module(tmp_path, monkeypatch, "loader_raising_steps", "STEPS = [undefined_name]\n")
    with pytest.raises(StepLibraryError, match="NameError"):
        load_steps(name)


def test_non_callable_action(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    name = _module(tmp_path, monkeypatch, "loader_uncallable_steps", 'STEPS = [("Given", "a", "nope")]\n')
    with pytest.raises(StepLibraryError, match="not callable"):
        load_steps(name)


def test_non_string_verb(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    name = _module(tmp_path, monkeypatch, "loader_verb_steps", "STEPS = [(1, 'a', print)]\n")
    with pytest.raises(StepLibraryError, match="verb must be a string"):
        load_steps(name)
