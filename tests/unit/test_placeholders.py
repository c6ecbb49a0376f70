from __future__ import annotations

import pytest

from cukerun.core.placeholders import UnresolvedPlaceholder, substitute


def test_substitutes_every_placeholder() -> None:
    assert substitute("I add <a> and <b>", {"a": 1, "b": "two"}) == "I add 1 and two"


def test_text_without_placeholders_is_unchanged() -> None:
    text = "a plain step: with punctuation (and brackets) > 3"
    assert substitute(text, {}) == text
    assert substitute(text) == text


def test_missing_key_raises_with_key_and_text() -> None:
    with pytest.raises(UnresolvedPlaceholder) as excinfo:
        substitute("I have <count> cukes", {"other": 1})
    assert excinfo.value.placeholder == "count"
    assert excinfo.value.text == "I have <count> cukes"
    assert "No mapping to placeholder <count> in: I have <count> cukes" in str(excinfo.value)


def test_non_outline_text_with_placeholder_fails() -> None:
    with pytest.raises(UnresolvedPlaceholder):
        substitute("I have <count> cukes")


def test_values_are_not_expanded_again() -> None:
    assert substitute("<a>", {"a": "<b>", "b": "nope"}) == "<b>"


def test_escaped_placeholder_is_literal() -> None:
    assert substitute(r"literal \<a> and <a>", {"a": "x"}) == "literal <a> and x"
