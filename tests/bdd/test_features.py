"""Executable BDD scenarios for the execution engine itself.

The feature files under specs/bdd describe engine behaviour in plain
language; pytest-bdd runs them with the step definitions in tests/bdd/steps.py.
"""

from __future__ import annotations

from pytest_bdd import scenarios

# Load all feature files from specs/bdd
scenarios("../../specs/bdd")
