"""Shared fixtures for the whodunit test suite."""
from datetime import date

import pytest

from whodunit.cases.generator import generate_case
from whodunit.content import load_content
from whodunit.investigation.actions import new_ledger

SCENARIO_SEED = 20240615


@pytest.fixture
def tables():
    return load_content()


@pytest.fixture
def case():
    """A fresh copy of the reference case, so disclosure state never leaks between tests."""
    return generate_case(SCENARIO_SEED, today=date(2024, 6, 15))


@pytest.fixture
def ledger(case):
    return new_ledger(case)


def find_case(predicate, seeds=range(1, 400)):
    """First generated case satisfying ``predicate``."""
    for seed in seeds:
        candidate = generate_case(seed, today=date(2024, 6, 15))
        if predicate(candidate):
            return candidate
    raise AssertionError("no seed in range produced a matching case")
