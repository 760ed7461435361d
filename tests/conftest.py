"""Shared pytest fixtures for the quiz test suite."""
import random

import pytest

from factories import make_bank


@pytest.fixture
def bank():
    return make_bank(A=20, B=15)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
