# tests/conftest.py - Shared fixtures

import pytest

from layout_stats.layout_utils import build_layout_table

# Left thumb types space, right thumb types an apostrophe
QWERTY = "qwertyuiopasdfghjkl;zxcvbnm,./ '"


@pytest.fixture
def qwerty():
    return QWERTY


@pytest.fixture
def qwerty_table():
    return build_layout_table(QWERTY)
