from __future__ import annotations

import pytest


@pytest.fixture
def user_age_35() -> dict[str, str | None]:
    return {
        "firstname": "Joe",
        "lastname": "Bloggs",
        "role": "administrator",
        "age": "35",
        "testNull": None,
        "testEmpty": "",
    }


@pytest.fixture
def user_age_25() -> dict[str, str | None]:
    return {
        "firstname": "John",
        "lastname": "Doe",
        "role": "administrator",
        "age": "25",
        "height": "1.70",
    }


@pytest.fixture
def user_null() -> dict[str, str | None]:
    """Every field present, every value None."""
    return {
        "firstname": None,
        "lastname": None,
        "role": None,
        "age": None,
    }
