"""
Campus services - test configuration and fixtures
"""
import os
from datetime import date

import pytest

# Set testing environment before the package reads its config
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CAMPUS_SEED_FIXTURES"] = "true"
os.environ["CAMPUS_TOP_CATEGORIES"] = "5"

from campus_services.data import CampusState, bootstrap
from campus_services.directory import UserDirectory
from campus_services.store import RequestStore


class FixedClock:
    """Stands in for date.today so submissions get predictable dates."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def state() -> CampusState:
    """Fresh seeded directory + store for each test"""
    return bootstrap(seed=True)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(date(2023, 10, 26))


@pytest.fixture
def store(clock) -> RequestStore:
    """Empty store whose submissions are dated 2023-10-26"""
    return RequestStore(clock=clock)


@pytest.fixture
def seeded_store(state) -> RequestStore:
    return state.store


@pytest.fixture
def directory(state) -> UserDirectory:
    return state.directory
