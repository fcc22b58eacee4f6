from __future__ import annotations

from datetime import datetime

import pytest

from tests.memory_store import InMemoryStore


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 2, 2, 10, 15, 0)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
