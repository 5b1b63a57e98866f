from datetime import datetime

import pytest

from taskrank.config import get_settings


@pytest.fixture
def now():
    """Pinned reference instant for ranking tests."""
    return datetime(2025, 6, 23, 9, 0)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
