"""
Shared fixtures: fresh in-memory storage per test and an engine over it.
"""

import pytest

from filegate.access import FileAccessEngine, build_strategy_registry
from filegate.config import get_settings
from filegate.storage import create_local_storage


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage():
    """Fresh in-memory storage."""
    return create_local_storage()


@pytest.fixture
def entities(storage):
    return storage.entities


@pytest.fixture
def engine(storage):
    """Engine wired with the standard strategy registry."""
    return FileAccessEngine(storage.entities, build_strategy_registry(storage))
