"""
Shared fixtures: a test environment pointing at a temporary database file.
"""

import os
import tempfile

import pytest

# Set up test environment with temporary database before the package is imported
TEST_DB_PATH = tempfile.mkstemp(suffix='.db')[1]
os.environ['APP_ENV'] = 'test'
os.environ['TEST_DB_PATH'] = TEST_DB_PATH

from callboard.core.db import Database
from callboard.core.model import Model


@pytest.fixture
def db(tmp_path):
    """Provide a fresh database bound to the model layer."""
    database = Database(str(tmp_path / "models.db"), autosave=False).load()
    Model.bind(database)
    yield database
    Model.unbind()


@pytest.fixture
def clock():
    """Pin the store clock; tests advance it by assigning clock.now."""
    from unittest.mock import patch

    class Clock:
        now = 1_700_000_000_000

    with patch("callboard.core.store._now_ms", side_effect=lambda: Clock.now):
        yield Clock
