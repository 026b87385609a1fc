"""
Configuration tests - environments and environment-dependent switches.
"""

import os
from unittest.mock import patch

import pytest

from callboard.core import config
from callboard.core.errors import ConfigurationError


def test_active_environment_is_test():
    settings = config.get_environment()
    assert settings["name"] == "test"
    assert settings["db"] == os.environ["TEST_DB_PATH"]


def test_test_environment_autosaves_rarely():
    assert config.get_environment("test")["autosave_interval_ms"] == 20000


@pytest.mark.parametrize("env", ["development", "test", "production"])
def test_configured_environments_have_a_db(env):
    assert config.get_environment(env)["db"].endswith(".db")


def test_unknown_environment_is_rejected():
    with pytest.raises(ConfigurationError, match="Environment given is not configured"):
        config.get_environment("myEnv")


def test_request_logging_is_disabled_in_test():
    assert config.request_logging_enabled() is False
    with patch.dict(os.environ, {"APP_ENV": "development"}):
        assert config.request_logging_enabled() is True


def test_ensure_db_directory_creates_parents(tmp_path):
    target = tmp_path / "nested" / "dir" / "callboard.db"
    config.ensure_db_directory(str(target))
    assert target.parent.is_dir()
