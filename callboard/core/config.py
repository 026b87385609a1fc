"""
Environment configuration for the callboard backend.
"""

import os
from pathlib import Path

from .errors import ConfigurationError

# Environment selection
APP_ENV = os.getenv("APP_ENV", "development")  # development|test|production

# HTTP server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Debug flag enables the interactive API docs
DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# Database files and autosave cadence per environment
ENVIRONMENTS = {
    "development": {
        "db": os.getenv("DEVELOPMENT_DB_PATH", "./data/development.db"),
        "autosave_interval_ms": int(os.getenv("AUTOSAVE_INTERVAL_MS", "100")),
    },
    "test": {
        "db": os.getenv("TEST_DB_PATH", "./data/test.db"),
        "autosave_interval_ms": 20000,
    },
    "production": {
        "db": os.getenv("PRODUCTION_DB_PATH", "./data/production.db"),
        "autosave_interval_ms": int(os.getenv("AUTOSAVE_INTERVAL_MS", "100")),
    },
}

# Version string
VERSION = "1.0.0"


def current_env() -> str:
    """Get the active environment name, re-reading APP_ENV."""
    return os.getenv("APP_ENV", APP_ENV)


def get_environment(env: str = None) -> dict:
    """Get the settings of the given (or active) environment."""
    env = env or current_env()
    if env not in ENVIRONMENTS:
        raise ConfigurationError("Environment given is not configured. See callboard/core/config.py.")
    return dict(ENVIRONMENTS[env], name=env)


def request_logging_enabled() -> bool:
    """Check if incoming requests should be logged."""
    return current_env() != "test"


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def ensure_db_directory(path: str):
    """Ensure the database directory exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
