"""Root pytest configuration."""

import pytest

# Settings read by mdbook_exercises.config
EXERCISES_ENV_VARS = (
    "EXERCISES_DEFAULT_LANGUAGE",
    "EXERCISES_PLAYGROUND_URL",
    "EXERCISES_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_exercises_env(monkeypatch):
    """Run every test against the built-in defaults, not the developer's shell."""
    for name in EXERCISES_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
