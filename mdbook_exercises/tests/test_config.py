# mdbook_exercises/tests/test_config.py
"""Tests for environment defaults and book configuration."""

import logging

from mdbook_exercises.config import (
    DEFAULT_PLAYGROUND_URL,
    BookConfig,
    ParseOptions,
    RenderConfig,
    get_default_language,
    get_log_level,
    get_playground_url,
    load_book_config,
)


class TestEnvironmentDefaults:
    def test_default_language(self):
        assert get_default_language() == "rust"

    def test_default_language_from_env(self, monkeypatch):
        monkeypatch.setenv("EXERCISES_DEFAULT_LANGUAGE", "python")
        assert get_default_language() == "python"

    def test_blank_default_language_falls_back(self, monkeypatch):
        monkeypatch.setenv("EXERCISES_DEFAULT_LANGUAGE", "   ")
        assert get_default_language() == "rust"

    def test_playground_url(self, monkeypatch):
        assert get_playground_url() == DEFAULT_PLAYGROUND_URL
        monkeypatch.setenv("EXERCISES_PLAYGROUND_URL", "https://play.example.org/")
        assert get_playground_url() == "https://play.example.org"

    def test_log_level(self, monkeypatch):
        assert get_log_level() == logging.INFO
        monkeypatch.setenv("EXERCISES_LOG_LEVEL", "debug")
        assert get_log_level() == logging.DEBUG
        monkeypatch.setenv("EXERCISES_LOG_LEVEL", "15")
        assert get_log_level() == 15
        monkeypatch.setenv("EXERCISES_LOG_LEVEL", "chatty")
        assert get_log_level() == logging.INFO

    def test_options_read_env_when_created(self, monkeypatch):
        monkeypatch.setenv("EXERCISES_DEFAULT_LANGUAGE", "go")
        assert ParseOptions().default_language == "go"
        assert ParseOptions(default_language="c").default_language == "c"


class TestLoadBookConfig:
    """Test reading [preprocessor.exercises] from the mdBook context."""

    def test_empty_context(self):
        assert load_book_config({}) == BookConfig()

    def test_preprocessor_table(self):
        context = {
            "config": {
                "preprocessor": {
                    "exercises": {
                        "enabled": True,
                        "manage_assets": True,
                        "default_language": "python",
                        "reveal_hints": True,
                        "reveal_solution": True,
                        "playground": False,
                        "playground_url": "https://play.example.org/",
                        "progress_tracking": False,
                    }
                }
            }
        }
        config = load_book_config(context)
        assert config.manage_assets
        assert config.default_language == "python"
        assert config.render == RenderConfig(
            reveal_hints=True,
            reveal_solution=True,
            enable_playground=False,
            playground_url="https://play.example.org",
            enable_progress=False,
        )

    def test_mistyped_values_use_defaults(self):
        context = {
            "config": {
                "preprocessor": {
                    "exercises": {
                        "enabled": "no",
                        "reveal_hints": 1,
                        "default_language": 42,
                        "playground_url": "",
                    }
                }
            }
        }
        config = load_book_config(context)
        assert config.enabled
        assert not config.render.reveal_hints
        assert config.default_language == "rust"
        assert config.render.playground_url == DEFAULT_PLAYGROUND_URL

    def test_disabled(self):
        context = {"config": {"preprocessor": {"exercises": {"enabled": False}}}}
        assert not load_book_config(context).enabled

    def test_other_preprocessors_ignored(self):
        context = {"config": {"preprocessor": {"links": {"enabled": False}}}}
        assert load_book_config(context).enabled
