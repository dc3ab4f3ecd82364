"""
Centralized configuration for the exercises preprocessor.

Provides environment-aware defaults for the parser and renderer, and
reads the `[preprocessor.exercises]` table that mdBook passes in its
JSON context.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any

DEFAULT_LANGUAGE = "rust"
DEFAULT_PLAYGROUND_URL = "https://play.rust-lang.org"


def get_default_language() -> str:
    """Language used for code blocks that don't declare one."""
    return os.getenv("EXERCISES_DEFAULT_LANGUAGE", "").strip() or DEFAULT_LANGUAGE


def get_playground_url() -> str:
    """Get the code playground URL from env or default."""
    return os.getenv("EXERCISES_PLAYGROUND_URL", DEFAULT_PLAYGROUND_URL).rstrip("/")


def get_log_level() -> int:
    """Get the CLI log level from env (name or number), defaulting to INFO."""
    value = os.getenv("EXERCISES_LOG_LEVEL", "INFO").strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO


@dataclass
class RenderConfig:
    """Options that control how a parsed exercise is rendered to HTML."""

    reveal_hints: bool = False  # Show all hints expanded
    reveal_solution: bool = False  # Show on-demand solutions expanded
    enable_playground: bool = True
    playground_url: str = field(default_factory=get_playground_url)
    enable_progress: bool = True  # Completion button + localStorage tracking


@dataclass
class BookConfig:
    """Preprocessor settings for one book build."""

    enabled: bool = True
    manage_assets: bool = False
    default_language: str = field(default_factory=get_default_language)
    render: RenderConfig = field(default_factory=RenderConfig)


def _bool_option(options: dict[str, Any], key: str, default: bool) -> bool:
    value = options.get(key)
    return value if isinstance(value, bool) else default


def load_book_config(context: dict[str, Any]) -> BookConfig:
    """
    Build a BookConfig from the mdBook preprocessor context.

    Args:
        context: The context object mdBook writes to the preprocessor's stdin

    Returns:
        BookConfig with defaults for anything missing or mistyped
    """
    config = BookConfig()
    preprocessors = (context.get("config") or {}).get("preprocessor") or {}
    options = preprocessors.get("exercises")
    if not isinstance(options, dict):
        return config

    config.enabled = _bool_option(options, "enabled", True)
    config.manage_assets = _bool_option(options, "manage_assets", False)

    language = options.get("default_language")
    if isinstance(language, str) and language.strip():
        config.default_language = language.strip()

    render = config.render
    render.reveal_hints = _bool_option(options, "reveal_hints", False)
    render.reveal_solution = _bool_option(options, "reveal_solution", False)
    render.enable_playground = _bool_option(options, "playground", True)
    render.enable_progress = _bool_option(options, "progress_tracking", True)

    playground_url = options.get("playground_url")
    if isinstance(playground_url, str) and playground_url.strip():
        render.playground_url = playground_url.strip().rstrip("/")

    return config


@dataclass
class ParseOptions:
    """Settings threaded through the exercise parser."""

    default_language: str = field(default_factory=get_default_language)
    strict: bool = False  # Repeated single-occurrence blocks raise instead of last-wins
