"""mdBook preprocessor integration."""

from .book import process_book, process_chapter, replace_exercise_region, supports_renderer
from .includes import expand_includes
from .assets import asset_setup_hint, install_assets

__all__ = [
    "process_book",
    "process_chapter",
    "replace_exercise_region",
    "supports_renderer",
    "expand_includes",
    "asset_setup_hint",
    "install_assets",
]
