# mdbook_exercises/preprocessor/assets.py
"""Install the exercise stylesheet and script into a book's theme directory."""

import logging
from importlib.resources import files
from pathlib import Path

logger = logging.getLogger(__name__)

ASSET_FILES = ("exercises.css", "exercises.js")
THEME_DIR = "theme"


def read_asset(name: str) -> str:
    """Contents of a bundled asset (exercises.css / exercises.js)."""
    return (files("mdbook_exercises.preprocessor") / "assets" / name).read_text(
        encoding="utf-8"
    )


def install_assets(source_dir: Path) -> list[Path]:
    """
    Write the bundled assets to `<source_dir>/theme/`, replacing old copies.

    Raises:
        OSError: If the theme directory or a file can't be written

    Returns:
        Paths written
    """
    theme_dir = source_dir / THEME_DIR
    theme_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name in ASSET_FILES:
        target = theme_dir / name
        target.write_text(read_asset(name), encoding="utf-8")
        written.append(target)
    logger.debug(f"Installed exercise assets to {theme_dir}")
    return written


def asset_setup_hint(source_dir: Path) -> str | None:
    """Setup instructions when the theme assets are missing, else None."""
    theme_dir = source_dir / THEME_DIR
    if all((theme_dir / name).exists() for name in ASSET_FILES):
        return None

    return (
        f"Assets not found under '{theme_dir}'. Either enable manage_assets = true "
        "or copy assets manually and reference them in [output.html]: "
        "additional-css=['theme/exercises.css'], additional-js=['theme/exercises.js']"
    )
