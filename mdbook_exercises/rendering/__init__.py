"""HTML rendering of parsed exercises."""

from .renderer import is_revealed, render, render_exercise, render_usecase

__all__ = ["is_revealed", "render", "render_exercise", "render_usecase"]
