"""Renderers that draw a calendar page from the component's state."""

from .layout import DEFAULT_LAYOUT, GridLayout
from .renderer import CalendarRenderer, RendererConfig
from .text import render_text

__all__ = [
    "CalendarRenderer",
    "DEFAULT_LAYOUT",
    "GridLayout",
    "RendererConfig",
    "render_text",
]
