"""Display state and rendering helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH, Display
from .font import FONT, FONT_HEIGHT, FONT_WIDTH, GLYPH_BYTES
from .palette import MONOCHROME, parse_color, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "FONT",
    "FONT_WIDTH",
    "FONT_HEIGHT",
    "GLYPH_BYTES",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "parse_color",
    "validate_palette",
]
