"""Palette definitions for CHIP-8 rendering."""

from __future__ import annotations

from typing import Sequence, Tuple

RGBColor = Tuple[int, int, int]


MONOCHROME: Tuple[RGBColor, RGBColor] = ((0, 0, 0), (0xFF, 0xFF, 0xFF))


def validate_palette(palette: Sequence[RGBColor]) -> Tuple[RGBColor, RGBColor]:
    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (background and foreground)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    return tuple(tuple(int(channel) & 0xFF for channel in color) for color in palette)  # type: ignore[return-value]


def parse_color(text: str) -> RGBColor:
    """Parse ``RRGGBB`` or ``#RRGGBB`` into an RGB tuple."""

    value = text.strip().lstrip("#")
    if len(value) != 6:
        raise ValueError(f"colour must have six hex digits: {text!r}")
    try:
        packed = int(value, 16)
    except ValueError as exc:
        raise ValueError(f"invalid colour: {text!r}") from exc
    return ((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)
