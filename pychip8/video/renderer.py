"""Convert the CHIP-8 display buffer into RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .display import Display
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB frame produced by :class:`Renderer`."""

    width: int
    height: int
    data: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        return (self.data[offset], self.data[offset + 1], self.data[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(bytes(self.data), (self.width, self.height), "RGB")


class Renderer:
    """Scale the display buffer and paint it with a two-colour palette."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME, *, outline: bool = False) -> None:
        self._background, self._foreground = validate_palette(palette)
        self._outline = outline

    @property
    def outline(self) -> bool:
        return self._outline

    def render(self, display: Display, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        width = display.width * scale
        height = display.height * scale
        background = bytes(self._background)
        foreground = bytes(self._foreground)
        # Outlines need at least one interior pixel per cell to be visible.
        outline = self._outline and scale >= 3

        lit_row = self._cell_row(foreground, background, scale, edge=False, outline=outline)
        edge_row = self._cell_row(foreground, background, scale, edge=True, outline=outline)
        unlit_row = background * scale

        data = bytearray()
        for pixels in display.rows():
            for line in range(scale):
                edge = line == 0 or line == scale - 1
                lit = edge_row if edge else lit_row
                data += b"".join(lit if pixel else unlit_row for pixel in pixels)
        return RenderResult(width, height, data)

    @staticmethod
    def _cell_row(foreground: bytes, background: bytes, scale: int, *, edge: bool, outline: bool) -> bytes:
        if not outline:
            return foreground * scale
        if edge:
            return background * scale
        return background + foreground * (scale - 2) + background
