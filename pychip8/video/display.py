"""Monochrome CHIP-8 display buffer."""

from __future__ import annotations

from typing import Iterator, Sequence

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8


class Display:
    """Row-major grid of lit/unlit pixels, indexed ``y * width + x``.

    Only the clear and draw instructions mutate the buffer. Frontends read it
    through :meth:`snapshot` or :meth:`rows` and clear :attr:`dirty` once they
    have presented a frame.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self._width = width
        self._height = height
        self._pixels = bytearray(width * height)
        self.dirty = True

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self.dirty = True

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"pixel ({x}, {y}) outside {self._width}x{self._height} display")
        return y * self._width + x

    def get_pixel(self, x: int, y: int) -> bool:
        return bool(self._pixels[self._index(x, y)])

    def set_pixel(self, x: int, y: int, lit: bool) -> None:
        self._pixels[self._index(x, y)] = 1 if lit else 0
        self.dirty = True

    def xor_pixel(self, x: int, y: int) -> bool:
        """Flip one pixel; return True when a lit pixel was turned off."""

        index = self._index(x, y)
        was_lit = self._pixels[index] == 1
        self._pixels[index] ^= 1
        self.dirty = True
        return was_lit

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """XOR an 8-pixel-wide sprite onto the buffer.

        The origin wraps onto the screen, the sprite body is clipped at the
        right and bottom edges. Returns True if any lit pixel was erased.
        """

        origin_x = x % self._width
        origin_y = y % self._height
        collision = False
        for row_offset, bits in enumerate(rows):
            py = origin_y + row_offset
            if py >= self._height:
                break
            for bit in range(SPRITE_WIDTH):
                px = origin_x + bit
                if px >= self._width:
                    break
                if bits & (0x80 >> bit):
                    if self.xor_pixel(px, py):
                        collision = True
        return collision

    def rows(self) -> Iterator[tuple[bool, ...]]:
        for y in range(self._height):
            start = y * self._width
            yield tuple(bool(value) for value in self._pixels[start : start + self._width])

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(bool(value) for value in self._pixels)
