"""Unit tests for the CHIP-8 video renderer."""

from __future__ import annotations

import pytest

from pychip8.video import Display, Renderer
from pychip8.video.palette import parse_color, validate_palette

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def test_render_single_pixel() -> None:
    display = Display()
    display.set_pixel(1, 0, True)

    result = Renderer().render(display)

    assert result.width == 64
    assert result.height == 32
    assert result.get_pixel(0, 0) == BLACK
    assert result.get_pixel(1, 0) == WHITE
    assert len(result.data) == 64 * 32 * 3


def test_render_scale_factor() -> None:
    display = Display()
    display.set_pixel(0, 0, True)

    result = Renderer().render(display, scale=4)

    assert result.width == 256
    assert result.height == 128
    assert result.get_pixel(3, 3) == WHITE
    assert result.get_pixel(4, 0) == BLACK
    assert result.get_pixel(0, 4) == BLACK


def test_render_custom_palette() -> None:
    display = Display(2, 1)
    display.set_pixel(0, 0, True)
    palette = ((0x10, 0x20, 0x30), (0xAA, 0xBB, 0xCC))

    result = Renderer(palette).render(display)

    assert result.get_pixel(0, 0) == (0xAA, 0xBB, 0xCC)
    assert result.get_pixel(1, 0) == (0x10, 0x20, 0x30)


def test_outline_draws_background_border_around_lit_pixels() -> None:
    display = Display(2, 1)
    display.set_pixel(0, 0, True)

    result = Renderer(outline=True).render(display, scale=4)

    assert result.get_pixel(0, 0) == BLACK
    assert result.get_pixel(3, 1) == BLACK
    assert result.get_pixel(1, 3) == BLACK
    assert result.get_pixel(1, 1) == WHITE
    assert result.get_pixel(2, 2) == WHITE


def test_outline_ignored_at_small_scale() -> None:
    display = Display(1, 1)
    display.set_pixel(0, 0, True)

    result = Renderer(outline=True).render(display, scale=2)

    assert result.get_pixel(0, 0) == WHITE


def test_invalid_scale_and_pixel() -> None:
    result = Renderer().render(Display(1, 1))

    with pytest.raises(ValueError):
        Renderer().render(Display(), scale=0)
    with pytest.raises(IndexError):
        result.get_pixel(1, 0)


def test_palette_helpers() -> None:
    assert parse_color("#FF8000") == (0xFF, 0x80, 0x00)
    assert parse_color("00ff00") == (0, 0xFF, 0)
    with pytest.raises(ValueError):
        parse_color("FFF")
    with pytest.raises(ValueError):
        parse_color("GGGGGG")
    with pytest.raises(ValueError):
        validate_palette([(0, 0, 0)])
