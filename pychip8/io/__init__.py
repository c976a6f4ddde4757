"""Input handling for the CHIP-8 interpreter."""

from .keypad import KEY_COUNT, KEY_LAYOUT, Keypad, key_index

__all__ = [
    "Keypad",
    "KEY_COUNT",
    "KEY_LAYOUT",
    "key_index",
]
