"""CHIP-8 hexadecimal keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


# COSMAC VIP keypad      QWERTY keys
#   1 2 3 C              1 2 3 4
#   4 5 6 D              q w e r
#   7 8 9 E              a s d f
#   A 0 B F              z x c v
KEY_LAYOUT: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


def key_index(key_name: str, layout: Mapping[str, int] = KEY_LAYOUT) -> int | None:
    """Resolve a physical key name to its keypad index, if mapped."""

    name = key_name.lower()
    name = ALIAS_TABLE.get(name, name)
    return layout.get(name)


def _check_index(index: int) -> int:
    if not 0 <= index < KEY_COUNT:
        raise ValueError(f"key index {index} out of range 0x0-0xF")
    return index


@dataclass
class Keypad:
    """Sixteen pressed/released flags written by the input collaborator."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def press(self, index: int) -> None:
        self._set(_check_index(index), True)

    def release(self, index: int) -> None:
        self._set(_check_index(index), False)

    def is_pressed(self, index: int) -> bool:
        return self._keys[_check_index(index)]

    def first_pressed(self) -> int | None:
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def _set(self, index: int, pressed: bool) -> None:
        self._keys[index] = pressed
        if debug_enabled("input"):
            debug_log("input", "keypad key=%X pressed=%s", index, pressed)
