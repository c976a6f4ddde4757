"""Raw ROM image loader for CHIP-8 programs."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE, PROGRAM_START
from pychip8.utils import debug_enabled, debug_log

MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be used as a CHIP-8 program."""


def load_rom(stream: BinaryIO) -> bytes:
    """Read a ROM image from ``stream``.

    CHIP-8 ROMs carry no header; the whole stream is the program. Size limits
    are enforced when the image is copied into memory.
    """

    data = stream.read()
    if not data:
        raise RomFormatError("ROM image is empty")
    if debug_enabled("loader"):
        debug_log("loader", "rom bytes=%d max=%d", len(data), MAX_ROM_SIZE)
    return bytes(data)


def load_rom_from_path(path: Path) -> bytes:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        try:
            return load_rom(handle)
        except RomFormatError as exc:
            raise RomFormatError(f"{path}: {exc}") from exc
