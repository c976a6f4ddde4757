"""Memory image for the CHIP-8 interpreter.

The CHIP-8 address space is a flat 4 KiB byte array. The low 512 bytes are
reserved for the interpreter (the built-in font lives at the bottom) and
program images are copied in starting at ``0x200``. Unlike the masked buses of
larger machines, every access here is bounds-checked: touching an address
outside the array is a fatal error rather than a silent wraparound.
"""

from __future__ import annotations

MEMORY_SIZE = 0x1000
FONT_START = 0x000
PROGRAM_START = 0x200


class MemoryError(Exception):
    """Raised when the memory image is used incorrectly."""


class OutOfBoundsError(MemoryError):
    """Raised when an address falls outside the memory image."""

    def __init__(self, address: int, size: int = MEMORY_SIZE) -> None:
        super().__init__(f"address {address:#06x} outside memory 0x000-{size - 1:#05x}")
        self.address = address


class CapacityExceededError(MemoryError):
    """Raised when a program image does not fit above ``PROGRAM_START``."""

    def __init__(self, length: int, capacity: int) -> None:
        super().__init__(f"program of {length} bytes exceeds available memory ({capacity} bytes)")
        self.length = length
        self.capacity = capacity


class Memory:
    """Byte-addressable CHIP-8 memory."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size <= PROGRAM_START:
            raise MemoryError(f"memory size {size} leaves no room for programs")
        self._size = size
        self._data = bytearray(size)

    @property
    def size(self) -> int:
        return self._size

    @property
    def program_capacity(self) -> int:
        return self._size - PROGRAM_START

    def _check(self, address: int, length: int = 1) -> None:
        if address < 0 or address + length > self._size:
            bad = address if address < 0 or address >= self._size else self._size
            raise OutOfBoundsError(bad, self._size)

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def read_block(self, address: int, length: int) -> bytes:
        if length <= 0:
            return b""
        self._check(address, length)
        return bytes(self._data[address : address + length])

    def load_block(self, address: int, data: bytes) -> None:
        if not data:
            return
        self._check(address, len(data))
        self._data[address : address + len(data)] = data

    def load(self, font: bytes, program: bytes) -> None:
        """Clear memory, then copy ``font`` and ``program`` into place."""

        if len(program) > self.program_capacity:
            raise CapacityExceededError(len(program), self.program_capacity)
        if len(font) > PROGRAM_START - FONT_START:
            raise MemoryError(f"font of {len(font)} bytes overlaps the program area")
        self._data[:] = bytes(self._size)
        self.load_block(FONT_START, font)
        self.load_block(PROGRAM_START, program)

    def snapshot(self) -> bytes:
        return bytes(self._data)
