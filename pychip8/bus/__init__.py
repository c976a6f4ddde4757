"""Memory bus for the CHIP-8 interpreter."""

from .memory import (
    FONT_START,
    MEMORY_SIZE,
    PROGRAM_START,
    CapacityExceededError,
    Memory,
    MemoryError,
    OutOfBoundsError,
)

__all__ = [
    "Memory",
    "MemoryError",
    "OutOfBoundsError",
    "CapacityExceededError",
    "MEMORY_SIZE",
    "FONT_START",
    "PROGRAM_START",
]
