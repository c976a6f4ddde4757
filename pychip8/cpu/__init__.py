"""CPU package for the CHIP-8 interpreter."""

from .core import Chip8CPU, CPUError, CPUState, StackOverflowError, StackUnderflowError
from .opcodes import Instruction, Operation, decode, disassemble
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "StackOverflowError",
    "StackUnderflowError",
    "Instruction",
    "Operation",
    "decode",
    "disassemble",
    "opcodes",
]
