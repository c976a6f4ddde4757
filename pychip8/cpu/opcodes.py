"""Opcode metadata and decoder for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from typing import Final, Iterable, Iterator, List, Sequence

from pychip8.bus.memory import PROGRAM_START


class Operation(Enum):
    """The canonical CHIP-8 behaviours plus a catch-all for unknown words."""

    SYS = auto()
    CLS = auto()
    RET = auto()
    JP = auto()
    CALL = auto()
    SE_BYTE = auto()
    SNE_BYTE = auto()
    SE_REG = auto()
    LD_BYTE = auto()
    ADD_BYTE = auto()
    LD_REG = auto()
    OR = auto()
    AND = auto()
    XOR = auto()
    ADD_REG = auto()
    SUB = auto()
    SHR = auto()
    SUBN = auto()
    SHL = auto()
    SNE_REG = auto()
    LD_I = auto()
    JP_V0 = auto()
    RND = auto()
    DRW = auto()
    SKP = auto()
    SKNP = auto()
    LD_VX_DT = auto()
    LD_VX_K = auto()
    LD_DT_VX = auto()
    LD_ST_VX = auto()
    ADD_I = auto()
    LD_F = auto()
    LD_B = auto()
    LD_MEM_VX = auto()
    LD_VX_MEM = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class OpcodePattern:
    """Mask/value pair that identifies one operation, with its mnemonic."""

    mask: int
    value: int
    operation: Operation
    template: str

    def __post_init__(self) -> None:
        if self.value & ~self.mask:
            raise ValueError(f"pattern {self.value:#06x} has bits outside mask {self.mask:#06x}")

    def matches(self, word: int) -> bool:
        return word & self.mask == self.value


@dataclass(frozen=True)
class Instruction:
    """A fetched 16-bit word split into its operand fields."""

    opcode: int
    nnn: int
    nn: int
    n: int
    x: int
    y: int
    operation: Operation

    @property
    def mnemonic(self) -> str:
        template = _TEMPLATES.get(self.operation, "DW {opcode:#06x}")
        return template.format(
            opcode=self.opcode,
            nnn=self.nnn,
            nn=self.nn,
            n=self.n,
            x=self.x,
            y=self.y,
        )


class PatternTable:
    """Ordered builder for the opcode pattern list."""

    def __init__(self) -> None:
        self._patterns: List[OpcodePattern] = []

    def register(self, pattern: OpcodePattern) -> None:
        for existing in self._patterns:
            if existing.mask == pattern.mask and existing.value == pattern.value:
                raise ValueError(
                    f"pattern {pattern.value:#06x} already registered as {existing.operation.name}")
        self._patterns.append(pattern)

    def register_all(self, patterns: Iterable[OpcodePattern]) -> None:
        for pattern in patterns:
            self.register(pattern)

    def freeze(self) -> Sequence[OpcodePattern]:
        return tuple(self._patterns)


def build_pattern_table(patterns: Iterable[OpcodePattern]) -> Sequence[OpcodePattern]:
    table = PatternTable()
    table.register_all(patterns)
    return table.freeze()


# Exact patterns come before the broader ones they overlap with (00E0 before 0NNN).
DEFAULT_PATTERNS: Sequence[OpcodePattern] = (
    OpcodePattern(0xFFFF, 0x00E0, Operation.CLS, "CLS"),
    OpcodePattern(0xFFFF, 0x00EE, Operation.RET, "RET"),
    OpcodePattern(0xF000, 0x0000, Operation.SYS, "SYS {nnn:#05x}"),
    OpcodePattern(0xF000, 0x1000, Operation.JP, "JP {nnn:#05x}"),
    OpcodePattern(0xF000, 0x2000, Operation.CALL, "CALL {nnn:#05x}"),
    OpcodePattern(0xF000, 0x3000, Operation.SE_BYTE, "SE V{x:X}, {nn:#04x}"),
    OpcodePattern(0xF000, 0x4000, Operation.SNE_BYTE, "SNE V{x:X}, {nn:#04x}"),
    OpcodePattern(0xF00F, 0x5000, Operation.SE_REG, "SE V{x:X}, V{y:X}"),
    OpcodePattern(0xF000, 0x6000, Operation.LD_BYTE, "LD V{x:X}, {nn:#04x}"),
    OpcodePattern(0xF000, 0x7000, Operation.ADD_BYTE, "ADD V{x:X}, {nn:#04x}"),
    OpcodePattern(0xF00F, 0x8000, Operation.LD_REG, "LD V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8001, Operation.OR, "OR V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8002, Operation.AND, "AND V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8003, Operation.XOR, "XOR V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8004, Operation.ADD_REG, "ADD V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8005, Operation.SUB, "SUB V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8006, Operation.SHR, "SHR V{x:X}"),
    OpcodePattern(0xF00F, 0x8007, Operation.SUBN, "SUBN V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x800E, Operation.SHL, "SHL V{x:X}"),
    OpcodePattern(0xF00F, 0x9000, Operation.SNE_REG, "SNE V{x:X}, V{y:X}"),
    OpcodePattern(0xF000, 0xA000, Operation.LD_I, "LD I, {nnn:#05x}"),
    OpcodePattern(0xF000, 0xB000, Operation.JP_V0, "JP V0, {nnn:#05x}"),
    OpcodePattern(0xF000, 0xC000, Operation.RND, "RND V{x:X}, {nn:#04x}"),
    OpcodePattern(0xF000, 0xD000, Operation.DRW, "DRW V{x:X}, V{y:X}, {n}"),
    OpcodePattern(0xF0FF, 0xE09E, Operation.SKP, "SKP V{x:X}"),
    OpcodePattern(0xF0FF, 0xE0A1, Operation.SKNP, "SKNP V{x:X}"),
    OpcodePattern(0xF0FF, 0xF007, Operation.LD_VX_DT, "LD V{x:X}, DT"),
    OpcodePattern(0xF0FF, 0xF00A, Operation.LD_VX_K, "LD V{x:X}, K"),
    OpcodePattern(0xF0FF, 0xF015, Operation.LD_DT_VX, "LD DT, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF018, Operation.LD_ST_VX, "LD ST, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF01E, Operation.ADD_I, "ADD I, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF029, Operation.LD_F, "LD F, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF033, Operation.LD_B, "LD B, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF055, Operation.LD_MEM_VX, "LD [I], V{x:X}"),
    OpcodePattern(0xF0FF, 0xF065, Operation.LD_VX_MEM, "LD V{x:X}, [I]"),
)

PATTERN_TABLE: Final[Sequence[OpcodePattern]] = build_pattern_table(DEFAULT_PATTERNS)

_TEMPLATES = {pattern.operation: pattern.template for pattern in PATTERN_TABLE}


def classify(word: int, patterns: Sequence[OpcodePattern] = PATTERN_TABLE) -> Operation:
    for pattern in patterns:
        if pattern.matches(word):
            return pattern.operation
    return Operation.UNKNOWN


@lru_cache(maxsize=None)
def decode(word: int) -> Instruction:
    """Split ``word`` into its fields. Every 16-bit value decodes."""

    word &= 0xFFFF
    return Instruction(
        opcode=word,
        nnn=word & 0x0FFF,
        nn=word & 0x00FF,
        n=word & 0x000F,
        x=(word >> 8) & 0x0F,
        y=(word >> 4) & 0x0F,
        operation=classify(word),
    )


def disassemble(program: bytes, start: int = PROGRAM_START) -> Iterator[tuple[int, Instruction]]:
    """Yield ``(address, instruction)`` for each whole word in ``program``."""

    for offset in range(0, len(program) - 1, 2):
        word = (program[offset] << 8) | program[offset + 1]
        yield start + offset, decode(word)
