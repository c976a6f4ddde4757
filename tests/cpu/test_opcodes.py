"""Tests for the CHIP-8 instruction decoder."""

from __future__ import annotations

import pytest

from pychip8.cpu import Operation, decode, disassemble
from pychip8.cpu.opcodes import DEFAULT_PATTERNS, OpcodePattern, PATTERN_TABLE, PatternTable


def test_field_extraction() -> None:
    instruction = decode(0xD123)

    assert instruction.opcode == 0xD123
    assert instruction.nnn == 0x123
    assert instruction.nn == 0x23
    assert instruction.n == 0x3
    assert instruction.x == 0x1
    assert instruction.y == 0x2
    assert instruction.operation is Operation.DRW


def test_decode_is_total_over_all_words() -> None:
    for word in range(0x10000):
        instruction = decode(word)
        assert instruction.opcode == word
        assert instruction.nnn == word & 0xFFF
        assert instruction.x == (word >> 8) & 0xF
        assert instruction.y == (word >> 4) & 0xF


def test_decode_masks_to_sixteen_bits() -> None:
    assert decode(0x1_6005).opcode == 0x6005


@pytest.mark.parametrize(
    ("word", "operation"),
    [
        (0x00E0, Operation.CLS),
        (0x00EE, Operation.RET),
        (0x0123, Operation.SYS),
        (0x1ABC, Operation.JP),
        (0x2ABC, Operation.CALL),
        (0x3A12, Operation.SE_BYTE),
        (0x4A12, Operation.SNE_BYTE),
        (0x5AB0, Operation.SE_REG),
        (0x6A12, Operation.LD_BYTE),
        (0x7A12, Operation.ADD_BYTE),
        (0x8AB0, Operation.LD_REG),
        (0x8AB1, Operation.OR),
        (0x8AB2, Operation.AND),
        (0x8AB3, Operation.XOR),
        (0x8AB4, Operation.ADD_REG),
        (0x8AB5, Operation.SUB),
        (0x8AB6, Operation.SHR),
        (0x8AB7, Operation.SUBN),
        (0x8ABE, Operation.SHL),
        (0x9AB0, Operation.SNE_REG),
        (0xA123, Operation.LD_I),
        (0xB123, Operation.JP_V0),
        (0xCA12, Operation.RND),
        (0xDAB5, Operation.DRW),
        (0xEA9E, Operation.SKP),
        (0xEAA1, Operation.SKNP),
        (0xFA07, Operation.LD_VX_DT),
        (0xFA0A, Operation.LD_VX_K),
        (0xFA15, Operation.LD_DT_VX),
        (0xFA18, Operation.LD_ST_VX),
        (0xFA1E, Operation.ADD_I),
        (0xFA29, Operation.LD_F),
        (0xFA33, Operation.LD_B),
        (0xFA55, Operation.LD_MEM_VX),
        (0xFA65, Operation.LD_VX_MEM),
    ],
)
def test_operation_classification(word: int, operation: Operation) -> None:
    assert decode(word).operation is operation


def test_every_canonical_operation_has_a_pattern() -> None:
    covered = {pattern.operation for pattern in PATTERN_TABLE}
    assert covered == set(Operation) - {Operation.UNKNOWN}
    assert len(covered) == 35


@pytest.mark.parametrize("word", [0x5AB1, 0x9ABF, 0x8AB8, 0x8ABF, 0xEA00, 0xFA00, 0xFAFF])
def test_unused_encodings_decode_as_unknown(word: int) -> None:
    assert decode(word).operation is Operation.UNKNOWN


@pytest.mark.parametrize(
    ("word", "mnemonic"),
    [
        (0x00E0, "CLS"),
        (0x6005, "LD V0, 0x05"),
        (0x8AB4, "ADD VA, VB"),
        (0xD123, "DRW V1, V2, 3"),
        (0xA2F0, "LD I, 0x2f0"),
        (0xFB55, "LD [I], VB"),
        (0x5AB1, "DW 0x5ab1"),
    ],
)
def test_mnemonics(word: int, mnemonic: str) -> None:
    assert decode(word).mnemonic == mnemonic


def test_disassemble_walks_words_and_ignores_trailing_byte() -> None:
    listing = list(disassemble(b"\x60\x05\x70\x03\xFF"))

    assert [address for address, _ in listing] == [0x200, 0x202]
    assert [instruction.mnemonic for _, instruction in listing] == ["LD V0, 0x05", "ADD V0, 0x03"]


def test_pattern_table_rejects_duplicates() -> None:
    table = PatternTable()
    table.register_all(DEFAULT_PATTERNS[:2])

    with pytest.raises(ValueError):
        table.register(DEFAULT_PATTERNS[0])


def test_pattern_value_must_fit_mask() -> None:
    with pytest.raises(ValueError):
        OpcodePattern(0xF000, 0x1234, Operation.JP, "JP")
