"""CHIP-8 instruction executor."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List

from pychip8.bus import FONT_START, Memory, PROGRAM_START
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Display
from pychip8.video.font import glyph_offset

from .opcodes import Instruction, Operation, decode


class CPUError(Exception):
    """Base error for CPU-related failures."""


class StackOverflowError(CPUError):
    """Raised when a call would exceed the configured stack depth."""


class StackUnderflowError(CPUError):
    """Raised when a return executes with an empty call stack."""


REGISTER_COUNT = 16
FLAG = 0xF
DEFAULT_STACK_DEPTH = 12


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x000
    pc: int = PROGRAM_START
    stack: List[int] = field(default_factory=list)
    delay_timer: int = 0
    sound_timer: int = 0

    def clone(self) -> "CPUState":
        return CPUState(
            bytearray(self.v),
            self.i,
            self.pc,
            list(self.stack),
            self.delay_timer,
            self.sound_timer,
        )


_HANDLERS: Dict[Operation, str] = {
    Operation.SYS: "op_sys",
    Operation.CLS: "op_cls",
    Operation.RET: "op_ret",
    Operation.JP: "op_jp",
    Operation.CALL: "op_call",
    Operation.SE_BYTE: "op_se_byte",
    Operation.SNE_BYTE: "op_sne_byte",
    Operation.SE_REG: "op_se_reg",
    Operation.LD_BYTE: "op_ld_byte",
    Operation.ADD_BYTE: "op_add_byte",
    Operation.LD_REG: "op_ld_reg",
    Operation.OR: "op_or",
    Operation.AND: "op_and",
    Operation.XOR: "op_xor",
    Operation.ADD_REG: "op_add_reg",
    Operation.SUB: "op_sub",
    Operation.SHR: "op_shr",
    Operation.SUBN: "op_subn",
    Operation.SHL: "op_shl",
    Operation.SNE_REG: "op_sne_reg",
    Operation.LD_I: "op_ld_i",
    Operation.JP_V0: "op_jp_v0",
    Operation.RND: "op_rnd",
    Operation.DRW: "op_drw",
    Operation.SKP: "op_skp",
    Operation.SKNP: "op_sknp",
    Operation.LD_VX_DT: "op_ld_vx_dt",
    Operation.LD_VX_K: "op_ld_vx_k",
    Operation.LD_DT_VX: "op_ld_dt_vx",
    Operation.LD_ST_VX: "op_ld_st_vx",
    Operation.ADD_I: "op_add_i",
    Operation.LD_F: "op_ld_f",
    Operation.LD_B: "op_ld_b",
    Operation.LD_MEM_VX: "op_ld_mem_vx",
    Operation.LD_VX_MEM: "op_ld_vx_mem",
    Operation.UNKNOWN: "op_unknown",
}


@dataclass
class Chip8CPU:
    """Fetch/decode/execute engine operating on memory, display and keypad."""

    memory: Memory
    display: Display
    keypad: Keypad
    stack_depth: int = DEFAULT_STACK_DEPTH
    rng: random.Random = field(default_factory=random.Random)

    state: CPUState = field(default_factory=CPUState)
    instruction_count: int = 0
    waiting_for_key: bool = False

    def __post_init__(self) -> None:
        if self.stack_depth <= 0:
            raise ValueError("stack depth must be positive")
        self._dispatch: Dict[Operation, Callable[[Instruction], None]] = {}
        for operation, name in _HANDLERS.items():
            handler = getattr(self, name, None)
            if handler is None:
                raise CPUError(f"handler '{name}' not implemented")
            self._dispatch[operation] = handler

    def reset(self) -> None:
        """Zero the register file and point PC at the program entry."""

        self.state = CPUState()
        self.instruction_count = 0
        self.waiting_for_key = False

    def fetch(self) -> int:
        """Read the big-endian word at PC and advance PC past it."""

        word = self.memory.load16(self.state.pc)
        self.state.pc = (self.state.pc + 2) & 0xFFFF
        return word

    def step(self) -> Instruction:
        """Execute a single instruction and return it."""

        pc_before = self.state.pc
        instruction = decode(self.fetch())
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, instruction.opcode, instruction.mnemonic)
        self.execute(instruction)
        return instruction

    def execute(self, instruction: Instruction) -> None:
        self._dispatch[instruction.operation](instruction)
        self.instruction_count += 1

    # ------------------------------------------------------------------
    # Flow control

    def op_sys(self, _: Instruction) -> None:
        """Machine-code call on the COSMAC VIP; ignored."""

    def op_unknown(self, instruction: Instruction) -> None:
        if debug_enabled("cpu"):
            debug_log("cpu", "unknown opcode %04x ignored", instruction.opcode)

    def op_cls(self, _: Instruction) -> None:
        self.display.clear()

    def op_ret(self, _: Instruction) -> None:
        if not self.state.stack:
            raise StackUnderflowError(f"return with empty stack at pc={self.state.pc - 2:#05x}")
        self.state.pc = self.state.stack.pop()

    def op_jp(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        if len(self.state.stack) >= self.stack_depth:
            raise StackOverflowError(
                f"call to {instruction.nnn:#05x} exceeds stack depth {self.stack_depth}")
        self.state.stack.append(self.state.pc)
        self.state.pc = instruction.nnn

    def op_jp_v0(self, instruction: Instruction) -> None:
        self.state.pc = (self.state.v[0] + instruction.nnn) & 0xFFFF

    # ------------------------------------------------------------------
    # Conditional skips

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.state.pc = (self.state.pc + 2) & 0xFFFF

    def op_se_byte(self, instruction: Instruction) -> None:
        self._skip_if(self.state.v[instruction.x] == instruction.nn)

    def op_sne_byte(self, instruction: Instruction) -> None:
        self._skip_if(self.state.v[instruction.x] != instruction.nn)

    def op_se_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        self._skip_if(v[instruction.x] == v[instruction.y])

    def op_sne_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        self._skip_if(v[instruction.x] != v[instruction.y])

    def op_skp(self, instruction: Instruction) -> None:
        self._skip_if(self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F))

    def op_sknp(self, instruction: Instruction) -> None:
        self._skip_if(not self.keypad.is_pressed(self.state.v[instruction.x] & 0x0F))

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_byte(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.nn

    def op_add_byte(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.nn) & 0xFF

    def op_ld_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.y]

    def op_or(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.x] | v[instruction.y]

    def op_and(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.x] & v[instruction.y]

    def op_xor(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.x] ^ v[instruction.y]

    # The flag is written after the result so VF ends up holding the flag
    # when X is F.

    def op_add_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        v[instruction.x] = total & 0xFF
        v[FLAG] = 1 if total > 0xFF else 0

    def op_sub(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vx - vy) & 0xFF
        v[FLAG] = 1 if vx >= vy else 0

    def op_subn(self, instruction: Instruction) -> None:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        v[instruction.x] = (vy - vx) & 0xFF
        v[FLAG] = 1 if vy >= vx else 0

    def op_shr(self, instruction: Instruction) -> None:
        v = self.state.v
        vx = v[instruction.x]
        v[instruction.x] = vx >> 1
        v[FLAG] = vx & 0x01

    def op_shl(self, instruction: Instruction) -> None:
        v = self.state.v
        vx = v[instruction.x]
        v[instruction.x] = (vx << 1) & 0xFF
        v[FLAG] = (vx & 0x80) >> 7

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.rng.randrange(0x100) & instruction.nn

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.i = instruction.nnn

    def op_add_i(self, instruction: Instruction) -> None:
        self.state.i = (self.state.i + self.state.v[instruction.x]) & 0x0FFF

    def op_ld_f(self, instruction: Instruction) -> None:
        self.state.i = FONT_START + glyph_offset(self.state.v[instruction.x])

    def op_ld_b(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        digits = bytes((value // 100, (value // 10) % 10, value % 10))
        self.memory.load_block(self.state.i, digits)

    def op_ld_mem_vx(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.memory.load_block(self.state.i, bytes(self.state.v[:count]))

    def op_ld_vx_mem(self, instruction: Instruction) -> None:
        count = instruction.x + 1
        self.state.v[:count] = self.memory.read_block(self.state.i, count)

    # ------------------------------------------------------------------
    # Display, keypad and timers

    def op_drw(self, instruction: Instruction) -> None:
        v = self.state.v
        rows = self.memory.read_block(self.state.i, instruction.n)
        collision = self.display.draw_sprite(v[instruction.x], v[instruction.y], rows)
        v[FLAG] = 1 if collision else 0

    def op_ld_vx_k(self, instruction: Instruction) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            # Re-run this instruction on the next step until a key is down.
            self.state.pc = (self.state.pc - 2) & 0xFFFF
            self.waiting_for_key = True
            return
        self.waiting_for_key = False
        self.state.v[instruction.x] = key

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.state.delay_timer

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.state.delay_timer = self.state.v[instruction.x]

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.state.sound_timer = self.state.v[instruction.x]
