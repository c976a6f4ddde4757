"""CHIP-8 machine assembly and run-state controller."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from pychip8.bus import Memory, OutOfBoundsError
from pychip8.cpu import Chip8CPU, CPUError, Instruction, StackOverflowError, StackUnderflowError
from pychip8.cpu.core import DEFAULT_STACK_DEPTH
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import FONT, Display, DISPLAY_HEIGHT, DISPLAY_WIDTH

from . import timers


class RunState(Enum):
    RUNNING = auto()
    PAUSED = auto()
    QUIT = auto()


class StepStatus(Enum):
    CONTINUED = auto()
    IDLE = auto()
    STACK_OVERFLOW = auto()
    STACK_UNDERFLOW = auto()
    OUT_OF_BOUNDS = auto()


_FATAL_STATUSES = frozenset(
    {StepStatus.STACK_OVERFLOW, StepStatus.STACK_UNDERFLOW, StepStatus.OUT_OF_BOUNDS}
)


@dataclass(frozen=True)
class StepOutcome:
    """Result of one :meth:`Machine.step` call."""

    status: StepStatus
    instruction: Optional[Instruction] = None
    error: Optional[Exception] = None

    @property
    def fatal(self) -> bool:
        return self.status in _FATAL_STATUSES


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    display_width: int = DISPLAY_WIDTH
    display_height: int = DISPLAY_HEIGHT
    stack_depth: int = DEFAULT_STACK_DEPTH
    instructions_per_second: int = 700
    timer_rate: int = timers.TIMER_RATE
    seed: Optional[int] = None
    trace_capacity: int = 256

    @property
    def instructions_per_frame(self) -> int:
        return max(1, round(self.instructions_per_second / self.timer_rate))


@dataclass
class Machine:
    """Owns memory, CPU, display and keypad, and gates stepping on run state."""

    config: MachineConfig
    memory: Memory
    display: Display
    keypad: Keypad
    cpu: Chip8CPU
    run_state: RunState = RunState.RUNNING
    last_error: Optional[Exception] = None
    trace: Optional[TraceRecorder] = field(default=None, repr=False)

    # ------------------------------------------------------------------
    # Loading

    def load(self, program: bytes) -> None:
        """Copy the font and ``program`` into memory and reset the machine.

        Raises :class:`~pychip8.bus.CapacityExceededError` before touching
        any state when ``program`` does not fit.
        """

        self.memory.load(FONT, bytes(program))
        self.cpu.reset()
        self.display.clear()
        self.keypad.reset()
        self.last_error = None
        if self.trace is not None:
            self.trace.clear()
        self.run_state = RunState.RUNNING
        if debug_enabled("state"):
            debug_log("state", "loaded program bytes=%d", len(program))

    # ------------------------------------------------------------------
    # Execution

    def step(self) -> StepOutcome:
        """Run one fetch/decode/execute cycle when the machine is running."""

        if self.run_state is not RunState.RUNNING:
            return StepOutcome(StepStatus.IDLE)

        state_before = self.cpu.state.clone() if self.trace is not None else None
        try:
            instruction = self.cpu.step()
        except StackOverflowError as exc:
            return self._fail(StepStatus.STACK_OVERFLOW, exc, state_before)
        except StackUnderflowError as exc:
            return self._fail(StepStatus.STACK_UNDERFLOW, exc, state_before)
        except OutOfBoundsError as exc:
            return self._fail(StepStatus.OUT_OF_BOUNDS, exc, state_before)

        if self.trace is not None and state_before is not None:
            note = "key-wait" if self.cpu.waiting_for_key else ""
            self.trace.record_step(
                state_before,
                instruction.opcode,
                mnemonic=instruction.mnemonic,
                note=note,
            )
        return StepOutcome(StepStatus.CONTINUED, instruction)

    def tick(self) -> bool:
        """Advance the delay and sound timers by one 60 Hz tick."""

        if self.run_state is not RunState.RUNNING:
            return False
        timers.tick(self.cpu.state)
        return True

    def run_frame(self, ticks: int = 1) -> StepOutcome:
        """Execute one frame worth of instructions, then ``ticks`` timer ticks.

        Stops stepping at the first outcome that is not ``CONTINUED``; timers
        only advance while the machine is still running.
        """

        if ticks < 0:
            raise ValueError("tick count must be non-negative")
        outcome = StepOutcome(StepStatus.IDLE)
        for _ in range(self.config.instructions_per_frame):
            outcome = self.step()
            if outcome.status is not StepStatus.CONTINUED:
                break
        for _ in range(ticks):
            self.tick()
        return outcome

    # ------------------------------------------------------------------
    # Run-state transitions

    def pause(self) -> None:
        if self.run_state is RunState.RUNNING:
            self._transition(RunState.PAUSED)

    def resume(self) -> None:
        if self.run_state is RunState.PAUSED:
            self._transition(RunState.RUNNING)

    def toggle_pause(self) -> RunState:
        if self.run_state is RunState.RUNNING:
            self.pause()
        elif self.run_state is RunState.PAUSED:
            self.resume()
        return self.run_state

    def quit(self) -> None:
        self._transition(RunState.QUIT)

    @property
    def running(self) -> bool:
        return self.run_state is RunState.RUNNING

    @property
    def sound_active(self) -> bool:
        return self.cpu.state.sound_timer > 0

    # ------------------------------------------------------------------
    # Internals

    def _transition(self, target: RunState) -> None:
        if self.run_state is target:
            return
        if debug_enabled("state"):
            debug_log("state", "%s -> %s", self.run_state.name, target.name)
        self.run_state = target

    def _fail(self, status: StepStatus, error: CPUError | OutOfBoundsError, state_before) -> StepOutcome:
        self.last_error = error
        if self.trace is not None and state_before is not None:
            self.trace.record_step(state_before, None, note=status.name.lower())
            self.trace.dump("trace", limit=32)
        if debug_enabled("state"):
            debug_log("state", "fatal %s: %s", status.name, error)
        self._transition(RunState.QUIT)
        return StepOutcome(status, error=error)


def create_machine(config: MachineConfig | None = None, program: bytes | None = None) -> Machine:
    """Instantiate a CHIP-8 machine, optionally loading ``program``."""

    config = config or MachineConfig()
    memory = Memory()
    display = Display(config.display_width, config.display_height)
    keypad = Keypad()
    cpu = Chip8CPU(
        memory,
        display,
        keypad,
        stack_depth=config.stack_depth,
        rng=random.Random(config.seed),
    )
    trace = TraceRecorder(config.trace_capacity) if debug_enabled("trace") else None

    machine = Machine(
        config=config,
        memory=memory,
        display=display,
        keypad=keypad,
        cpu=cpu,
        trace=trace,
    )
    machine.load(program or b"")
    return machine
