"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import (
    Machine,
    MachineConfig,
    RunState,
    StepOutcome,
    StepStatus,
    create_machine,
)
from .timers import TIMER_RATE, TimerDriver, tick

__all__ = [
    "MachineConfig",
    "Machine",
    "RunState",
    "StepOutcome",
    "StepStatus",
    "TimerDriver",
    "TIMER_RATE",
    "create_machine",
    "tick",
]
