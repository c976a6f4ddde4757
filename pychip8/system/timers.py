"""Delay and sound timer driver."""

from __future__ import annotations

from pychip8.cpu import CPUState

TIMER_RATE = 60  # Hz
_EPSILON = 1e-9


def tick(state: CPUState) -> None:
    """Count both timers down by one, stopping at zero."""

    if state.delay_timer > 0:
        state.delay_timer -= 1
    if state.sound_timer > 0:
        state.sound_timer -= 1


class TimerDriver:
    """Turn elapsed wall-clock time into a whole number of timer ticks.

    The interpreter steps instructions at whatever rate the frontend chooses;
    this keeps the timers on a fixed logical cadence regardless.
    """

    def __init__(self, rate: int = TIMER_RATE) -> None:
        if rate <= 0:
            raise ValueError("timer rate must be positive")
        self._rate = rate
        self._period = 1.0 / rate
        self._accumulated = 0.0

    @property
    def period(self) -> float:
        return self._period

    def advance(self, seconds: float) -> int:
        """Add ``seconds`` of elapsed time and return the ticks now due."""

        if seconds < 0:
            raise ValueError("elapsed time cannot be negative")
        self._accumulated += seconds
        due = int(self._accumulated * self._rate + _EPSILON)
        self._accumulated = max(0.0, self._accumulated - due * self._period)
        return due

    def reset(self) -> None:
        self._accumulated = 0.0
