"""Python CHIP-8 interpreter.

The interpreter core (memory, CPU, timers, display and keypad state) lives in
``bus``, ``cpu``, ``system``, ``video`` and ``io``; ``ui`` hosts the pygame
frontend driven by ``run.py``.
"""

from __future__ import annotations

from . import bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "bus",
    "cpu",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "video",
]
