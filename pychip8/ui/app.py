"""Pygame frontend for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.bus import CapacityExceededError
from pychip8.io import key_index
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import Machine, MachineConfig, RunState, TimerDriver, create_machine
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import MONOCHROME, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the pygame frontend."""

    rom_path: Optional[Path] = None
    scale: int = 20
    outline: bool = False
    foreground: RGBColor = MONOCHROME[1]
    background: RGBColor = MONOCHROME[0]
    instructions_per_second: int = 700
    fullscreen: bool = False
    seed: Optional[int] = None


class Chip8App:
    """Thin wrapper around the pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._pygame = None
        self._timer_driver = TimerDriver()
        self._debug_overlay = debug_enabled("overlay")
        self._overlay_columns = 18
        self._overlay_font = None
        self._perf_enabled = debug_enabled("perf")
        self._frame_counter = 0

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass a ROM path")

        machine = self._create_machine(self._config.rom_path)
        self._machine = machine

        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame

        renderer = Renderer(
            (self._config.background, self._config.foreground),
            outline=self._config.outline,
        )
        display_width = machine.display.width * self._config.scale
        display_height = machine.display.height * self._config.scale
        overlay_width = self._overlay_columns * 8 * max(1, self._config.scale // 4) if self._debug_overlay else 0

        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode((display_width + overlay_width, display_height), flags)

        clock = pygame.time.Clock()
        self._running = True
        last_time = time.perf_counter()

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._request_quit(machine)
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._request_quit(machine)
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                        state = machine.toggle_pause()
                        print(f"[State] CHIP-8 {'paused' if state is RunState.PAUSED else 'resumed'}")
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)

                if not self._running:
                    break

                now = time.perf_counter()
                elapsed = now - last_time
                last_time = now

                self._step_machine(machine, elapsed)

                if machine.display.dirty or self._debug_overlay:
                    frame = renderer.render(machine.display, scale=self._config.scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    machine.display.dirty = False
                    if self._debug_overlay and overlay_width > 0:
                        overlay_surface = self._draw_overlay(pygame, machine, display_height, overlay_width)
                        screen.blit(overlay_surface, (display_width, 0))
                    pygame.display.flip()

                if self._perf_enabled and elapsed > 0:
                    debug_log(
                        "perf",
                        "frame=%d frame_ms=%.3f instructions=%d",
                        self._frame_counter,
                        elapsed * 1000.0,
                        machine.cpu.instruction_count,
                    )

                clock.tick(machine.config.timer_rate)
                self._frame_counter += 1
        finally:
            pygame.quit()

    # ------------------------------------------------------------------
    # Machine plumbing

    def _create_machine(self, rom_path: Path) -> Machine:
        config = MachineConfig(
            instructions_per_second=self._config.instructions_per_second,
            seed=self._config.seed,
        )
        machine = create_machine(config)
        self._load_program(machine, rom_path)
        return machine

    def _load_program(self, machine: Machine, rom_path: Path) -> None:
        try:
            program = load_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc
        try:
            machine.load(program)
        except CapacityExceededError as exc:
            raise RuntimeError(f"ROM {rom_path} does not fit in memory: {exc}") from exc
        print(f"[~] Rom file \"{rom_path}\" loaded ({len(program)} bytes)")

    def _step_machine(self, machine: Machine, elapsed: float) -> None:
        """Run one frame of instructions, then the timer ticks that came due."""

        if machine.run_state is RunState.PAUSED:
            self._timer_driver.reset()
            return

        outcome = machine.run_frame(ticks=self._timer_driver.advance(elapsed))
        if outcome.fatal:
            self._running = False
            raise RuntimeError(f"CHIP-8 halted ({outcome.status.name}): {outcome.error}")

    def _request_quit(self, machine: Machine) -> None:
        machine.quit()
        self._running = False
        print("[State] CHIP-8 quit!")

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        if self._machine is None:
            return
        name = pygame.key.name(key_code)
        index = key_index(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s index=%s pressed=%s", name, index, pressed)
        if index is None:
            return
        if pressed:
            self._machine.keypad.press(index)
        else:
            self._machine.keypad.release(index)

    # ------------------------------------------------------------------
    # Debug overlay

    def _draw_overlay(self, pygame, machine: Machine, height: int, width: int):
        surface = pygame.Surface((width, height))
        surface.fill((0, 0, 0))

        font_size = max(8, height // 24)
        if self._overlay_font is None or self._overlay_font[0] != font_size:
            pygame.font.init()
            font_name = pygame.font.match_font("menlo,dejavusansmono,couriernew,consolas,monospace")
            if not font_name:
                font_name = pygame.font.get_default_font()
            font_obj = pygame.font.Font(font_name, font_size)
            self._overlay_font = (font_size, font_obj)
        else:
            font_obj = self._overlay_font[1]
        color = (255, 255, 255)
        line_height = font_size + 2

        y = 4
        for text in overlay_lines(machine):
            rendered = font_obj.render(text, False, color)
            surface.blit(rendered, (4, y))
            y += line_height
            if y > height:
                break

        return surface


def overlay_lines(machine: Machine) -> list[str]:
    """Register dump shown beside the display when the overlay is enabled."""

    label_width = 6

    def fmt(label: str, value: str) -> str:
        return f"{label:<{label_width}}: {value}"

    state = machine.cpu.state
    lines = [
        fmt("STATE", machine.run_state.name),
        fmt("PC", f"{state.pc:03X}"),
        fmt("I", f"{state.i:03X}"),
        fmt("SP", f"{len(state.stack)}"),
        fmt("DT", f"{state.delay_timer:02X}"),
        fmt("ST", f"{state.sound_timer:02X}"),
        " ",
    ]
    lines.extend(fmt(f"V{index:X}", f"{value:02X}") for index, value in enumerate(state.v))
    keys = "".join(f"{index:X}" if pressed else "." for index, pressed in enumerate(machine.keypad.snapshot()))
    lines.append(" ")
    lines.append(fmt("KEYS", keys))
    return lines
