"""Command-line entry point for the Python CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import MONOCHROME, parse_color


def _color(text: str):
    try:
        return parse_color(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter (Python)",
    )
    parser.add_argument(
        "rom",
        type=Path,
        help="Path to the CHIP-8 ROM image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=20,
        help="Integer window scale factor (default: 20)",
    )
    parser.add_argument(
        "-d",
        "--outline",
        action="store_true",
        help="Draw an outline around each lit pixel",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=700,
        help="Instructions executed per second (default: 700)",
    )
    parser.add_argument(
        "--fg",
        type=_color,
        default=MONOCHROME[1],
        help="Foreground colour as RRGGBB (default: FFFFFF)",
    )
    parser.add_argument(
        "--bg",
        type=_color,
        default=MONOCHROME[0],
        help="Background colour as RRGGBB (default: 000000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random number instruction",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the interpreter in fullscreen mode",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.speed <= 0:
        parser.error("--speed must be positive")

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        outline=args.outline,
        foreground=args.fg,
        background=args.bg,
        instructions_per_second=args.speed,
        fullscreen=args.fullscreen,
        seed=args.seed,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
