"""Tests for the ``run.py`` launcher."""

from __future__ import annotations

import pytest

import run
from pychip8.ui import app as app_module


def test_defaults(tmp_path) -> None:
    rom = tmp_path / "pong.ch8"
    args = run.build_arg_parser().parse_args([str(rom)])

    assert args.scale == 20
    assert args.speed == 700
    assert args.outline is False
    assert args.fg == (255, 255, 255)
    assert args.bg == (0, 0, 0)


def test_colour_arguments(tmp_path) -> None:
    args = run.build_arg_parser().parse_args([str(tmp_path / "a.ch8"), "--fg", "33FF66", "-d"])

    assert args.fg == (0x33, 0xFF, 0x66)
    assert args.outline is True


def test_invalid_colour_rejected(tmp_path) -> None:
    with pytest.raises(SystemExit):
        run.build_arg_parser().parse_args([str(tmp_path / "a.ch8"), "--bg", "blue"])


def test_missing_rom_exits(tmp_path) -> None:
    with pytest.raises(SystemExit) as info:
        run.main([str(tmp_path / "missing.ch8")])

    assert info.value.code == 2


def test_runtime_error_exits_with_status_one(tmp_path, monkeypatch, capsys) -> None:
    rom = tmp_path / "bad.ch8"
    rom.write_bytes(b"\x00\xEE")
    captured = {}

    def fake_run(self) -> None:
        captured["config"] = self._config
        raise RuntimeError("CHIP-8 halted (STACK_UNDERFLOW)")

    monkeypatch.setattr(app_module.Chip8App, "run", fake_run)

    with pytest.raises(SystemExit) as info:
        run.main([str(rom), "--speed", "500", "--scale", "10"])

    assert info.value.code == 1
    assert captured["config"].instructions_per_second == 500
    assert captured["config"].scale == 10
    assert "STACK_UNDERFLOW" in capsys.readouterr().err
