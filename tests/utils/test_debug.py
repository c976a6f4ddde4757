"""Tests for the environment-gated debug logger."""

from __future__ import annotations

import pytest

from pychip8.utils import debug_enabled, debug_log, reload_categories
from pychip8.utils.debug import parse_categories


@pytest.fixture
def debug_env(monkeypatch):
    def apply(value: str | None) -> None:
        if value is None:
            monkeypatch.delenv("CHIP8_DEBUG", raising=False)
        else:
            monkeypatch.setenv("CHIP8_DEBUG", value)
        reload_categories()

    yield apply
    monkeypatch.delenv("CHIP8_DEBUG", raising=False)
    reload_categories()


def test_disabled_by_default(debug_env, capsys) -> None:
    debug_env(None)

    assert not debug_enabled("cpu")
    debug_log("cpu", "pc=%03x", 0x200)
    assert capsys.readouterr().out == ""


def test_selected_categories(debug_env, capsys) -> None:
    debug_env("cpu, Input")

    assert debug_enabled("cpu")
    assert debug_enabled("input")
    assert not debug_enabled("state")
    debug_log("cpu", "pc=%03x", 0x200)
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"


def test_all_category(debug_env) -> None:
    debug_env("all")

    assert debug_enabled("anything")


def test_bad_format_arguments_are_appended(debug_env, capsys) -> None:
    debug_env("cpu")

    debug_log("cpu", "value=%d", "x")
    assert "value=%d ('x',)" in capsys.readouterr().out


def test_parse_categories_ignores_blanks_and_case() -> None:
    assert parse_categories(" CPU,,trace ,") == frozenset({"cpu", "trace"})
    assert parse_categories("") == frozenset()


def test_reload_picks_up_environment_changes(debug_env) -> None:
    debug_env("cpu")
    assert debug_enabled("cpu")

    debug_env("state")
    assert not debug_enabled("cpu")
    assert debug_enabled("state")
