from types import SimpleNamespace

import pytest

from pychip8.utils.trace import TraceRecorder


def _state(pc: int, **kwargs):
    defaults = {"pc": pc, "i": 0x000, "v": bytes(16), "stack": [], "delay_timer": 0, "sound_timer": 0}
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200), 0x6005, mnemonic="LD V0, 0x05")
    recorder.record_step(_state(0x202, i=0x300), 0xA300, mnemonic="LD I, 0x300")
    recorder.record_step(_state(0x204, stack=[0x202]), 0xF00A, mnemonic="LD V0, K", note="key-wait")

    lines = list(recorder.format_entries())
    assert len(lines) == 2
    assert "pc=202" in lines[0]
    assert "I=300" in lines[0]
    assert "pc=204" in lines[1]
    assert "SP=01" in lines[1]
    assert "note=key-wait" in lines[1]


def test_trace_recorder_handles_missing_opcode():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0x2FE), None, note="stack_underflow")

    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert recorder.last_entry().note == "stack_underflow"


def test_trace_limit_and_clear():
    recorder = TraceRecorder(4)
    for offset in range(3):
        recorder.record_step(_state(0x200 + offset * 2), 0x0000)

    assert len(list(recorder.entries(limit=2))) == 2
    recorder.clear()
    assert recorder.last_entry() is None


def test_invalid_capacity():
    with pytest.raises(ValueError):
        TraceRecorder(0)
