"""Tests for the interface lab session and chip registry."""

from __future__ import annotations

import pytest

from chiplab.chips import CHIP_TYPES, ChipInputError, PIC8259, PIT8253, PPI8255, chip_name, create_chip
from chiplab.lab.bench import TRACE_ENV, InterfaceLab
from chiplab.lab.control_word import ControlWordError
from chiplab.lab.events import EventError


def test_registry_creates_each_chip() -> None:
    assert isinstance(create_chip("8255"), PPI8255)
    assert isinstance(create_chip("8253"), PIT8253)
    assert isinstance(create_chip("8259"), PIC8259)
    assert CHIP_TYPES == ("8255", "8253", "8259")
    assert "PIC" in chip_name("8259")


def test_registry_rejects_unknown_chip() -> None:
    with pytest.raises(ChipInputError):
        create_chip("8086")
    with pytest.raises(ChipInputError):
        chip_name("")


def test_default_selection() -> None:
    bench = InterfaceLab()
    assert bench.active_chip == "8255"
    assert bench.control_word == 0x80
    assert bench.breakdown is None
    assert bench.chip is bench.ppi


def test_select_chip_resets_word_and_breakdown_but_keeps_state() -> None:
    bench = InterfaceLab()
    bench.apply("toggle:1")
    bench.set_control_word("82")
    bench.analyse()

    bench.select_chip("8253")
    assert bench.control_word == 0x36
    assert bench.breakdown is None
    assert bench.chip is bench.pit

    bench.select_chip("8255")
    assert bench.control_word == 0x80
    assert bench.ppi.port_b == 0x02


def test_cycle_chip_wraps() -> None:
    bench = InterfaceLab("8259")
    assert bench.cycle_chip() == "8255"
    assert bench.cycle_chip(-1) == "8259"
    assert bench.control_word == 0x13


def test_invalid_control_word_keeps_previous() -> None:
    bench = InterfaceLab("8253")
    with pytest.raises(ControlWordError):
        bench.set_control_word("zz")
    assert bench.control_word == 0x36


def test_analyse_uses_active_chip_and_a0() -> None:
    bench = InterfaceLab("8259")
    assert bench.analyse().title.startswith("8259 ICW1")
    bench.set_a0(1)
    assert bench.breakdown is None
    assert bench.analyse().title == "8259 OCW1 (A0=1)"


def test_step_control_word_wraps_around() -> None:
    bench = InterfaceLab()
    bench.set_control_word("FF")
    assert bench.step_control_word(1) == 0x00
    assert bench.step_control_word(-1) == 0xFF
    assert bench.control_word_text() == "FFH"


def test_apply_routes_to_active_chip_only() -> None:
    bench = InterfaceLab("8259")
    event = bench.apply("raise:4")
    assert str(event) == "raise:4"
    assert bench.pic.irr == 0x10
    assert bench.ppi.port_b == 0
    with pytest.raises(EventError):
        bench.apply("transfer")


def test_custom_reload() -> None:
    bench = InterfaceLab("8253", reload=2)
    bench.apply("pulse:2")
    assert bench.pit.count == 2
    assert bench.pit.out is False


def test_reset_restores_everything() -> None:
    bench = InterfaceLab("8259")
    bench.apply("raise:1")
    bench.apply("ack")
    bench.select_chip("8255")
    bench.apply("toggle:5")
    bench.reset()
    assert bench.active_chip == "8255"
    assert bench.pic.snapshot() == {"irr": 0, "isr": 0, "imr": 0}
    assert bench.ppi.snapshot() == {"port_a": 0, "port_b": 0}


def test_trace_env_prints_events(monkeypatch, capsys) -> None:
    monkeypatch.setenv(TRACE_ENV, "1")
    bench = InterfaceLab("8259")
    bench.apply("raise:3")
    out = capsys.readouterr().out
    assert "TRACE-EVENT chip=8259 event=raise:3 irr=8 isr=0 imr=0" in out


def test_trace_disabled_by_default(monkeypatch, capsys) -> None:
    monkeypatch.delenv(TRACE_ENV, raising=False)
    InterfaceLab().apply("toggle:0")
    assert capsys.readouterr().out == ""
