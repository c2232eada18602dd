"""Tests for the textual event language."""

from __future__ import annotations

import pytest

from chiplab.chips import PIC8259, PIT8253, PPI8255, create_chip
from chiplab.lab.events import EventError, LabEvent, apply_event, parse_event, parse_events


def run(chip, *texts: str):
    for text in texts:
        apply_event(chip, parse_event(chip.CHIP_ID, text))
    return chip


@pytest.mark.parametrize(
    "chip_id, text, expected",
    [
        ("8255", "toggle:3", LabEvent("toggle", 3)),
        ("8255", " Transfer ", LabEvent("transfer")),
        ("8253", "pulse", LabEvent("pulse", 1)),
        ("8253", "pulse:5", LabEvent("pulse", 5)),
        ("8253", "gate:off", LabEvent("gate", False)),
        ("8253", "GATE : ON", LabEvent("gate", True)),
        ("8253", "reload:0x10", LabEvent("reload", 16)),
        ("8259", "raise:07", LabEvent("raise", 7)),
        ("8259", "mask:0", LabEvent("mask", 0)),
        ("8259", "ack", LabEvent("ack")),
        ("8259", "eoi", LabEvent("eoi")),
    ],
)
def test_parse_event(chip_id: str, text: str, expected: LabEvent) -> None:
    assert parse_event(chip_id, text) == expected


@pytest.mark.parametrize(
    "chip_id, text",
    [
        ("8255", ""),
        ("8255", "ack"),
        ("8255", "toggle"),
        ("8255", "toggle:8"),
        ("8255", "toggle:x"),
        ("8255", "transfer:1"),
        ("8253", "pulse:0"),
        ("8253", "gate:maybe"),
        ("8253", "reload:0"),
        ("8253", "reload:-3"),
        ("8259", "raise:-1"),
        ("8259", "toggle:1"),
    ],
)
def test_parse_event_rejects_invalid(chip_id: str, text: str) -> None:
    with pytest.raises(EventError):
        parse_event(chip_id, text)


def test_event_str_round_trips_through_parser() -> None:
    for chip_id, text in [("8253", "gate:off"), ("8253", "pulse:3"), ("8259", "ack"), ("8255", "toggle:2")]:
        event = parse_event(chip_id, text)
        assert str(event) == text
        assert parse_event(chip_id, str(event)) == event


def test_parse_events_skips_comments_and_blanks() -> None:
    script = ["# setup", "", "raise:0", "raise:2   # second line", "   ", "mask:0", "ack"]
    events = parse_events("8259", script)
    assert [str(event) for event in events] == ["raise:0", "raise:2", "mask:0", "ack"]


def test_apply_ppi_events() -> None:
    ppi = run(PPI8255(), "toggle:0", "toggle:7", "transfer", "toggle:0")
    assert ppi.port_a == 0x81
    assert ppi.port_b == 0x80


def test_apply_pit_events() -> None:
    pit = run(PIT8253(), "reload:3", "reset", "pulse:3")
    assert pit.count == 3
    assert pit.out is False

    run(pit, "gate:off", "pulse:10")
    assert (pit.count, pit.out) == (3, False)


def test_apply_pic_events_scenario() -> None:
    pic = run(PIC8259(), "raise:0", "raise:2", "mask:0", "ack")
    assert pic.isr == 0b00000100
    assert pic.irr == 0b00000001
    run(pic, "eoi")
    assert pic.isr == 0


def test_reset_event_applies_to_every_chip() -> None:
    for chip_id in ("8255", "8253", "8259"):
        chip = create_chip(chip_id)
        run(chip, "reset")


def test_apply_rejects_event_for_other_chip() -> None:
    with pytest.raises(EventError):
        apply_event(PPI8255(), LabEvent("ack"))
