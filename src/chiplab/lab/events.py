"""Textual events that drive the chip models (``toggle:3``, ``ack``, ...)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from chiplab.chips.base import LINE_COUNT, PeripheralDevice
from chiplab.chips.registry import check_chip_id

EventArgument = Union[int, bool, None]

# Argument kinds per event name.
NO_ARG = "none"
LINE = "line"
REPEAT = "repeat"
SWITCH = "switch"
RELOAD = "reload"

EVENT_TABLE: Dict[str, Dict[str, str]] = {
    "8255": {"toggle": LINE, "transfer": NO_ARG, "reset": NO_ARG},
    "8253": {"pulse": REPEAT, "gate": SWITCH, "reload": RELOAD, "reset": NO_ARG},
    "8259": {"raise": LINE, "mask": LINE, "ack": NO_ARG, "eoi": NO_ARG, "reset": NO_ARG},
}

_SWITCH_WORDS = {
    "on": True,
    "1": True,
    "true": True,
    "high": True,
    "off": False,
    "0": False,
    "false": False,
    "low": False,
}


class EventError(ValueError):
    """Raised for event text that does not fit the selected chip."""


@dataclass(frozen=True)
class LabEvent:
    name: str
    argument: EventArgument = None

    def __str__(self) -> str:
        if self.argument is None:
            return self.name
        if isinstance(self.argument, bool):
            return f"{self.name}:{'on' if self.argument else 'off'}"
        return f"{self.name}:{self.argument}"


def _parse_int(name: str, text: str) -> int:
    try:
        if text.startswith("0x"):
            return int(text[2:], 16)
        return int(text, 10)
    except ValueError as exc:
        raise EventError(f"{name}: expected an integer, got {text!r}") from exc


def _parse_argument(name: str, kind: str, text: Optional[str]) -> EventArgument:
    if kind == NO_ARG:
        if text is not None:
            raise EventError(f"{name} takes no argument")
        return None
    if kind == REPEAT:
        if text is None:
            return 1
        count = _parse_int(name, text)
        if count < 1:
            raise EventError(f"{name}: repeat count must be >= 1, got {count}")
        return count
    if text is None:
        raise EventError(f"{name} needs an argument")
    if kind == LINE:
        line = _parse_int(name, text)
        if not (0 <= line < LINE_COUNT):
            raise EventError(f"{name}: line out of range: {line}")
        return line
    if kind == SWITCH:
        if text not in _SWITCH_WORDS:
            raise EventError(f"{name}: expected on/off, got {text!r}")
        return _SWITCH_WORDS[text]
    if kind == RELOAD:
        value = _parse_int(name, text)
        if value < 1:
            raise EventError(f"{name}: reload must be >= 1, got {value}")
        return value
    raise AssertionError(f"unknown argument kind {kind}")


def parse_event(chip_id: str, text: str) -> LabEvent:
    """Parse one event for ``chip_id``; raises :class:`EventError`."""

    table = EVENT_TABLE[check_chip_id(chip_id)]
    cleaned = "".join(text.split()).lower()
    if not cleaned:
        raise EventError("empty event")
    name, sep, arg_text = cleaned.partition(":")
    if name not in table:
        expected = ", ".join(sorted(table))
        raise EventError(f"unknown event {name!r} for {chip_id} (expected one of {expected})")
    return LabEvent(name, _parse_argument(name, table[name], arg_text if sep else None))


def parse_events(chip_id: str, lines: Iterable[str]) -> List[LabEvent]:
    """Parse script lines, skipping blanks and ``#`` comments."""

    events: List[LabEvent] = []
    for raw in lines:
        text = raw.split("#", 1)[0].strip()
        if text:
            events.append(parse_event(chip_id, text))
    return events


def apply_event(chip: PeripheralDevice, event: LabEvent) -> None:
    """Run ``event`` against ``chip``."""

    chip_id = chip.CHIP_ID
    name = event.name
    if name not in EVENT_TABLE.get(chip_id, {}):
        raise EventError(f"event {name!r} does not apply to {chip_id}")
    if name == "reset":
        chip.reset()
    elif chip_id == "8255":
        if name == "toggle":
            chip.toggle_input_bit(event.argument)  # type: ignore[attr-defined]
        else:
            chip.transfer()  # type: ignore[attr-defined]
    elif chip_id == "8253":
        if name == "pulse":
            for _ in range(event.argument or 1):
                chip.pulse_clock()  # type: ignore[attr-defined]
        elif name == "gate":
            chip.set_gate(bool(event.argument))  # type: ignore[attr-defined]
        else:
            chip.set_reload(event.argument)  # type: ignore[attr-defined]
    elif chip_id == "8259":
        if name == "raise":
            chip.raise_or_lower_request(event.argument)  # type: ignore[attr-defined]
        elif name == "mask":
            chip.toggle_mask(event.argument)  # type: ignore[attr-defined]
        elif name == "ack":
            chip.acknowledge()  # type: ignore[attr-defined]
        else:
            chip.end_of_interrupt()  # type: ignore[attr-defined]
