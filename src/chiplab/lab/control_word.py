"""Bit-field breakdown of 8255/8253/8259 control words."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from chiplab.chips.registry import check_chip_id

DEFAULT_CONTROL_WORDS: Dict[str, int] = {
    "8255": 0x80,
    "8253": 0x36,
    "8259": 0x13,
}


class ControlWordError(ValueError):
    """Raised for control word text that is not one or two hex digits."""


@dataclass(frozen=True)
class ControlWordBreakdown:
    chip_id: str
    value: int
    title: str
    fields: List[Tuple[str, str]] = field(default_factory=list)

    def lines(self) -> List[str]:
        lines = [f"{format_control_word(self.value)} = {self.value:08b}B  {self.title}"]
        lines.extend(f"  {name}: {meaning}" for name, meaning in self.fields)
        return lines


def parse_control_word(text: str) -> int:
    """Parse ``"80"``, ``"0x80"`` or ``"80H"`` (any case) into 0..0xFF."""

    cleaned = text.strip().lower()
    if cleaned.startswith("0x"):
        cleaned = cleaned[2:]
    elif cleaned.endswith("h"):
        cleaned = cleaned[:-1]
    if not cleaned or len(cleaned) > 2:
        raise ControlWordError(f"control word must be 1-2 hex digits: {text!r}")
    if any(ch not in string.hexdigits for ch in cleaned):
        raise ControlWordError(f"invalid hex control word: {text!r}")
    return int(cleaned, 16)


def format_control_word(value: int) -> str:
    return f"{value & 0xFF:02X}H"


def _bit(value: int, index: int) -> int:
    return (value >> index) & 0x01


def _direction(flag: int) -> str:
    return "input" if flag else "output"


# ----------------------------------------------------------------------
# 8255
# ----------------------------------------------------------------------
def _explain_8255(value: int, a0: int) -> ControlWordBreakdown:
    if _bit(value, 7):
        group_a = (value >> 5) & 0x03
        group_a_mode = "mode 2 (bidirectional)" if group_a & 0x02 else f"mode {group_a}"
        fields = [
            ("D7", "1 = mode set flag"),
            ("D6-D5", f"group A {group_a_mode}"),
            ("D4", f"port A {_direction(_bit(value, 4))}"),
            ("D3", f"port C upper (PC7-PC4) {_direction(_bit(value, 3))}"),
            ("D2", f"group B mode {_bit(value, 2)}"),
            ("D1", f"port B {_direction(_bit(value, 1))}"),
            ("D0", f"port C lower (PC3-PC0) {_direction(_bit(value, 0))}"),
        ]
        return ControlWordBreakdown("8255", value, "8255 mode set word", fields)

    pc_bit = (value >> 1) & 0x07
    action = "set" if _bit(value, 0) else "reset"
    fields = [
        ("D7", "0 = port C bit set/reset"),
        ("D6-D4", "unused"),
        ("D3-D1", f"select PC{pc_bit}"),
        ("D0", f"{action} PC{pc_bit} ({_bit(value, 0)})"),
    ]
    return ControlWordBreakdown("8255", value, "8255 port C bit set/reset word", fields)


# ----------------------------------------------------------------------
# 8253
# ----------------------------------------------------------------------
_RW_FORMATS = {
    0x00: "counter latch command",
    0x01: "read/load LSB only",
    0x02: "read/load MSB only",
    0x03: "read/load LSB first, then MSB",
}

_PIT_MODES = {
    0: "mode 0 (interrupt on terminal count)",
    1: "mode 1 (hardware retriggerable one-shot)",
    2: "mode 2 (rate generator)",
    3: "mode 3 (square wave generator)",
    4: "mode 4 (software triggered strobe)",
    5: "mode 5 (hardware triggered strobe)",
}


def _explain_8253(value: int, a0: int) -> ControlWordBreakdown:
    counter = (value >> 6) & 0x03
    if counter == 0x03:
        counter_text = "11 is illegal on the 8253 (8254 read-back command)"
    else:
        counter_text = f"counter {counter}"
    rw = (value >> 4) & 0x03
    mode_bits = (value >> 1) & 0x07
    # M2 is a don't-care for modes 2 and 3 (x10 / x11).
    mode = mode_bits & 0x03 if (mode_bits & 0x03) in (0x02, 0x03) else mode_bits
    fields = [
        ("D7-D6", f"SC = {counter >> 1}{counter & 1}, {counter_text}"),
        ("D5-D4", f"RW = {rw >> 1}{rw & 1}, {_RW_FORMATS[rw]}"),
        ("D3-D1", f"M = {mode_bits:03b}, {_PIT_MODES[mode]}"),
        ("D0", "BCD count" if _bit(value, 0) else "binary count"),
    ]
    title = "8253 control word"
    if rw == 0x00:
        title = "8253 counter latch command"
    return ControlWordBreakdown("8253", value, title, fields)


# ----------------------------------------------------------------------
# 8259
# ----------------------------------------------------------------------
_OCW2_COMMANDS = {
    0x01: "non-specific EOI",
    0x03: "specific EOI",
    0x05: "rotate on non-specific EOI",
    0x04: "rotate in automatic EOI mode (set)",
    0x00: "rotate in automatic EOI mode (clear)",
    0x07: "rotate on specific EOI",
    0x06: "set priority",
    0x02: "no operation",
}


def _explain_icw1(value: int) -> ControlWordBreakdown:
    fields = [
        ("D4", "1 = ICW1 flag"),
        ("D3", "LTIM = 1, level triggered" if _bit(value, 3) else "LTIM = 0, edge triggered"),
        ("D2", f"ADI = {_bit(value, 2)}, call address interval {4 if _bit(value, 2) else 8} (ignored by 8086)"),
        ("D1", "SNGL = 1, single 8259" if _bit(value, 1) else "SNGL = 0, cascade mode (ICW3 follows)"),
        ("D0", "IC4 = 1, ICW4 needed" if _bit(value, 0) else "IC4 = 0, no ICW4"),
    ]
    return ControlWordBreakdown("8259", value, "8259 ICW1 (A0=0)", fields)


def _explain_ocw2(value: int) -> ControlWordBreakdown:
    command = (value >> 5) & 0x07
    level = value & 0x07
    uses_level = command in (0x03, 0x06, 0x07)
    fields = [
        ("D7-D5", f"R SL EOI = {command:03b}, {_OCW2_COMMANDS[command]}"),
        ("D4-D3", "00 = OCW2 flag"),
        ("D2-D0", f"level IR{level}" if uses_level else f"level {level:03b} (not used)"),
    ]
    return ControlWordBreakdown("8259", value, "8259 OCW2 (A0=0)", fields)


def _explain_ocw3(value: int) -> ControlWordBreakdown:
    special = (value >> 5) & 0x03
    if special == 0x03:
        special_text = "set special mask mode"
    elif special == 0x02:
        special_text = "reset special mask mode"
    else:
        special_text = "no special mask action"
    read = value & 0x03
    if read == 0x02:
        read_text = "read IRR on next RD"
    elif read == 0x03:
        read_text = "read ISR on next RD"
    else:
        read_text = "no register read action"
    fields = [
        ("D6-D5", f"ESMM SMM = {special >> 1}{special & 1}, {special_text}"),
        ("D4-D3", "01 = OCW3 flag"),
        ("D2", "P = 1, poll command" if _bit(value, 2) else "P = 0, no poll"),
        ("D1-D0", f"RR RIS = {read >> 1}{read & 1}, {read_text}"),
    ]
    return ControlWordBreakdown("8259", value, "8259 OCW3 (A0=0)", fields)


def _explain_ocw1(value: int) -> ControlWordBreakdown:
    masked = [f"IR{line}" for line in range(8) if _bit(value, line)]
    fields = [
        ("D7-D0", "IMR = " + (", ".join(masked) + " masked" if masked else "all lines enabled")),
    ]
    return ControlWordBreakdown("8259", value, "8259 OCW1 (A0=1)", fields)


def _explain_8259(value: int, a0: int) -> ControlWordBreakdown:
    if a0:
        return _explain_ocw1(value)
    if _bit(value, 4):
        return _explain_icw1(value)
    if _bit(value, 3):
        return _explain_ocw3(value)
    return _explain_ocw2(value)


_EXPLAINERS: Dict[str, Callable[[int, int], ControlWordBreakdown]] = {
    "8255": _explain_8255,
    "8253": _explain_8253,
    "8259": _explain_8259,
}


def explain(chip_id: str, value: int, *, a0: int = 0) -> ControlWordBreakdown:
    """Break a control word for ``chip_id`` down into its bit fields.

    ``a0`` selects the 8259 port: writes with A0=0 are ICW1/OCW2/OCW3 and are
    told apart by D4/D3, writes with A0=1 are decoded as OCW1.
    """

    check_chip_id(chip_id)
    if not (0 <= value <= 0xFF):
        raise ControlWordError(f"control word out of range: {value}")
    return _EXPLAINERS[chip_id](value, 1 if a0 else 0)
