"""Shared helpers for the peripheral chip models."""

from __future__ import annotations

from typing import Dict, List, Protocol, Union

LINE_COUNT = 8

StateValue = Union[int, bool]


class ChipInputError(ValueError):
    """Raised when a chip operation receives an out-of-range argument."""


def mask8(value: int) -> int:
    return value & 0xFF


def check_line(line: int, what: str = "line") -> int:
    """Validate a bit/line index in 0..7 and return it."""

    if isinstance(line, bool) or not isinstance(line, int):
        raise ChipInputError(f"{what} must be an integer, got {line!r}")
    if not (0 <= line < LINE_COUNT):
        raise ChipInputError(f"{what} out of range: {line}")
    return line


def check_byte(value: int, what: str = "value") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ChipInputError(f"{what} must be an integer, got {value!r}")
    if not (0 <= value <= 0xFF):
        raise ChipInputError(f"{what} out of range: {value}")
    return value


def bits_msb_first(value: int) -> List[int]:
    return [(value >> bit) & 0x01 for bit in range(LINE_COUNT - 1, -1, -1)]


def lowest_set_bit(value: int) -> int | None:
    """Return the index of the lowest set bit of an 8-bit value."""

    for line in range(LINE_COUNT):
        if value & (1 << line):
            return line
    return None


class PeripheralDevice(Protocol):
    """Common surface the bench and renderers rely on."""

    CHIP_ID: str
    NAME: str

    def reset(self) -> None:
        ...

    def snapshot(self) -> Dict[str, StateValue]:
        ...
