"""Lookup of chip models by their part number."""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from chiplab.chips.base import ChipInputError, PeripheralDevice
from chiplab.chips.pic8259 import PIC8259
from chiplab.chips.pit8253 import PIT8253
from chiplab.chips.ppi8255 import PPI8255

CHIP_TYPES: Tuple[str, ...] = ("8255", "8253", "8259")

_FACTORIES: Dict[str, Callable[[], PeripheralDevice]] = {
    PPI8255.CHIP_ID: PPI8255,
    PIT8253.CHIP_ID: PIT8253,
    PIC8259.CHIP_ID: PIC8259,
}

_NAMES: Dict[str, str] = {
    PPI8255.CHIP_ID: PPI8255.NAME,
    PIT8253.CHIP_ID: PIT8253.NAME,
    PIC8259.CHIP_ID: PIC8259.NAME,
}


def check_chip_id(chip_id: str) -> str:
    if chip_id not in _FACTORIES:
        raise ChipInputError(f"unknown chip: {chip_id!r} (expected one of {', '.join(CHIP_TYPES)})")
    return chip_id


def create_chip(chip_id: str) -> PeripheralDevice:
    return _FACTORIES[check_chip_id(chip_id)]()


def chip_name(chip_id: str) -> str:
    return _NAMES[check_chip_id(chip_id)]
