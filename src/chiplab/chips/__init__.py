"""Peripheral chip models for the interface lab."""

from chiplab.chips.base import (
    ChipInputError,
    PeripheralDevice,
    bits_msb_first,
    check_byte,
    check_line,
)
from chiplab.chips.pic8259 import PIC8259, PICState
from chiplab.chips.pit8253 import DEFAULT_RELOAD, PIT8253, PITState
from chiplab.chips.ppi8255 import PPI8255, PPIState
from chiplab.chips.registry import CHIP_TYPES, check_chip_id, chip_name, create_chip

__all__ = [
    "CHIP_TYPES",
    "ChipInputError",
    "DEFAULT_RELOAD",
    "PIC8259",
    "PICState",
    "PIT8253",
    "PITState",
    "PPI8255",
    "PPIState",
    "PeripheralDevice",
    "bits_msb_first",
    "check_byte",
    "check_chip_id",
    "check_line",
    "chip_name",
    "create_chip",
]
