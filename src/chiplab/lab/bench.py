"""Interface lab session holding one model of each chip."""

from __future__ import annotations

import os
from typing import Dict, Optional

from chiplab.chips import CHIP_TYPES, PIC8259, PIT8253, PPI8255, check_chip_id, chip_name
from chiplab.chips.base import PeripheralDevice
from chiplab.lab.control_word import (
    DEFAULT_CONTROL_WORDS,
    ControlWordBreakdown,
    explain,
    format_control_word,
    parse_control_word,
)
from chiplab.lab.events import LabEvent, apply_event, parse_event

TRACE_ENV = "CHIPLAB_TRACE"
DEFAULT_CHIP = CHIP_TYPES[0]


class InterfaceLab:
    """Active chip selection, control word and the three chip models."""

    def __init__(self, chip_id: str = DEFAULT_CHIP, *, reload: Optional[int] = None) -> None:
        self.ppi = PPI8255()
        self.pit = PIT8253() if reload is None else PIT8253(reload)
        self.pic = PIC8259()
        self._chips: Dict[str, PeripheralDevice] = {
            self.ppi.CHIP_ID: self.ppi,
            self.pit.CHIP_ID: self.pit,
            self.pic.CHIP_ID: self.pic,
        }
        self._trace = os.getenv(TRACE_ENV) is not None
        self.active_chip = check_chip_id(chip_id)
        self.control_word = DEFAULT_CONTROL_WORDS[self.active_chip]
        self.a0 = 0
        self.breakdown: Optional[ControlWordBreakdown] = None

    # ------------------------------------------------------------------
    # Chip selection
    # ------------------------------------------------------------------
    @property
    def chip(self) -> PeripheralDevice:
        return self._chips[self.active_chip]

    @property
    def chip_name(self) -> str:
        return chip_name(self.active_chip)

    def get_chip(self, chip_id: str) -> PeripheralDevice:
        return self._chips[check_chip_id(chip_id)]

    def select_chip(self, chip_id: str) -> None:
        """Switch chips; the control word returns to the chip default."""

        self.active_chip = check_chip_id(chip_id)
        self.control_word = DEFAULT_CONTROL_WORDS[self.active_chip]
        self.a0 = 0
        self.breakdown = None

    def cycle_chip(self, direction: int = 1) -> str:
        index = CHIP_TYPES.index(self.active_chip)
        self.select_chip(CHIP_TYPES[(index + direction) % len(CHIP_TYPES)])
        return self.active_chip

    # ------------------------------------------------------------------
    # Control word
    # ------------------------------------------------------------------
    def set_control_word(self, text: str) -> int:
        self.control_word = parse_control_word(text)
        self.breakdown = None
        return self.control_word

    def step_control_word(self, delta: int) -> int:
        self.control_word = (self.control_word + delta) & 0xFF
        self.breakdown = None
        return self.control_word

    def set_a0(self, a0: int) -> None:
        self.a0 = 1 if a0 else 0
        self.breakdown = None

    def analyse(self) -> ControlWordBreakdown:
        self.breakdown = explain(self.active_chip, self.control_word, a0=self.a0)
        return self.breakdown

    def control_word_text(self) -> str:
        return format_control_word(self.control_word)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def apply(self, event: LabEvent | str) -> LabEvent:
        """Apply an event (or event text) to the active chip."""

        if isinstance(event, str):
            event = parse_event(self.active_chip, event)
        apply_event(self.chip, event)
        if self._trace:
            state = " ".join(f"{key}={int(value)}" for key, value in self.chip.snapshot().items())
            print(f"TRACE-EVENT chip={self.active_chip} event={event} {state}", flush=True)
        return event

    def reset(self) -> None:
        for chip in self._chips.values():
            chip.reset()
        self.select_chip(DEFAULT_CHIP)
