"""8259 PIC model with fixed priority arbitration (IR0 highest)."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Dict, Optional

from chiplab.chips.base import (
    LINE_COUNT,
    StateValue,
    check_byte,
    check_line,
    lowest_set_bit,
    mask8,
)


@dataclass(frozen=True)
class PICState:
    irr: int = 0
    isr: int = 0
    imr: int = 0


class PIC8259:
    """Interrupt controller holding the IRR, ISR and IMR registers.

    Requests stay visible in IRR whatever the mask says; IMR only hides a line
    from :meth:`acknowledge`. End of interrupt is non-specific and releases the
    lowest in-service line, which under fixed priority is also the highest
    priority one.
    """

    CHIP_ID = "8259"
    NAME = "8259 PIC (interrupt controller)"

    def __init__(self) -> None:
        self._state = PICState()

    @property
    def irr(self) -> int:
        return self._state.irr

    @property
    def isr(self) -> int:
        return self._state.isr

    @property
    def imr(self) -> int:
        return self._state.imr

    # ------------------------------------------------------------------
    # Request and mask lines
    # ------------------------------------------------------------------
    def raise_or_lower_request(self, line: int) -> None:
        check_line(line)
        self._state = replace(self._state, irr=mask8(self._state.irr ^ (1 << line)))

    def toggle_mask(self, line: int) -> None:
        check_line(line)
        self._state = replace(self._state, imr=mask8(self._state.imr ^ (1 << line)))

    def load_mask(self, value: int) -> None:
        """OCW1 write: replace the whole mask register."""

        self._state = replace(self._state, imr=check_byte(value, "mask"))

    # ------------------------------------------------------------------
    # Arbitration
    # ------------------------------------------------------------------
    def pending_line(self) -> Optional[int]:
        """Line that the next acknowledge would select, if any."""

        return lowest_set_bit(self._state.irr & ~self._state.imr & 0xFF)

    def acknowledge(self) -> Optional[int]:
        state = self._state
        line = self.pending_line()
        if line is None:
            return None
        bit = 1 << line
        self._state = replace(state, irr=state.irr & ~bit & 0xFF, isr=state.isr | bit)
        return line

    def end_of_interrupt(self) -> Optional[int]:
        state = self._state
        line = lowest_set_bit(state.isr)
        if line is None:
            return None
        self._state = replace(state, isr=state.isr & ~(1 << line) & 0xFF)
        return line

    def in_service_lines(self) -> list[int]:
        return [line for line in range(LINE_COUNT) if self._state.isr & (1 << line)]

    def reset(self) -> None:
        self._state = PICState()

    def snapshot(self) -> Dict[str, StateValue]:
        return asdict(self._state)
