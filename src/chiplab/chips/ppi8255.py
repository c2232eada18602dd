"""8255 PPI model: one output latch, one input latch and a manual transfer."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

from chiplab.chips.base import StateValue, check_line, mask8


@dataclass
class PPIState:
    port_a: int = 0
    port_b: int = 0


class PPI8255:
    """Port B is driven by switches, port A only follows it on transfer."""

    CHIP_ID = "8255"
    NAME = "8255 PPI (parallel interface)"

    def __init__(self) -> None:
        self._state = PPIState()

    @property
    def port_a(self) -> int:
        return self._state.port_a

    @property
    def port_b(self) -> int:
        return self._state.port_b

    def toggle_input_bit(self, bit: int) -> None:
        check_line(bit, "bit")
        self._state.port_b = mask8(self._state.port_b ^ (1 << bit))

    def transfer(self) -> None:
        self._state.port_a = self._state.port_b

    def reset(self) -> None:
        self._state = PPIState()

    def snapshot(self) -> Dict[str, StateValue]:
        return asdict(self._state)
