"""8253 PIT model running a single counter in a mode-3 style square wave."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Dict

from chiplab.chips.base import ChipInputError, StateValue

DEFAULT_RELOAD = 4


@dataclass(frozen=True)
class PITState:
    count: int = DEFAULT_RELOAD
    reload: int = DEFAULT_RELOAD
    gate: bool = True
    out: bool = True


def _check_reload(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ChipInputError(f"reload must be an integer, got {value!r}")
    if value < 1:
        raise ChipInputError(f"reload must be >= 1, got {value}")
    return value


class PIT8253:
    """Down-counter advanced by explicit clock pulses.

    The state record is immutable and every operation swaps in a complete new
    record, so the decrement, reload and OUT toggle of a terminal pulse are
    never observable separately.
    """

    CHIP_ID = "8253"
    NAME = "8253 PIT (timer/counter)"

    def __init__(self, reload: int = DEFAULT_RELOAD) -> None:
        _check_reload(reload)
        self._state = PITState(count=reload, reload=reload)

    @property
    def count(self) -> int:
        return self._state.count

    @property
    def reload(self) -> int:
        return self._state.reload

    @property
    def gate(self) -> bool:
        return self._state.gate

    @property
    def out(self) -> bool:
        return self._state.out

    def set_reload(self, value: int) -> None:
        """Change the reload value; the running count is left alone."""

        self._state = replace(self._state, reload=_check_reload(value))

    def set_gate(self, enabled: bool) -> None:
        self._state = replace(self._state, gate=bool(enabled))

    def pulse_clock(self) -> bool:
        """Apply one CLK pulse. Returns True when OUT toggled."""

        state = self._state
        if not state.gate:
            return False
        remaining = state.count - 1
        if remaining <= 0:
            self._state = replace(state, count=state.reload, out=not state.out)
            return True
        self._state = replace(state, count=remaining)
        return False

    def reset(self) -> None:
        self._state = replace(self._state, count=self._state.reload, out=True)

    def snapshot(self) -> Dict[str, StateValue]:
        return asdict(self._state)
