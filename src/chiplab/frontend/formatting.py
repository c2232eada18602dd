"""Text formatting of chip state for the overlay and the headless runner."""

from __future__ import annotations

from typing import List

from chiplab.chips import PIC8259, PIT8253, PPI8255, bits_msb_first
from chiplab.chips.base import PeripheralDevice


def hex_byte(value: int) -> str:
    return f"{value & 0xFF:02X}H"


def lamp_string(value: int) -> str:
    """Bits D7..D0 as ``1``/``0`` separated by spaces."""

    return " ".join(str(bit) for bit in bits_msb_first(value))


def _level(flag: bool) -> str:
    return "HIGH" if flag else "LOW"


def _ppi_lines(ppi: PPI8255) -> List[str]:
    return [
        "         D7 D6 D5 D4 D3 D2 D1 D0",
        f"PB (in)   {lamp_string(ppi.port_b).replace(' ', '  ')}  {hex_byte(ppi.port_b)}",
        f"PA (out)  {lamp_string(ppi.port_a).replace(' ', '  ')}  {hex_byte(ppi.port_a)}",
    ]


def _pit_lines(pit: PIT8253) -> List[str]:
    return [
        f"COUNT:{pit.count}  RELOAD:{pit.reload}",
        f"GATE:{_level(pit.gate)}  OUT:{_level(pit.out)}",
    ]


def _pic_lines(pic: PIC8259) -> List[str]:
    pending = pic.pending_line()
    in_service = pic.in_service_lines()
    return [
        "         D7 D6 D5 D4 D3 D2 D1 D0",
        f"IRR       {lamp_string(pic.irr).replace(' ', '  ')}  {hex_byte(pic.irr)}",
        f"IMR       {lamp_string(pic.imr).replace(' ', '  ')}  {hex_byte(pic.imr)}",
        f"ISR       {lamp_string(pic.isr).replace(' ', '  ')}  {hex_byte(pic.isr)}",
        f"NEXT:{'-' if pending is None else f'IR{pending}'}  "
        f"IN-SERVICE:{','.join(f'IR{line}' for line in in_service) or '-'}",
    ]


def state_lines(chip: PeripheralDevice) -> List[str]:
    """Render the registers of any chip model as text lines."""

    if isinstance(chip, PPI8255):
        return _ppi_lines(chip)
    if isinstance(chip, PIT8253):
        return _pit_lines(chip)
    if isinstance(chip, PIC8259):
        return _pic_lines(chip)
    return [f"{key}:{value}" for key, value in chip.snapshot().items()]
