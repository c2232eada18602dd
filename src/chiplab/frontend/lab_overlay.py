"""pygame rendering of the interface lab bench."""

from __future__ import annotations

from collections import deque
from typing import Iterable, List, Optional, Tuple

from chiplab.chips import PIC8259, PIT8253, PPI8255, bits_msb_first
from chiplab.frontend.formatting import hex_byte, state_lines
from chiplab.lab.bench import InterfaceLab

Color = Tuple[int, int, int]

LAMP_ON: dict[str, Color] = {
    "PB": (59, 130, 246),
    "PA": (239, 68, 68),
    "IRR": (250, 204, 21),
    "IMR": (148, 163, 184),
    "ISR": (34, 197, 94),
}
LAMP_OFF: Color = (40, 44, 52)
TITLE_COLOR: Color = (255, 215, 0)
TEXT_COLOR: Color = (230, 230, 230)
STATUS_COLOR: Color = (173, 216, 230)
BACKGROUND: Color = (15, 23, 42)


class LabOverlay:
    """Collects and renders the bench state onto a pygame surface."""

    TRACE_LENGTH = 16
    WAVE_LENGTH = 32
    LAMP_RADIUS = 9
    INSTRUCTIONS = {
        "8255": ["0-7: toggle PB bit", "T/RETURN: transfer PB -> PA", "R: reset"],
        "8253": ["SPACE: clock pulse", "G: toggle gate", "UP/DOWN: reload +/-1", "R: reset"],
        "8259": ["0-7: raise/lower IR", "SHIFT+0-7: toggle mask", "A: acknowledge", "E: EOI", "R: reset"],
    }
    COMMON_INSTRUCTIONS = [
        "TAB / F1-F3: select chip",
        "[ / ]: control word -/+1",
        "P: toggle A0 (8259)",
        "X: analyse control word",
        "ESC/Q: quit",
    ]

    def __init__(self, bench: InterfaceLab) -> None:
        self._bench = bench
        self._trace: deque[str] = deque(maxlen=self.TRACE_LENGTH)
        self._out_levels: deque[bool] = deque(maxlen=self.WAVE_LENGTH)
        self._font = None
        self._line_height = 0
        self._cached_state: List[str] = []
        self._cached_control: List[str] = []
        self._status_message: str = ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def record_event(self, text: str) -> None:
        self._trace.append(f"{self._bench.active_chip} {text}")
        if self._bench.active_chip == "8253":
            self._out_levels.append(self._bench.pit.out)

    def get_trace(self) -> list[str]:
        """Expose a copy of the recent events for tests."""

        return list(self._trace)

    def set_status(self, message: str) -> None:
        self._status_message = message

    @property
    def status(self) -> str:
        return self._status_message

    def capture_state(self) -> None:
        bench = self._bench
        self._cached_state = state_lines(bench.chip)
        control = [f"Word: {bench.control_word_text()}"]
        if bench.active_chip == "8259":
            control[0] += f"  A0={bench.a0}"
        if bench.breakdown is not None:
            control.extend(bench.breakdown.lines())
        else:
            control.append("(press X to analyse)")
        self._cached_control = control

    def lamp_rows(self) -> List[Tuple[str, int]]:
        """Registers shown as lamp rows for the active chip."""

        chip = self._bench.chip
        if isinstance(chip, PPI8255):
            return [("PB", chip.port_b), ("PA", chip.port_a)]
        if isinstance(chip, PIC8259):
            return [("IRR", chip.irr), ("IMR", chip.imr), ("ISR", chip.isr)]
        return []

    def render(self, screen) -> None:
        """Render the bench onto the given pygame surface."""

        import pygame  # type: ignore

        self._ensure_font()
        self.capture_state()
        screen.fill(BACKGROUND)

        x_cursor = 24
        y_cursor = 16
        column_gap = max(12, self._line_height // 2)

        if self._font is not None:
            title = self._font.render(self._bench.chip_name, True, TITLE_COLOR)
            screen.blit(title, (x_cursor, y_cursor))
            y_cursor += self._line_height + 4
            if self._status_message:
                status = self._font.render(self._status_message, True, STATUS_COLOR)
                screen.blit(status, (x_cursor, y_cursor))
            y_cursor += self._line_height + 4

        y_cursor = self._render_lamps(screen, x_cursor, y_cursor)
        y_cursor = self._render_pit_wave(screen, x_cursor, y_cursor)
        y_cursor = self._render_section(screen, x_cursor, y_cursor + column_gap, "State", self._cached_state)
        self._render_section(screen, x_cursor, y_cursor + column_gap, "Control word", self._cached_control)

        right_x = screen.get_width() // 2 + 40
        right_y = 16
        controls = self.INSTRUCTIONS[self._bench.active_chip] + self.COMMON_INSTRUCTIONS
        right_y = self._render_section(screen, right_x, right_y, "Controls", controls)
        trace_lines = list(reversed(self._trace)) or ["<empty>"]
        self._render_section(screen, right_x, right_y + column_gap, "Events", trace_lines)

        pygame.display.set_caption(f"Interface Lab | {self._bench.chip_name}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_font(self) -> None:
        if self._font is not None:
            return
        import pygame  # type: ignore

        pygame.font.init()
        self._font = pygame.font.SysFont("Courier", 14)
        self._line_height = self._font.get_linesize()

    def _render_section(self, surface, x: int, y: int, title: str, lines: Iterable[str]) -> int:
        if self._font is None:
            return y
        title_surface = self._font.render(title, True, TITLE_COLOR)
        surface.blit(title_surface, (x, y))
        cursor_y = y + self._line_height
        for line in lines:
            rendered = self._font.render(line, True, TEXT_COLOR)
            surface.blit(rendered, (x, cursor_y))
            cursor_y += self._line_height
        return cursor_y

    def _render_lamps(self, surface, x: int, y: int) -> int:
        import pygame  # type: ignore

        rows = self.lamp_rows()
        if not rows or self._font is None:
            return y
        diameter = self.LAMP_RADIUS * 2
        label_width = self._font.size("IRR ")[0]
        for label, value in rows:
            label_surface = self._font.render(label, True, TEXT_COLOR)
            surface.blit(label_surface, (x, y + self.LAMP_RADIUS - self._line_height // 2))
            on_color = LAMP_ON.get(label, TEXT_COLOR)
            for index, bit in enumerate(bits_msb_first(value)):
                center = (x + label_width + index * (diameter + 8) + self.LAMP_RADIUS, y + self.LAMP_RADIUS)
                pygame.draw.circle(surface, on_color if bit else LAMP_OFF, center, self.LAMP_RADIUS)
            value_x = x + label_width + 8 * (diameter + 8)
            value_surface = self._font.render(hex_byte(value), True, on_color)
            surface.blit(value_surface, (value_x, y + self.LAMP_RADIUS - self._line_height // 2))
            y += diameter + 8
        return y

    def _render_pit_wave(self, surface, x: int, y: int) -> int:
        import pygame  # type: ignore

        chip = self._bench.chip
        if not isinstance(chip, PIT8253) or self._font is None:
            return y
        levels = list(self._out_levels) or [chip.out]
        step = 12
        high_y = y + 4
        low_y = y + 28
        cursor_x = x
        previous: Optional[bool] = None
        for level in levels:
            level_y = high_y if level else low_y
            if previous is not None and previous != level:
                pygame.draw.line(surface, LAMP_ON["ISR"], (cursor_x, high_y), (cursor_x, low_y), 2)
            pygame.draw.line(surface, LAMP_ON["ISR"], (cursor_x, level_y), (cursor_x + step, level_y), 2)
            cursor_x += step
            previous = level
        label = self._font.render("OUT", True, TEXT_COLOR)
        surface.blit(label, (cursor_x + 8, y + 8))
        return low_y + 8

