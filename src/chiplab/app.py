"""Interface lab demo application (8255 / 8253 / 8259 bench)."""

from __future__ import annotations

import argparse
import os
from typing import Iterable, Optional

from chiplab.chips import CHIP_TYPES
from chiplab.frontend.lab_overlay import LabOverlay
from chiplab.lab.bench import DEFAULT_CHIP, InterfaceLab

CHIP_ENV = "CHIPLAB_CHIP"
WINDOW_SIZE = (960, 600)

KEY_TAB = 9
KEY_RETURN = 13
KEY_ESCAPE = 27
KEY_SPACE = 32
KEY_UP = 1073741906  # pygame.K_UP
KEY_DOWN = 1073741905  # pygame.K_DOWN
KEY_F1 = 1073741882  # pygame.K_F1
KEY_F2 = 1073741883
KEY_F3 = 1073741884

CHIP_SELECT_KEYS = {KEY_F1: "8255", KEY_F2: "8253", KEY_F3: "8259"}

# Bench-level commands; anything else returned by _key_to_command is an event.
CMD_QUIT = "quit"
CMD_CYCLE = "cycle"
CMD_ANALYSE = "analyse"
CMD_TOGGLE_A0 = "a0"
CMD_WORD_UP = "word+1"
CMD_WORD_DOWN = "word-1"
CMD_RELOAD_UP = "reload+1"
CMD_RELOAD_DOWN = "reload-1"
CMD_GATE = "gate"


def _digit(key: int) -> Optional[int]:
    if ord("0") <= key <= ord("7"):
        return key - ord("0")
    return None


def _key_to_command(chip_id: str, key: int, shift: bool = False) -> Optional[str]:
    """Translate a key press into a bench command or event text."""

    if key in (KEY_ESCAPE, ord("q")):
        return CMD_QUIT
    if key == KEY_TAB:
        return CMD_CYCLE
    if key in CHIP_SELECT_KEYS:
        return f"select:{CHIP_SELECT_KEYS[key]}"
    if key == ord("x"):
        return CMD_ANALYSE
    if key == ord("["):
        return CMD_WORD_DOWN
    if key == ord("]"):
        return CMD_WORD_UP
    if key == ord("r"):
        return "reset"

    digit = _digit(key)
    if chip_id == "8255":
        if digit is not None:
            return f"toggle:{digit}"
        if key in (ord("t"), KEY_RETURN):
            return "transfer"
    elif chip_id == "8253":
        if key == KEY_SPACE:
            return "pulse"
        if key == ord("g"):
            return CMD_GATE
        if key == KEY_UP:
            return CMD_RELOAD_UP
        if key == KEY_DOWN:
            return CMD_RELOAD_DOWN
    elif chip_id == "8259":
        if digit is not None:
            return f"mask:{digit}" if shift else f"raise:{digit}"
        if key == ord("a"):
            return "ack"
        if key == ord("e"):
            return "eoi"
        if key == ord("p"):
            return CMD_TOGGLE_A0
    return None


def _run_command(bench: InterfaceLab, overlay: LabOverlay, command: str) -> bool:
    """Execute one command; returns False when the loop should stop."""

    if command == CMD_QUIT:
        return False
    try:
        if command == CMD_CYCLE:
            chip_id = bench.cycle_chip()
            overlay.set_status(f"Selected {chip_id}")
        elif command.startswith("select:"):
            bench.select_chip(command.partition(":")[2])
            overlay.set_status(f"Selected {bench.active_chip}")
        elif command == CMD_ANALYSE:
            bench.analyse()
            overlay.set_status(f"Analysed {bench.control_word_text()}")
        elif command in (CMD_WORD_UP, CMD_WORD_DOWN):
            bench.step_control_word(1 if command == CMD_WORD_UP else -1)
            overlay.set_status(f"Control word {bench.control_word_text()}")
        elif command == CMD_TOGGLE_A0:
            bench.set_a0(not bench.a0)
            overlay.set_status(f"A0={bench.a0}")
        elif command in (CMD_RELOAD_UP, CMD_RELOAD_DOWN):
            delta = 1 if command == CMD_RELOAD_UP else -1
            event = bench.apply(f"reload:{bench.pit.reload + delta}")
            overlay.record_event(str(event))
            overlay.set_status(f"Reload {bench.pit.reload}")
        elif command == CMD_GATE:
            event = bench.apply("gate:off" if bench.pit.gate else "gate:on")
            overlay.record_event(str(event))
            overlay.set_status(f"Gate {'on' if bench.pit.gate else 'off'}")
        else:
            event = bench.apply(command)
            overlay.record_event(str(event))
            overlay.set_status(f"Applied {event}")
    except ValueError as exc:
        overlay.set_status(f"Rejected: {exc}")
    return True


def _pygame_loop(scale: int, fps: int, *, chip_id: str, reload: Optional[int] = None) -> None:
    import pygame  # type: ignore

    bench = InterfaceLab(chip_id, reload=reload)
    overlay = LabOverlay(bench)

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_SIZE[0] * scale // 2, WINDOW_SIZE[1] * scale // 2))
    clock = pygame.time.Clock()

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue
            if event.type != pygame.KEYDOWN:
                continue
            shift = bool(event.mod & pygame.KMOD_SHIFT)
            command = _key_to_command(bench.active_chip, event.key, shift)
            if command is None:
                continue
            if not _run_command(bench, overlay, command):
                running = False

        overlay.render(screen)
        pygame.display.flip()
        clock.tick(fps)

    pygame.quit()


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="8255/8253/8259 interface lab")
    parser.add_argument("--scale", type=int, default=2, help="Window scale, 2 = 960x600 (default: 2)")
    parser.add_argument("--fps", type=int, default=30, help="Target frames per second")
    parser.add_argument(
        "--chip",
        choices=CHIP_TYPES,
        default=os.getenv(CHIP_ENV, DEFAULT_CHIP),
        help=f"Chip shown at start-up (default: ${CHIP_ENV} or {DEFAULT_CHIP})",
    )
    parser.add_argument("--reload", type=int, default=None, help="Initial 8253 reload value (>= 1)")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.scale <= 0:
        raise SystemExit("scale must be positive")
    if args.fps <= 0:
        raise SystemExit("fps must be positive")
    if args.chip not in CHIP_TYPES:
        raise SystemExit(f"unknown chip in ${CHIP_ENV}: {args.chip}")
    if args.reload is not None and args.reload < 1:
        raise SystemExit("reload must be >= 1")

    try:
        _pygame_loop(args.scale, args.fps, chip_id=args.chip, reload=args.reload)
    except RuntimeError as exc:
        raise SystemExit(str(exc))


if __name__ == "__main__":
    main()
