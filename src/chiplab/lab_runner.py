"""Headless runner that replays event scripts against one chip model."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Sequence

from chiplab.chips import CHIP_TYPES
from chiplab.chips.base import PeripheralDevice
from chiplab.frontend.formatting import state_lines
from chiplab.lab.bench import InterfaceLab
from chiplab.lab.control_word import ControlWordError, parse_control_word
from chiplab.lab.events import EventError, LabEvent, parse_event, parse_events

EXIT_OK = 0
EXIT_SCRIPT_ERROR = 1


def _read_script(path: Path) -> List[str]:
    return path.read_text(encoding="utf-8").splitlines()


def _collect_events(chip_id: str, event_specs: Sequence[str], script_lines: Sequence[str]) -> List[LabEvent]:
    events = [parse_event(chip_id, spec) for spec in event_specs]
    events.extend(parse_events(chip_id, script_lines))
    return events


def _state_dict(chip: PeripheralDevice) -> Dict[str, object]:
    return {key: value for key, value in chip.snapshot().items()}


def _format_text(chip: PeripheralDevice) -> str:
    return "\n".join(state_lines(chip))


def _run_events(bench: InterfaceLab, events: Sequence[LabEvent], *, trace: bool) -> List[Dict[str, object]]:
    history: List[Dict[str, object]] = []
    for index, event in enumerate(events, start=1):
        bench.apply(event)
        if trace:
            entry: Dict[str, object] = {"step": index, "event": str(event)}
            entry.update(_state_dict(bench.chip))
            history.append(entry)
    return history


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chiplab-runner",
        description="Replay 8255/8253/8259 events headlessly and dump the resulting state.",
    )
    parser.add_argument("--chip", choices=CHIP_TYPES, required=True, help="Chip model to drive")
    parser.add_argument(
        "--event",
        action="append",
        default=[],
        help="Event such as toggle:3, transfer, pulse:4, gate:off, raise:2, ack, eoi (repeatable)",
    )
    parser.add_argument(
        "--script",
        type=str,
        default=None,
        help="File with one event per line ('#' starts a comment); runs after --event",
    )
    parser.add_argument("--reload", type=int, default=None, help="Initial 8253 reload value (>= 1)")
    parser.add_argument(
        "--control-word",
        type=str,
        default=None,
        help="Hex control word to break down for the selected chip (e.g. 36 or 0x36)",
    )
    parser.add_argument("--a0", type=int, choices=(0, 1), default=0, help="8259 port for --control-word")
    parser.add_argument("--trace", action="store_true", help="Print the state after every event")
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format for the final state",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    if args.reload is not None and args.reload < 1:
        parser.error(f"invalid reload: {args.reload} (must be >= 1)")

    control_word = None
    if args.control_word is not None:
        try:
            control_word = parse_control_word(args.control_word)
        except ControlWordError as exc:
            parser.error(str(exc))

    script_lines: List[str] = []
    if args.script is not None:
        try:
            script_lines = _read_script(Path(args.script))
        except OSError as exc:
            print(f"Failed to read script: {exc}", file=sys.stderr)
            return EXIT_SCRIPT_ERROR

    try:
        events = _collect_events(args.chip, args.event, script_lines)
    except EventError as exc:
        parser.error(f"invalid event: {exc}")

    bench = InterfaceLab(args.chip, reload=args.reload)
    history = _run_events(bench, events, trace=args.trace)

    breakdown = None
    if control_word is not None:
        bench.control_word = control_word
        bench.set_a0(args.a0)
        breakdown = bench.analyse()

    if args.format == "json":
        payload: Dict[str, object] = {
            "chip": args.chip,
            "events": [str(event) for event in events],
            "state": _state_dict(bench.chip),
        }
        if args.trace:
            payload["trace"] = history
        if breakdown is not None:
            payload["control_word"] = {
                "value": breakdown.value,
                "title": breakdown.title,
                "fields": [list(item) for item in breakdown.fields],
            }
        print(json.dumps(payload, indent=2))
        return EXIT_OK

    for entry in history:
        state = " ".join(f"{key}={int(value)}" for key, value in entry.items() if key not in ("step", "event"))
        print(f"[{entry['step']:03d}] {entry['event']:<12} {state}")
    print(bench.chip_name)
    print(_format_text(bench.chip))
    if breakdown is not None:
        print("\n".join(breakdown.lines()))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
