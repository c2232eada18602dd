"""Interface lab session, control word breakdown and event scripting."""

from chiplab.lab.bench import DEFAULT_CHIP, TRACE_ENV, InterfaceLab
from chiplab.lab.control_word import (
    DEFAULT_CONTROL_WORDS,
    ControlWordBreakdown,
    ControlWordError,
    explain,
    format_control_word,
    parse_control_word,
)
from chiplab.lab.events import EVENT_TABLE, EventError, LabEvent, apply_event, parse_event, parse_events

__all__ = [
    "DEFAULT_CHIP",
    "DEFAULT_CONTROL_WORDS",
    "EVENT_TABLE",
    "ControlWordBreakdown",
    "ControlWordError",
    "EventError",
    "InterfaceLab",
    "LabEvent",
    "TRACE_ENV",
    "apply_event",
    "explain",
    "format_control_word",
    "parse_control_word",
    "parse_event",
    "parse_events",
]
