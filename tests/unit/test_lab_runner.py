"""Tests for the headless lab runner CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chiplab import lab_runner
from chiplab.lab.bench import TRACE_ENV


@pytest.fixture(autouse=True)
def _no_trace(monkeypatch):
    monkeypatch.delenv(TRACE_ENV, raising=False)


def test_pic_scenario_text_output(capsys) -> None:
    code = lab_runner.main(["--chip", "8259", "--event", "raise:3", "--event", "ack"])
    assert code == 0
    out = capsys.readouterr().out
    assert "8259 PIC" in out
    assert "ISR       0  0  0  0  1  0  0  0  08H" in out
    assert "IRR       0  0  0  0  0  0  0  0  00H" in out


def test_json_output_with_trace(capsys) -> None:
    code = lab_runner.main(
        ["--chip", "8253", "--reload", "3", "--event", "pulse", "--event", "pulse:2", "--trace", "--format", "json"]
    )
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["chip"] == "8253"
    assert payload["events"] == ["pulse:1", "pulse:2"]
    assert payload["state"] == {"count": 3, "reload": 3, "gate": True, "out": False}
    assert [entry["count"] for entry in payload["trace"]] == [2, 3]


def test_script_runs_after_events(tmp_path: Path, capsys) -> None:
    script = tmp_path / "ppi.txt"
    script.write_text("# switches\ntoggle:0\ntoggle:1\ntransfer\n", encoding="utf-8")
    code = lab_runner.main(["--chip", "8255", "--event", "toggle:7", "--script", str(script), "--format", "json"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["state"] == {"port_a": 0x83, "port_b": 0x83}


def test_missing_script_returns_error(tmp_path: Path, capsys) -> None:
    code = lab_runner.main(["--chip", "8255", "--script", str(tmp_path / "missing.txt")])
    assert code == lab_runner.EXIT_SCRIPT_ERROR
    assert "Failed to read script" in capsys.readouterr().err


def test_invalid_event_is_parser_error(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        lab_runner.main(["--chip", "8255", "--event", "toggle:9"])
    assert excinfo.value.code == 2
    assert "invalid event" in capsys.readouterr().err


def test_invalid_event_in_script_applies_nothing(tmp_path: Path) -> None:
    script = tmp_path / "bad.txt"
    script.write_text("raise:1\nack\nbogus\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        lab_runner.main(["--chip", "8259", "--script", str(script)])


@pytest.mark.parametrize("argv", [["--chip", "8253", "--reload", "0"], ["--chip", "8255", "--control-word", "XYZ"]])
def test_invalid_options_are_parser_errors(argv) -> None:
    with pytest.raises(SystemExit) as excinfo:
        lab_runner.main(argv)
    assert excinfo.value.code == 2


def test_control_word_breakdown_printed(capsys) -> None:
    code = lab_runner.main(["--chip", "8253", "--control-word", "36"])
    assert code == 0
    out = capsys.readouterr().out
    assert "36H = 00110110B  8253 control word" in out
    assert "mode 3 (square wave generator)" in out


def test_control_word_json_with_a0(capsys) -> None:
    code = lab_runner.main(["--chip", "8259", "--control-word", "05", "--a0", "1", "--format", "json"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["control_word"]["title"] == "8259 OCW1 (A0=1)"
    assert payload["control_word"]["value"] == 5


def test_text_trace_lines(capsys) -> None:
    lab_runner.main(["--chip", "8259", "--event", "raise:0", "--event", "ack", "--trace"])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "[001] raise:0      irr=1 isr=0 imr=0"
    assert lines[1] == "[002] ack          irr=0 isr=1 imr=0"
