from __future__ import annotations

import io

import pytest
from rich.console import Console

from visionary_scribe.logging_utils import create_logger


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def test_level_filtering_and_logfile(tmp_path) -> None:
    console = _console()
    logfile = tmp_path / "logs" / "run.log"
    run_log = create_logger("warning", logfile, console=console)

    run_log.log("fetch", "hidden", level="INFO")
    run_log.log("fetch", "[shown] warning", level="WARN")
    run_log.close()

    out = console.file.getvalue()
    assert "hidden" not in out
    assert "[shown] warning" in out
    assert "[FETCH   ]" in out
    assert "[shown] warning" in logfile.read_text(encoding="utf-8")


def test_timed_reports_result_and_errors() -> None:
    console = _console()
    run_log = create_logger("INFO", None, console=console)

    assert run_log.timed("analyze", lambda value: f"got {value}", lambda: 42) == 42
    with pytest.raises(ValueError):
        run_log.timed("analyze", "never", _boom)

    out = console.file.getvalue()
    assert "got 42 (ms=" in out
    assert "error: boom" in out


def _boom() -> None:
    raise ValueError("boom")
