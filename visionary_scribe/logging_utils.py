from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO, TypeVar, Union

from rich.console import Console
from rich.theme import Theme

T = TypeVar("T")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_LEVELS = {"DEBUG": logging.DEBUG, "INFO": logging.INFO, "WARN": logging.WARNING, "ERROR": logging.ERROR}
_STYLES = {"DEBUG": "dim", "INFO": "white", "WARN": "yellow", "ERROR": "red"}
_STEP_WIDTH = 8


def _canonical(level: str) -> str:
    name = level.upper().strip()
    return "WARN" if name == "WARNING" else name


def _format_line(step: str, level: str, message: str, elapsed_ms: Optional[float]) -> str:
    stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{stamp}] [{level.ljust(5)}] [{step.upper().ljust(_STEP_WIDTH)}] {message}"
    if elapsed_ms is not None:
        line += f" (ms={elapsed_ms:.0f})"
    return line


@dataclass
class RunLogger:
    """Step-tagged console log used by the CLI around each user action.

    Lines look like ``[12:00:01.250] [INFO ] [FETCH   ] loaded https://... (ms=412)``
    and are mirrored to ``logfile`` when one is configured.
    """

    console: Console
    level: str = "INFO"
    logfile: Optional[Path] = None
    _sink: Optional[TextIO] = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        self.level = _canonical(self.level)
        if self.logfile:
            self.logfile.parent.mkdir(parents=True, exist_ok=True)
            self._sink = self.logfile.open("a", encoding="utf-8")

    def enabled_for(self, level: str) -> bool:
        return _LEVELS.get(_canonical(level), logging.CRITICAL) >= _LEVELS.get(self.level, logging.INFO)

    def log(self, step: str, message: str, level: str = "INFO", elapsed_ms: Optional[float] = None) -> None:
        level = _canonical(level)
        if not self.enabled_for(level):
            return
        line = _format_line(step, level, message, elapsed_ms)
        # Model and URL text may contain square brackets.
        self.console.print(line, style=_STYLES.get(level, "white"), highlight=False, soft_wrap=True, markup=False)
        if self._sink:
            self._sink.write(line + "\n")
            self._sink.flush()

    def timed(
        self,
        step: str,
        message: Union[str, Callable[[T], str]],
        func: Callable[..., T],
        *args,
        level: str = "INFO",
        **kwargs,
    ) -> T:
        """Run ``func`` and log ``message`` (or ``message(result)``) with the elapsed time."""

        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            self.log(step, f"error: {exc}", level="ERROR", elapsed_ms=(time.perf_counter() - started) * 1000.0)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self.log(step, message(result) if callable(message) else message, level=level, elapsed_ms=elapsed_ms)
        return result

    def close(self) -> None:
        if self._sink:
            self._sink.close()
            self._sink = None


def configure_logging(level: str = "INFO") -> None:
    """Route the ``scribe.*`` module loggers to stderr in the CLI's format."""

    logging.basicConfig(level=_LEVELS.get(_canonical(level), logging.INFO), format=LOG_FORMAT)


def create_logger(level: str, logfile: Optional[Path], console: Optional[Console] = None) -> RunLogger:
    if console is None:
        console = Console(theme=Theme({"repr.number": "cyan"}), stderr=True)
    return RunLogger(console=console, level=level, logfile=logfile)


__all__ = ["LOG_FORMAT", "RunLogger", "configure_logging", "create_logger"]
