"""
Logging utility with timestamps and timing support.
Provides structured, colourful console output for scan stages.
Optionally writes logs to a per-scan file when WRITE_TO_FILE is set.

Timers and the log-file handle live in ``contextvars.ContextVar``
so that concurrent scans do not interfere with each other.
"""

from __future__ import annotations

import contextvars
import os
import pathlib
import re
import sys
import time
from datetime import UTC, datetime
from typing import NamedTuple, TextIO

# ============================================================================
# Per-scan state (isolated via contextvars)
# ============================================================================

# label -> (monotonic start, wall-clock start for display)
_timers: contextvars.ContextVar[dict[str, tuple[float, str]] | None] = contextvars.ContextVar("timers", default=None)
_scan_log: contextvars.ContextVar[TextIO | None] = contextvars.ContextVar("scan_log", default=None)

_ANSI_RE = re.compile(r"\033\[[0-9;]*m")


def _get_timers() -> dict[str, tuple[float, str]]:
    timers = _timers.get()
    if timers is None:
        timers = {}
        _timers.set(timers)
    return timers


# ============================================================================
# Level filtering
# ============================================================================

_min_level = os.environ.get("LOG_LEVEL", "info").lower()


def set_level(level: str) -> None:
    """Set the minimum level written to the console (``debug``, ``info``, ...)."""
    global _min_level
    if level.lower() not in _LEVELS:
        raise ValueError(f"Unknown log level {level!r}")
    _min_level = level.lower()


def _is_enabled(level: str) -> bool:
    floor = _LEVELS.get(_min_level)
    return floor is None or _LEVELS[level].rank >= floor.rank


# ============================================================================
# Per-scan log files
# ============================================================================

_write_to_file = os.environ.get("WRITE_TO_FILE", "").lower() == "true"

LOGS_DIR = ".logs"


def _log_file_name(domain: str, started: datetime) -> str:
    """``www.Example.com`` -> ``Example.com_2024-05-01_12-00-00.log``."""
    stem = re.sub(r"[^\w.-]", "_", domain.removeprefix("www."))[:50]
    return f"{stem}_{started:%Y-%m-%d_%H-%M-%S}.log"


def start_log_file(domain: str) -> None:
    """Open ``.logs/<domain>_<timestamp>.log`` for the current scan.

    Does nothing unless ``WRITE_TO_FILE=true``. A file already open in
    this context is closed first.
    """
    if not _write_to_file:
        return
    end_log_file()

    started = datetime.now(UTC)
    path = pathlib.Path.cwd() / LOGS_DIR / _log_file_name(domain, started)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = path.open("a", encoding="utf-8")
    except OSError as exc:
        print(f"{RED}✗ [Logger] Cannot write scan log {path}: {exc}{RESET}", file=sys.stderr)
        return

    banner = "=" * 80
    handle.write(f"\n{banner}\n  Cookie Scan Log - {domain}\n  Started: {started.isoformat()}\n{banner}\n")
    _scan_log.set(handle)


def end_log_file() -> None:
    """Close the scan log opened by :func:`start_log_file`, if any."""
    handle = _scan_log.get()
    if handle is None:
        return
    _scan_log.set(None)
    try:
        handle.close()
    except OSError as exc:
        print(f"{YELLOW}⚠ [Logger] Scan log not closed cleanly: {exc}{RESET}", file=sys.stderr)


def _emit(line: str) -> None:
    """Write *line* to stderr and, without colours, to the scan log."""
    print(line, file=sys.stderr)
    handle = _scan_log.get()
    if handle is not None:
        print(_ANSI_RE.sub("", line), file=handle, flush=True)


# ============================================================================
# Styling
# ============================================================================

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
GRAY = "\033[90m"


class _Level(NamedTuple):
    rank: int
    colour: str
    symbol: str


_LEVELS: dict[str, _Level] = {
    "debug": _Level(10, GRAY, "•"),
    "timing": _Level(15, MAGENTA, "⏱"),
    "info": _Level(20, CYAN, "ℹ"),
    "success": _Level(20, GREEN, "✓"),
    "warn": _Level(30, YELLOW, "⚠"),
    "error": _Level(40, RED, "✗"),
}


def _format_duration(ms: float) -> str:
    """Render *ms* as ``850ms``, ``2.40s`` or ``1m 5.0s``."""
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60000:
        return f"{ms / 1000:.2f}s"
    minutes, rest = divmod(ms, 60000)
    return f"{int(minutes)}m {rest / 1000:.1f}s"


def _render(value: object) -> str:
    """Colour a data value by type; long strings and containers are abbreviated."""
    if value is None or isinstance(value, bool):
        return f"{DIM if value is None else (GREEN if value else RED)}{value}{RESET}"
    if isinstance(value, (int, float)):
        return f"{YELLOW}{value}{RESET}"
    if isinstance(value, str):
        text = value if len(value) <= 200 else value[:197] + "..."
        return f'{GREEN}"{text}"{RESET}'
    if isinstance(value, (list, tuple, dict)):
        unit = "keys" if isinstance(value, dict) else "items"
        return f"{CYAN}[{len(value)} {unit}]{RESET}"
    return str(value)


# ============================================================================
# Logger Class
# ============================================================================


class Logger:
    """Structured logger with context prefix and timing support."""

    def __init__(self, context: str = "Scanner") -> None:
        self._context = context

    def _log(self, level: str, message: str, data: dict[str, object] | None = None) -> None:
        if not _is_enabled(level):
            return
        style = _LEVELS[level]
        stamp = datetime.now(UTC).strftime("%H:%M:%S.%f")[:-3]
        parts = [f"{GRAY}[{stamp}]{RESET}", f"{style.colour}{style.symbol}{RESET}", f"{BOLD}[{self._context}]{RESET}", message]
        parts.extend(f"{DIM}{key}={RESET}{_render(value)}" for key, value in (data or {}).items())
        _emit(" ".join(parts))

    def info(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("info", message, data)

    def success(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("success", message, data)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("warn", message, data)

    def error(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("error", message, data)

    def debug(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("debug", message, data)

    # -- timing --------------------------------------------------------------

    def _timer_key(self, label: str) -> str:
        return f"{self._context}:{label}"

    def start_timer(self, label: str) -> None:
        """Start a named timer; :meth:`end_timer` logs the elapsed time."""
        _get_timers()[self._timer_key(label)] = (time.monotonic(), datetime.now(UTC).strftime("%H:%M:%S"))
        self._log("timing", f"Starting: {label}")

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop the timer *label* and return its duration in milliseconds."""
        entry = _get_timers().pop(self._timer_key(label), None)
        if entry is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0
        started, started_at = entry
        elapsed_ms = (time.monotonic() - started) * 1000
        self._log(
            "timing",
            f"{message or f'Completed: {label}'} {DIM}took{RESET} {MAGENTA}{_format_duration(elapsed_ms)}{RESET} "
            f"{DIM}(started {started_at}){RESET}",
        )
        return elapsed_ms

    # -- layout --------------------------------------------------------------

    def section(self, title: str) -> None:
        """Print a banner for a major stage of a scan."""
        rule = f"{BLUE}{'─' * 60}{RESET}"
        _emit(f"\n{rule}\n{BLUE}{BOLD}  {title}{RESET}\n{rule}\n")

    def subsection(self, title: str) -> None:
        _emit(f"\n{CYAN}  ▸ {title}{RESET}")


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
