"""Structured logging for the build phase and the generated entry points.

Quick Start:
    >>> from httpcase.observability import configure_logging, get_logger
    >>> configure_logging(format="console")  # or "json" for production
    >>> log = get_logger("my-client")
    >>> log.info("compiled", steps=3)

Format and level default to the HTTPCASE_LOG_FORMAT / HTTPCASE_LOG_LEVEL settings.
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TextIO, runtime_checkable

from httpcase.foundation.config import get_settings
from httpcase.foundation.errors import JsonDict, JsonValue


@dataclass(slots=True)
class BoundLogger:
    """Structured logger with bound context. Context given to get_logger() is attached to every entry.

    Example:
        >>> log = BoundLogger(context={"api": "GitHub"})
        >>> log.info("request received", method="get")
        # => 10:30:45.120 [info] request received api="GitHub" method="get"
    """

    context: JsonDict = field(default_factory=dict)
    _renderer: LogRenderer | None = None
    _level: int = logging.DEBUG

    def _log(self, level: int, event: str, **kw: JsonValue) -> None:
        if level < self._level:
            return
        merged = {**self.context, **kw}
        (self._renderer or _get_renderer()).render(LogEntry(time.time(), _level_name(level), event, merged))

    def debug(self, event: str, **kw: JsonValue) -> None: self._log(logging.DEBUG, event, **kw)
    def info(self, event: str, **kw: JsonValue) -> None: self._log(logging.INFO, event, **kw)
    def warning(self, event: str, **kw: JsonValue) -> None: self._log(logging.WARNING, event, **kw)
    def error(self, event: str, **kw: JsonValue) -> None: self._log(logging.ERROR, event, **kw)


@dataclass(slots=True)
class LogEntry:
    """Log entry with all context."""

    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def ts_iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()

    @property
    def ts_human(self) -> str:
        """HH:MM:SS.mmm"""
        return datetime.fromtimestamp(self.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    """Protocol for log output renderers."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable console output. Format: timestamp [level] event key=value ..."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None  # None = auto-detect
    show_timestamp: bool = True

    def __post_init__(self) -> None:
        if self.colors is None:
            self.colors = getattr(self.output, "isatty", lambda: False)()

    def render(self, entry: LogEntry) -> None:
        c = _COLORS if self.colors else _NO_COLORS
        parts = ([f"{c['dim']}{entry.ts_human}{c['reset']}"] if self.show_timestamp else [])
        parts += [f"{_LEVEL_COLORS.get(entry.level, c['dim']) if self.colors else ''}[{entry.level}]{c['reset']}",
                  f"{c['bold']}{entry.event}{c['reset']}"]
        parts += [f"{c['cyan']}{k}{c['reset']}={_format_value(v, c)}" for k, v in sorted(entry.context.items())]
        print(" ".join(parts), file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        import orjson
        print(orjson.dumps({"timestamp": entry.ts_iso, "level": entry.level, "event": entry.event,
                            **entry.context}, option=orjson.OPT_NON_STR_KEYS, default=repr).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    """Silent renderer for testing."""

    def render(self, entry: LogEntry) -> None:
        pass


@dataclass(slots=True)
class CaptureRenderer:
    """Keeps entries in memory; used by tests to assert on emitted events."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self, level: str | None = None) -> list[str]:
        return [e.event for e in self.entries if level is None or e.level == level]


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────

_renderer: ContextVar[LogRenderer | None] = ContextVar("log_renderer", default=None)
_default_level: ContextVar[int | None] = ContextVar("log_level", default=None)


def configure_logging(
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    level: str | None = None,
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
    renderer: LogRenderer | None = None,
) -> LogRenderer:
    """Configure global structured logging. Format: "console" (human), "json" (machine), "none".

    Unset arguments fall back to the logging settings. An explicit renderer wins over format.
    """
    settings = get_settings().logging
    _default_level.set(getattr(logging, (level or settings.level).upper(), logging.INFO))
    if renderer is None:
        match format or settings.format:
            case "console": renderer = ConsoleRenderer(output=output or sys.stderr, colors=colors)
            case "json": renderer = JsonRenderer(output=output or sys.stdout)
            case "none": renderer = NoOpRenderer()
            case other: raise ValueError(f"Unknown format: {other}. Use 'console', 'json', or 'none'")
    _renderer.set(renderer)
    return renderer


def get_logger(name: str | None = None, **initial_context: JsonValue) -> BoundLogger:
    """Get a structured logger with optional initial context. Name is added to context as 'logger'."""
    ctx = {**initial_context, **({"logger": name} if name else {})}
    return BoundLogger(context=ctx, _level=_current_level())


def _current_level() -> int:
    if (level := _default_level.get()) is None:
        return getattr(logging, get_settings().logging.level, logging.INFO)
    return level


def _get_renderer() -> LogRenderer:
    """Get configured renderer or create one from settings."""
    if (renderer := _renderer.get()) is None:
        renderer = configure_logging()
    return renderer


_COLORS = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "red": "\033[31m",
           "green": "\033[32m", "yellow": "\033[33m", "blue": "\033[34m", "cyan": "\033[36m", "white": "\033[37m"}
_NO_COLORS = {k: "" for k in _COLORS}
_LEVEL_COLORS = {"debug": _COLORS["dim"], "info": _COLORS["green"], "warning": _COLORS["yellow"], "error": _COLORS["red"]}


def _level_name(level: int) -> str:
    return logging.getLevelName(level).lower()


def _format_value(v: object, c: dict[str, str]) -> str:
    match v:
        case str(): return f'{c["yellow"]}"{v}"{c["reset"]}'
        case bool(): return f'{c["blue"]}{str(v).lower()}{c["reset"]}'
        case int() | float(): return f'{c["blue"]}{v}{c["reset"]}'
        case dict(): return f'{c["dim"]}{{{len(v)} items}}{c["reset"]}'
        case list() | tuple(): return f'{c["dim"]}[{len(v)} items]{c["reset"]}'
        case _: return f'{c["white"]}{v!r}{c["reset"]}'
