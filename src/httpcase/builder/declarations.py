"""Declarations and the builder that collects them.

A client class is configured by a ``configure(b)`` function receiving a
Builder. Each ``b.plug(...)`` / ``b.adapter(...)`` call records one
Declaration together with the call site it came from:

    >>> def configure(b: Builder) -> None:
    ...     b.plug(BaseUrl, "http://api.example.com")   # module reference with options
    ...     b.plug(JSON)                                # module reference alone
    ...     b.plug(lambda env, next: next(env))         # inline function
    ...     b.adapter(HttpxAdapter)

Declaration targets are a tagged union of ModuleReference, InlineFunction and
SymbolicName. A symbolic name (a bare string) is the removed way of addressing
local functions. Nothing is validated here: symbolic names and values of no
recognised shape are recorded as written and rejected by the compiler.
"""

from __future__ import annotations

import inspect
from collections import deque
from dataclasses import dataclass
from enum import StrEnum
from types import ModuleType
from typing import Any, Callable, Final

from httpcase.foundation.errors import ConfigurationError, ErrorContext, context
from httpcase.observability import get_logger


class DeclarationKind(StrEnum):
    MIDDLEWARE = "middleware"
    ADAPTER = "adapter"


class _Absent:
    """Marker for an omitted options argument."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<absent>"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()


@dataclass(frozen=True, slots=True)
class Origin:
    """Where a declaration was made."""

    kind: DeclarationKind
    file: str
    line: int
    function: str = ""

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"

    def as_context(self) -> ErrorContext:
        return context(self.kind.value, str(self), function=self.function)


# ─────────────────────────────────────────────────────────────────────────────
# Targets
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ModuleReference:
    """A class or module implementing the middleware/adapter contract."""
    module: type | ModuleType


@dataclass(frozen=True, slots=True)
class InlineFunction:
    """A callable declared in place."""
    function: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class SymbolicName:
    """A bare name. No longer resolvable; kept only so it can be rejected."""
    name: str


Target = ModuleReference | InlineFunction | SymbolicName


def is_module_reference(value: object) -> bool:
    return inspect.isclass(value) or inspect.ismodule(value)


def parse_target(value: object) -> Target | None:
    """Tag a raw declaration target; None when it has no recognised shape."""
    if isinstance(value, str):
        return SymbolicName(value)
    if is_module_reference(value):
        return ModuleReference(value)  # type: ignore[arg-type]
    if callable(value):
        return InlineFunction(value)
    return None


@dataclass(frozen=True, slots=True)
class Declaration:
    """One plug/adapter statement, as written. ``target`` is None for untaggable values."""

    value: object
    target: Target | None
    options: object
    origin: Origin

    @property
    def kind(self) -> DeclarationKind:
        return self.origin.kind

    @property
    def has_options(self) -> bool:
        return self.options is not ABSENT


# ─────────────────────────────────────────────────────────────────────────────
# Collector
# ─────────────────────────────────────────────────────────────────────────────


class Builder:
    """Collects declarations for one client class during its configuration.

    Middleware is kept newest-first and reversed once by ``finish()``. Adapter
    declarations replace each other; the last one wins. After ``finish()``
    the builder is closed and any further declaration fails.
    """

    __slots__ = ("owner", "_middleware", "_adapter", "_closed")

    def __init__(self, owner: str = "") -> None:
        self.owner = owner
        self._middleware: deque[Declaration] = deque()
        self._adapter: Declaration | None = None
        self._closed = False

    def plug(self, target: object, options: object = ABSENT) -> None:
        """Attach middleware: a class/module (optionally with options) or a callable."""
        self._middleware.appendleft(self._record(DeclarationKind.MIDDLEWARE, target, options))

    def adapter(self, target: object, options: object = ABSENT) -> None:
        """Choose the adapter: a class/module (optionally with options) or a callable."""
        declaration = self._record(DeclarationKind.ADAPTER, target, options)
        if self._adapter is not None:
            get_logger("httpcase.builder", api=self.owner).warning(
                "adapter replaced", previous=str(self._adapter.origin), current=str(declaration.origin),
            )
        self._adapter = declaration

    def _record(self, kind: DeclarationKind, target: object, options: object) -> Declaration:
        origin = _caller_origin(kind)
        if self._closed:
            raise ConfigurationError.create(
                f"{kind} declared at {origin} after {self.owner or 'the client'} was built",
                origin.as_context(),
            )
        return Declaration(target, parse_target(target), options, origin)

    @property
    def closed(self) -> bool:
        return self._closed

    def finish(self) -> tuple[tuple[Declaration, ...], Declaration | None]:
        """Close the builder and return (middleware in declaration order, adapter)."""
        self._closed = True
        return tuple(reversed(self._middleware)), self._adapter


def _caller_origin(kind: DeclarationKind) -> Origin:
    """Origin of the frame that called Builder.plug/adapter."""
    frame = inspect.currentframe()
    try:
        # _caller_origin <- _record <- plug/adapter <- caller
        for _ in range(3):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return Origin(kind, "<unknown>", 0)
        return Origin(kind, frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name)
    finally:
        del frame
