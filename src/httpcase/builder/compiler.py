"""Compile declarations into canonical pipeline steps.

Accepted shapes, in priority order:

    ModuleReference + options   -> ModuleCall(module, options)
    ModuleReference             -> ModuleCall(module, ())
    InlineFunction              -> InlineCall(function)
    None (no adapter declared)  -> None

A SymbolicName, with or without options, always fails with ConfigurationError,
as does a target of no recognised shape. Options are frozen into tuples.
The compiler is pure: the same declarations always yield equal steps, in the
same order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType, ModuleType
from typing import Any, Callable

from httpcase.foundation.errors import ConfigurationError, ErrorCode

from .declarations import Declaration, DeclarationKind, InlineFunction, ModuleReference, SymbolicName


@dataclass(frozen=True, slots=True)
class ModuleCall:
    """Call ``module.call(env, next, options)``.

    Options are frozen on construction (see ``freeze``), so an options list
    of pairs is stored as a tuple of pairs.
    """

    module: type | ModuleType
    options: Any = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", freeze(self.options))


@dataclass(frozen=True, slots=True)
class InlineCall:
    """Call ``function(env, next)``."""

    function: Callable[..., Any]


Step = ModuleCall | InlineCall


def freeze(value: Any) -> Any:
    """Immutable copy of an options value, recursing into containers."""
    match value:
        case list() | tuple():
            return tuple(freeze(v) for v in value)
        case set() | frozenset():
            return frozenset(freeze(v) for v in value)
        case dict() | MappingProxyType():
            return MappingProxyType({k: freeze(v) for k, v in value.items()})
    return value


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Compiled middleware (declaration order) and optional adapter of one client class.

    An absent adapter means the executor supplies its default.
    """

    middleware: tuple[Step, ...] = ()
    adapter: Step | None = None


def compile_declaration(declaration: Declaration) -> Step:
    """Normalize one declaration to a Step."""
    match declaration.target:
        case ModuleReference(module):
            return ModuleCall(module, declaration.options if declaration.has_options else ())
        case InlineFunction(function) if not declaration.has_options:
            return InlineCall(function)
        case InlineFunction(function):
            raise ConfigurationError.create(
                f"{declaration.kind} {_describe(function)} declared at {declaration.origin} "
                "is an inline function and takes no options",
                declaration.origin.as_context(),
            )
        case SymbolicName(name):
            raise _symbolic_name_removed(declaration, name)
    raise ConfigurationError.create(
        f"{declaration.kind} declaration at {declaration.origin} has unsupported target {declaration.value!r}: "
        "expected a class, a module or a callable",
        declaration.origin.as_context(),
    )


def compile_middleware(declarations: Iterable[Declaration]) -> tuple[Step, ...]:
    """Compile middleware declarations, preserving order."""
    return tuple(compile_declaration(d) for d in declarations)


def compile_adapter(declaration: Declaration | None) -> Step | None:
    """Compile the adapter declaration; None passes through."""
    return None if declaration is None else compile_declaration(declaration)


def compile_pipeline(middleware: Iterable[Declaration], adapter: Declaration | None) -> PipelineConfig:
    return PipelineConfig(middleware=compile_middleware(middleware), adapter=compile_adapter(adapter))


def _symbolic_name_removed(declaration: Declaration, name: str) -> ConfigurationError:
    kind = declaration.kind
    call = "plug" if kind == DeclarationKind.MIDDLEWARE else "adapter"
    return ConfigurationError.create(
        f"{kind} {name!r} declared at {declaration.origin} is not supported anymore: "
        "symbolic names no longer resolve to local functions. "
        "Declare a class or module reference, or pass the function itself, "
        f"e.g. b.{call}({name}) instead of b.{call}({name!r})",
        declaration.origin.as_context(),
        code=ErrorCode.LEGACY_SYMBOLIC_NAME,
    )


def _describe(function: Callable[..., Any]) -> str:
    return getattr(function, "__qualname__", None) or repr(function)
