"""Generation of the per-verb entry points.

For every included verb, eight variants are generated: safe and raising
(``get`` / ``get_or_raise``), with and without an explicit client, with and
without an options list. Parameters come in a fixed order:

    [client,] url [, body] [, opts]

``body`` exists only for verbs that accept one (post, put, patch).

Python has no arity overloading, so the four variants sharing a name are
tried in order by a dispatcher, the way clauses of one function are matched:

    (client, url[, body], opts)   client is a Client, opts is a list
    <legacy shim>                 first argument is a function -> LegacyUsageError
    (client, url[, body])         client is a Client
    <legacy shim>
    (url[, body], opts)           opts is a list
    (url[, body])

When nothing matches, NoMatchingEntryPoint (a TypeError) is raised.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel, ConfigDict, field_validator

from httpcase.foundation.errors import ErrorTrace, LegacyUsageError, NoMatchingEntryPoint, Result, context
from httpcase.observability import get_logger

from .client import EMPTY_CLIENT, Client
from .request import Options

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


class ErrorMode(StrEnum):
    SAFE = "safe"
    RAISING = "raising"


class ClientMode(StrEnum):
    EXPLICIT = "client"
    IMPLICIT = "noclient"


class OptsMode(StrEnum):
    WITH_OPTS = "opts"
    WITHOUT_OPTS = "noopts"


@dataclass(frozen=True, slots=True)
class VerbSpec:
    name: str
    accepts_body: bool = False


HTTP_VERBS: tuple[VerbSpec, ...] = (
    VerbSpec("head"),
    VerbSpec("get"),
    VerbSpec("delete"),
    VerbSpec("trace"),
    VerbSpec("options"),
    VerbSpec("post", accepts_body=True),
    VerbSpec("put", accepts_body=True),
    VerbSpec("patch", accepts_body=True),
)
VERB_NAMES: tuple[str, ...] = tuple(v.name for v in HTTP_VERBS)

RAISING_SUFFIX = "_or_raise"


def entry_name(base: str, error_mode: ErrorMode) -> str:
    """``get`` -> ``get`` (safe) / ``get_or_raise`` (raising)."""
    return base if error_mode is ErrorMode.SAFE else f"{base}{RAISING_SUFFIX}"


# ─────────────────────────────────────────────────────────────────────────────
# Generation options
# ─────────────────────────────────────────────────────────────────────────────


class GenerationOptions(BaseModel):
    """Which verbs get entry points, and whether usage text is attached."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    only: frozenset[str] = frozenset(VERB_NAMES)
    exclude: frozenset[str] = frozenset()
    docs: bool = True

    @field_validator("only", "exclude", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> Any:
        """Accept a single name, VerbSpecs, or any iterable of names."""
        if isinstance(v, (str, VerbSpec)):
            v = (v,)
        try:
            return frozenset(getattr(name, "name", name).lower() for name in v)
        except (TypeError, AttributeError):
            return v

    @field_validator("only", "exclude")
    @classmethod
    def _known_verbs(cls, v: frozenset[str]) -> frozenset[str]:
        if unknown := v.difference(VERB_NAMES):
            raise ValueError(f"unknown verbs {sorted(unknown)}; expected any of {list(VERB_NAMES)}")
        return v

    @property
    def verbs(self) -> tuple[VerbSpec, ...]:
        """Included verbs minus excluded ones, in canonical order."""
        return tuple(v for v in HTTP_VERBS if v.name in self.only and v.name not in self.exclude)


# ─────────────────────────────────────────────────────────────────────────────
# Variants
# ─────────────────────────────────────────────────────────────────────────────

_ANNOTATIONS: dict[str, object] = {"client": Client, "url": str, "body": Any, "opts": Options}
_RETURNS: dict[ErrorMode, object] = {ErrorMode.SAFE: Result[Any, ErrorTrace], ErrorMode.RAISING: Any}


@dataclass(frozen=True, slots=True)
class EntryPointVariant:
    verb: VerbSpec
    error_mode: ErrorMode
    client_mode: ClientMode
    opts_mode: OptsMode

    @property
    def name(self) -> str:
        return entry_name(self.verb.name, self.error_mode)

    @property
    def request_name(self) -> str:
        return entry_name("request", self.error_mode)

    @property
    def parameters(self) -> tuple[str, ...]:
        return (
            *(("client",) if self.client_mode is ClientMode.EXPLICIT else ()),
            "url",
            *(("body",) if self.verb.accepts_body else ()),
            *(("opts",) if self.opts_mode is OptsMode.WITH_OPTS else ()),
        )

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def matches(self, args: Sequence[object]) -> bool:
        """Argument shapes accepted by this variant (the dispatch guard)."""
        if len(args) != self.arity:
            return False
        if self.client_mode is ClientMode.EXPLICIT and not isinstance(args[0], Client):
            return False
        return self.opts_mode is OptsMode.WITHOUT_OPTS or isinstance(args[-1], list)

    def signature(self) -> inspect.Signature:
        return inspect.Signature(
            [inspect.Parameter(p, inspect.Parameter.POSITIONAL_ONLY, annotation=_ANNOTATIONS[p]) for p in self.parameters],
            return_annotation=_RETURNS[self.error_mode],
        )


def enumerate_variants(options: GenerationOptions) -> tuple[EntryPointVariant, ...]:
    """Every variant for every generated verb; 8 per verb."""
    return tuple(
        EntryPointVariant(verb, error_mode, client_mode, opts_mode)
        for verb in options.verbs
        for error_mode in ErrorMode
        for client_mode in ClientMode
        for opts_mode in OptsMode
    )


# ─────────────────────────────────────────────────────────────────────────────
# Entry points
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class LegacyClientShim:
    """Rejects the old calling convention where a function was passed as the client."""

    variant: EntryPointVariant

    def matches(self, args: Sequence[object]) -> bool:
        return len(args) == self.variant.arity and callable(args[0]) and not isinstance(args[0], Client)

    def __call__(self, api: type, *args: object) -> Any:
        name = f"{api.__qualname__}.{self.variant.name}"
        get_logger("httpcase.entry", api=api.__qualname__).warning("legacy client function", entry=self.variant.name)
        raise LegacyUsageError.create(
            f"{name} was called with a function as its client, which is no longer supported. "
            "Build a client value with httpcase.client(pre, post) and pass it instead.",
            context(f"entry:{self.variant.name}", api=api.__qualname__),
        )


@dataclass(frozen=True, slots=True)
class EntryPoint:
    """One generated variant: its callable, type contract, usage text and legacy shim."""

    variant: EntryPointVariant
    function: Callable[..., Any]
    signature: inspect.Signature
    doc: str | None = None
    shim: LegacyClientShim | None = None

    @property
    def name(self) -> str:
        return self.variant.name


def generate_entry_points(options: GenerationOptions) -> tuple[EntryPoint, ...]:
    return tuple(_entry_point(variant, options.docs) for variant in enumerate_variants(options))


def _entry_point(variant: EntryPointVariant, docs: bool) -> EntryPoint:
    documented = docs and variant.client_mode is ClientMode.EXPLICIT and variant.opts_mode is OptsMode.WITH_OPTS
    return EntryPoint(
        variant=variant,
        function=_make_function(variant),
        signature=variant.signature(),
        doc=verb_doc(variant) if documented else None,
        shim=LegacyClientShim(variant) if variant.client_mode is ClientMode.EXPLICIT else None,
    )


def _make_function(variant: EntryPointVariant) -> Callable[..., Any]:
    verb, params = variant.verb, variant.parameters

    def entry(api: type, *args: Any) -> Any:
        values = dict(zip(params, args))
        options: Options = [("method", verb.name), ("url", values["url"])]
        if verb.accepts_body:
            options.append(("body", values["body"]))
        options.extend(values.get("opts", ()))
        return getattr(api, variant.request_name)(values.get("client", EMPTY_CLIENT), options)

    entry.__name__ = variant.name
    entry.__qualname__ = variant.name
    entry.__signature__ = variant.signature()  # type: ignore[attr-defined]
    entry.__annotations__ = {p: _ANNOTATIONS[p] for p in params} | {"return": _RETURNS[variant.error_mode]}
    entry.__doc__ = None
    return entry


def verb_doc(variant: EntryPointVariant) -> str:
    name = variant.name
    body = ', {"name": "Jon"}' if variant.verb.accepts_body else ""
    query = '[("query", [("scope", "admin")])]'
    return (
        f"Perform a {variant.verb.name.upper()} request.\n"
        f"\n"
        f"See `{variant.request_name}` for options definition.\n"
        f"\n"
        f'    {name}("/users"{body})\n'
        f'    {name}("/users"{body}, {query})\n'
        f'    {name}(client, "/users"{body})\n'
        f'    {name}(client, "/users"{body}, {query})\n'
    )


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────────────


def build_dispatchers(entry_points: Iterable[EntryPoint]) -> dict[str, Callable[..., Any]]:
    """One dispatcher per public name (``get``, ``get_or_raise``, ...), in generation order."""
    grouped: dict[str, list[EntryPoint]] = {}
    for ep in entry_points:
        grouped.setdefault(ep.name, []).append(ep)
    return {name: _dispatcher(name, eps) for name, eps in grouped.items()}


def _dispatcher(name: str, entry_points: list[EntryPoint]) -> Callable[..., Any]:
    clauses: list[tuple[Callable[[Sequence[object]], bool], Callable[..., Any]]] = []
    for ep in entry_points:
        clauses.append((ep.variant.matches, ep.function))
        if ep.shim is not None:
            clauses.append((ep.shim.matches, ep.shim))

    def dispatch(api: type, *args: Any) -> Any:
        for matches, function in clauses:
            if matches(args):
                return function(api, *args)
        raise NoMatchingEntryPoint.create(
            f"no {api.__qualname__}.{name} entry point accepts ({describe_shapes(args)})",
            context(f"entry:{name}", api=api.__qualname__, arity=len(args)),
        )

    dispatch.__name__ = name
    dispatch.__qualname__ = name
    dispatch.__doc__ = next((ep.doc for ep in entry_points if ep.doc), None)
    dispatch.variants = tuple(entry_points)  # type: ignore[attr-defined]
    return dispatch


def describe_shapes(args: Sequence[object]) -> str:
    return ", ".join(type(a).__name__ for a in args)
