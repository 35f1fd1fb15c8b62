"""Runtime client values.

A Client carries extra middleware the executor runs around a client class's
own pipeline: ``pre`` steps before it, ``post`` steps after it. Clients are
immutable and built from runtime values rather than declarations:

    >>> c = client([(BaseUrl, "https://api.github.com"), (Headers, [("authorization", "token xyz")])])
    >>> GitHub.get(c, "/user")

Accepted list elements: a ``(module, options)`` tuple, ``module`` alone, or a callable.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from httpcase.foundation.errors import MalformedStepError, context

from .compiler import InlineCall, ModuleCall, Step
from .declarations import is_module_reference


@dataclass(frozen=True, slots=True)
class Client:
    """Immutable pre/post step lists merged with a client class's pipeline by the executor."""

    pre: tuple[Step, ...] = ()
    post: tuple[Step, ...] = ()


EMPTY_CLIENT = Client()


def client(pre: Iterable[object] = (), post: Iterable[object] = ()) -> Client:
    """Build a Client from runtime middleware values."""
    return Client(pre=runtime_steps(pre, "pre"), post=runtime_steps(post, "post"))


def runtime_steps(values: Iterable[object], position: str = "pre") -> tuple[Step, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise MalformedStepError.create(
            f"{position} middleware must be a list, got {values!r}",
            context("client", position=position),
        )
    return tuple(runtime_step(value, position, index) for index, value in enumerate(values))


def runtime_step(value: object, position: str = "pre", index: int = 0) -> Step:
    """Normalize one runtime middleware value to a Step."""
    match value:
        case tuple((module, options)) if is_module_reference(module):
            return ModuleCall(module, options)
        case _ if is_module_reference(value):
            return ModuleCall(value, [])  # type: ignore[arg-type]
        case _ if callable(value):
            return InlineCall(value)
    raise MalformedStepError.create(
        f"{position} middleware #{index} is not a module, a (module, options) pair or a callable: {value!r}",
        context("client", position=position, index=index),
    )
