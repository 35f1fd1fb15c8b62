"""Test helpers for client classes.

RecordingExecutor stands in for a real executor: it records every request a
client class hands over and answers with a configured value or error.

    >>> executor = RecordingExecutor(response={"id": 1})
    >>> class Users(Api, executor=executor): ...
    >>> Users.get("/users/1")
    Ok({'id': 1})
    >>> executor.assert_called_with(method="get", url="/users/1")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from httpcase.builder import Client, Request
from httpcase.foundation.errors import Err, ErrorCode, ErrorTrace, Ok, Result


@dataclass(slots=True)
class Invocation:
    """Record of a single executor call."""
    api: type
    client: Client
    request: Request


@dataclass
class RecordingExecutor:
    """Executor double with invocation recording.

    Answers, in priority order: ``side_effect(request)``, ``Err(error)``,
    ``Ok(response)``, else ``Ok(request)``.
    """

    response: Any = None
    error: ErrorTrace | Exception | None = None
    side_effect: Callable[[Request], Result[Any, Any]] | None = None
    invocations: list[Invocation] = field(default_factory=list)

    def __call__(self, api: type, client: Client, request: Request) -> Result[Any, Any]:
        self.invocations.append(Invocation(api=api, client=client, request=request))
        if self.side_effect is not None:
            return self.side_effect(request)
        if self.error is not None:
            return Err(self.error)
        return Ok(self.response if self.response is not None else request)

    @classmethod
    def failing(cls, message: str = "request failed", code: ErrorCode = ErrorCode.REQUEST_FAILED) -> RecordingExecutor:
        return cls(error=ErrorTrace(message=message, error_code=code.value))

    @property
    def call_count(self) -> int:
        return len(self.invocations)

    @property
    def called(self) -> bool:
        return self.call_count > 0

    @property
    def last_call(self) -> Invocation | None:
        return self.invocations[-1] if self.invocations else None

    def assert_called(self) -> None:
        if not self.called:
            raise AssertionError("Expected executor to be called")

    def assert_not_called(self) -> None:
        if self.called:
            raise AssertionError(f"Executor called {self.call_count} times")

    def assert_called_with(self, **fields: object) -> None:
        """Compare fields of the last Request (and ``client=``) with expected values."""
        last = self.last_call
        if last is None:
            raise AssertionError("Expected executor to be called")
        for key, expected in fields.items():
            actual = last.client if key == "client" else getattr(last.request, key)
            if actual != expected:
                raise AssertionError(f"'{key}': expected {expected!r}, got {actual!r}")

    def reset(self) -> None:
        self.invocations.clear()


def echo_executor(api: type, client: Client, request: Request) -> Result[Any, Any]:
    """Executor answering every request with Ok(request). Usable as HTTPCASE_EXECUTOR."""
    return Ok(request)
