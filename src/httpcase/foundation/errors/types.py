"""Error context and provenance tracking.

Every error raised by httpcase carries an ErrorTrace: a message, an error code,
and a stack of ErrorContext entries naming where the failure happened
(a declaration's origin, an entry point, a request).
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

_EMPTY_META: JsonDict = {}


class ErrorContext(BaseModel):
    """Context for an error at a call site: operation, location, metadata."""

    model_config = ConfigDict(
        frozen=True, str_strip_whitespace=True, extra="forbid",
        revalidate_instances="never",
        json_schema_extra={"title": "Error Context", "examples": [{"operation": "middleware", "location": "api.py:12", "metadata": {}}]},
    )

    operation: Annotated[str, Field(min_length=1)]
    location: str = Field(default="", repr=False)
    metadata: JsonDict = Field(default_factory=dict, repr=False)

    def __str__(self) -> str:
        loc = f" at {self.location}" if self.location else ""
        meta = f" ({', '.join(f'{k}={v}' for k, v in self.metadata.items())})" if self.metadata else ""
        return f"{self.operation}{loc}{meta}"

    def __hash__(self) -> int:
        return hash((self.operation, self.location, tuple(sorted(self.metadata.items()))))


_EMPTY_CONTEXTS: tuple[ErrorContext, ...] = ()


class ErrorTrace(BaseModel):
    """Stack of error contexts forming a call chain trace. Immutable."""

    model_config = ConfigDict(
        frozen=True, str_strip_whitespace=True, validate_default=True, extra="forbid",
        revalidate_instances="never",
        json_schema_extra={"title": "Error Trace", "description": "Error with provenance tracking"},
    )

    message: Annotated[str, Field(min_length=1)]
    contexts: tuple[ErrorContext, ...] = _EMPTY_CONTEXTS
    error_code: str | None = Field(default=None, repr=True)
    recoverable: bool = True
    details: str | None = Field(default=None, repr=False)

    @field_serializer("contexts")
    def _serialize_contexts(self, v: tuple[ErrorContext, ...]) -> list[JsonDict]:
        return [ctx.model_dump() for ctx in v]

    def __hash__(self) -> int:
        return hash((self.message, self.error_code, self.recoverable))

    def with_context(self, ctx: ErrorContext) -> ErrorTrace:
        """Add context to trace (returns new trace)."""
        return ErrorTrace.model_construct(
            message=self.message,
            contexts=(*self.contexts, ctx),
            error_code=self.error_code,
            recoverable=self.recoverable,
            details=self.details,
        )

    def format(self, *, include_details: bool = False) -> str:
        """Format trace as human-readable string."""
        parts = [self.message]
        if self.error_code:
            parts.append(f" [{self.error_code}]")
        if self.contexts:
            parts.append("\nContext trace:\n" + "\n".join(f"  - {ctx}" for ctx in self.contexts))
        if include_details and self.details:
            parts.append(f"\nDetails:\n{self.details}")
        return "".join(parts)

    __str__ = format


def context(operation: str, location: str = "", **metadata: JsonValue) -> ErrorContext:
    """Create ErrorContext concisely (bypasses validation)."""
    return ErrorContext.model_construct(
        operation=operation,
        location=location,
        metadata=metadata or _EMPTY_META,
    )

