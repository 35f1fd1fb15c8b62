"""Error codes and exception types.

Build-phase failures (ConfigurationError) abort the creation of a client
class. Runtime failures (MalformedStepError, LegacyUsageError, RequestError,
ExecutorMissingError, NoMatchingEntryPoint) propagate to the caller.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar, Self

from .types import ErrorContext, ErrorTrace


class ErrorCode(StrEnum):
    """Machine-readable error codes."""
    INVALID_DECLARATION = "INVALID_DECLARATION"
    LEGACY_SYMBOLIC_NAME = "LEGACY_SYMBOLIC_NAME"
    INVALID_GENERATION_OPTIONS = "INVALID_GENERATION_OPTIONS"
    MALFORMED_STEP = "MALFORMED_STEP"
    LEGACY_CLIENT_FUNCTION = "LEGACY_CLIENT_FUNCTION"
    NO_MATCHING_ENTRY_POINT = "NO_MATCHING_ENTRY_POINT"
    EXECUTOR_MISSING = "EXECUTOR_MISSING"
    REQUEST_FAILED = "REQUEST_FAILED"
    UNKNOWN = "UNKNOWN"


class HttpcaseError(Exception):
    """Base exception wrapping an ErrorTrace."""

    default_code: ClassVar[ErrorCode] = ErrorCode.UNKNOWN
    recoverable: ClassVar[bool] = True

    def __init__(self, error: ErrorTrace) -> None:
        self.trace = error
        super().__init__(error.message)

    @classmethod
    def create(
        cls,
        message: str,
        *contexts: ErrorContext,
        code: ErrorCode | None = None,
        details: str | None = None,
    ) -> Self:
        """Build the exception and its trace in one step."""
        return cls(ErrorTrace.model_construct(
            message=message,
            contexts=contexts,
            error_code=(code or cls.default_code).value,
            recoverable=cls.recoverable,
            details=details,
        ))

    @property
    def code(self) -> ErrorCode:
        """The trace's code, or ``default_code`` when it is unset or not an ErrorCode (executor-defined codes)."""
        return ErrorCode._value2member_map_.get(self.trace.error_code or "", self.default_code)  # type: ignore[return-value]


class ConfigurationError(HttpcaseError):
    """A client declaration cannot be compiled. Fatal to the build."""

    default_code = ErrorCode.INVALID_DECLARATION
    recoverable = False


class MalformedStepError(HttpcaseError):
    """A runtime middleware value is neither a module reference nor a callable."""

    default_code = ErrorCode.MALFORMED_STEP


class LegacyUsageError(HttpcaseError):
    """A function was passed where a Client value is expected."""

    default_code = ErrorCode.LEGACY_CLIENT_FUNCTION


class ExecutorMissingError(HttpcaseError):
    """No executor was configured for a client class."""

    default_code = ErrorCode.EXECUTOR_MISSING


class RequestError(HttpcaseError):
    """Raised by the raising entry points when the executor returns Err."""

    default_code = ErrorCode.REQUEST_FAILED


class NoMatchingEntryPoint(HttpcaseError, TypeError):
    """No generated entry point accepts the given argument shapes."""

    default_code = ErrorCode.NO_MATCHING_ENTRY_POINT
