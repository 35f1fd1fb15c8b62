"""Error handling for httpcase.

- ErrorCode: machine-readable error codes
- HttpcaseError and subclasses: exceptions wrapping an ErrorTrace
- Result/Ok/Err: return type of the safe entry points
- ErrorTrace/ErrorContext: error context stacking and provenance tracking
"""

from .errors import (
    ConfigurationError,
    ErrorCode,
    ExecutorMissingError,
    HttpcaseError,
    LegacyUsageError,
    MalformedStepError,
    NoMatchingEntryPoint,
    RequestError,
)
from .result import Err, Ok, Result
from .types import ErrorContext, ErrorTrace, JsonDict, JsonValue, context

__all__ = [
    # Exceptions
    "ErrorCode", "HttpcaseError", "ConfigurationError", "MalformedStepError", "LegacyUsageError",
    "ExecutorMissingError", "RequestError", "NoMatchingEntryPoint",
    # Result
    "Result", "Ok", "Err",
    # Error context
    "ErrorContext", "ErrorTrace", "JsonDict", "JsonValue", "context",
]
