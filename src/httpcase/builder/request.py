"""Request descriptor handed to the executor.

Entry points assemble an options list of ``(key, value)`` pairs; later keys
override earlier ones. Recognised keys:

- ``method``  - one of head, get, delete, trace, options, post, put, patch
- ``url``     - full url, e.g. "http://example.com/some/path", or "/some/path" with a base-url middleware
- ``query``   - list of query params, e.g. ``[("page", 1), ("per_page", 100)]``
- ``headers`` - list of headers, e.g. ``[("content-type", "text/plain")]``
- ``body``    - depends on the middleware in use (bytes, str, nested dict with a JSON encoder, ...)
- ``opts``    - custom per-request middleware or adapter options, opaque to httpcase
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

Method = Literal["head", "get", "delete", "trace", "options", "post", "put", "patch"]
RequestOption = tuple[str, Any]
Options = list[RequestOption]

OPTION_KEYS: tuple[str, ...] = ("method", "url", "query", "headers", "body", "opts")

_OPTIONS_ADAPTER: TypeAdapter[list[RequestOption]] = TypeAdapter(list[RequestOption])


class Request(BaseModel):
    """What to send, independent of how it is sent."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        json_schema_extra={"title": "Request", "examples": [{"method": "get", "url": "/users", "query": [["page", 1]]}]},
    )

    method: Method = "get"
    url: str = ""
    query: list[tuple[str, Any]] = Field(default_factory=list)
    headers: list[tuple[str, str]] = Field(default_factory=list)
    body: Any = None
    opts: list[tuple[str, Any]] = Field(default_factory=list)

    @field_validator("method", mode="before")
    @classmethod
    def _lower_method(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v

    @classmethod
    def from_options(cls, options: Iterable[RequestOption] = (), **overrides: Any) -> Request:
        """Fold an options list (then keyword overrides) into a Request. Later keys win."""
        fields: dict[str, Any] = {}
        for key, value in _OPTIONS_ADAPTER.validate_python(list(options)):
            fields[key] = value
        fields.update(overrides)
        return cls.model_validate(fields)
