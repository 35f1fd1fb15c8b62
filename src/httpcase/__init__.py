"""httpcase - declarative HTTP client classes.

A client class lists its middleware and adapter once; httpcase compiles that
declaration into an ordered pipeline description and generates the request
surface: ``request`` plus, per HTTP verb, safe and raising entry points that
take an optional client value, a url, a body (post/put/patch) and an optional
options list. Executing the pipeline is the job of an executor you supply.

Quick Start:
    >>> from httpcase import Api, Builder, client
    >>>
    >>> class GitHub(Api, only={"get", "post"}, executor=my_executor):
    ...     @staticmethod
    ...     def configure(b: Builder) -> None:
    ...         b.plug(BaseUrl, "https://api.github.com")
    ...         b.plug(JSON)
    ...         b.adapter(HttpxAdapter)
    >>>
    >>> GitHub.middleware_steps()
    (ModuleCall(module=<class 'BaseUrl'>, options='https://api.github.com'), ModuleCall(module=<class 'JSON'>, options=()))
    >>> GitHub.get("/users/octocat")
    >>> GitHub.post_or_raise(client([(Auth, "token")]), "/gists", {"files": {}})

Decorator form:
    >>> from httpcase import api
    >>> @api(exclude={"trace", "options"}, docs=False)
    ... def Example(b: Builder) -> None:
    ...     b.plug(JSON)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .builder import (
    EMPTY_CLIENT,
    HTTP_VERBS,
    VERB_NAMES,
    Api,
    Builder,
    Client,
    EntryPoint,
    EntryPointVariant,
    Executor,
    GenerationOptions,
    InlineCall,
    ModuleCall,
    PipelineConfig,
    Request,
    Step,
    VerbSpec,
    api,
    client,
)
from .foundation.config import HttpcaseSettings, get_settings, reset_settings
from .foundation.errors import (
    ConfigurationError,
    Err,
    ErrorCode,
    ErrorTrace,
    ExecutorMissingError,
    HttpcaseError,
    LegacyUsageError,
    MalformedStepError,
    NoMatchingEntryPoint,
    Ok,
    RequestError,
    Result,
)
from .observability import configure_logging, get_logger

__all__ = [
    "__version__",
    # Client classes
    "Api", "api", "Builder", "Executor",
    # Pipeline
    "Step", "ModuleCall", "InlineCall", "PipelineConfig",
    # Runtime clients
    "Client", "client", "EMPTY_CLIENT",
    # Entry points
    "Request", "VerbSpec", "HTTP_VERBS", "VERB_NAMES", "GenerationOptions", "EntryPoint", "EntryPointVariant",
    # Errors
    "HttpcaseError", "ConfigurationError", "MalformedStepError", "LegacyUsageError",
    "RequestError", "ExecutorMissingError", "NoMatchingEntryPoint", "ErrorCode", "ErrorTrace",
    "Result", "Ok", "Err",
    # Config & logging
    "HttpcaseSettings", "get_settings", "reset_settings", "configure_logging", "get_logger",
]
