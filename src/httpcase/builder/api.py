"""Client classes.

Subclassing Api is the build phase of a client: ``configure`` is run once
against a fresh Builder, the declarations are compiled into a PipelineConfig,
and the entry points are generated and installed as class methods. Any
ConfigurationError aborts the class statement, so a misdeclared client never
exists.

    >>> class GitHub(Api, only={"get", "post"}, executor=execute):
    ...     @staticmethod
    ...     def configure(b: Builder) -> None:
    ...         b.plug(BaseUrl, "https://api.github.com")
    ...         b.plug(JSON)
    ...         b.adapter(HttpxAdapter)
    >>>
    >>> GitHub.get("/users/octocat")                       # Result
    >>> GitHub.post_or_raise(client, "/gists", {"a": 1})   # value, or raises RequestError

Or, from a configuration function:

    >>> @api(exclude={"trace", "options"}, docs=False)
    ... def Example(b: Builder) -> None:
    ...     b.plug(JSON)

The executor that actually runs requests is external: any callable
``(api, client, request) -> Result``. Clients name theirs with ``executor=``,
or fall back to HTTPCASE_EXECUTOR.
"""

from __future__ import annotations

import types
from typing import Any, Callable, ClassVar, Protocol, runtime_checkable

from pydantic import ValidationError

from httpcase.foundation.config import get_settings
from httpcase.foundation.errors import (
    ConfigurationError,
    ErrorCode,
    ErrorTrace,
    ExecutorMissingError,
    NoMatchingEntryPoint,
    RequestError,
    Result,
    context,
)
from httpcase.observability import get_logger

from .client import EMPTY_CLIENT, Client
from .compiler import PipelineConfig, Step, compile_pipeline
from .declarations import Builder
from .request import Options, Request
from .verbs import (
    HTTP_VERBS,
    VERB_NAMES,
    EntryPoint,
    ErrorMode,
    GenerationOptions,
    build_dispatchers,
    describe_shapes,
    entry_name,
    generate_entry_points,
)

REQUEST_DOC = """Perform a request.

Options:
- `method`  - the request method, one of [head, get, delete, trace, options, post, put, patch]
- `url`     - either full url e.g. "http://example.com/some/path" or just "/some/path" with a base-url middleware
- `query`   - a list of query params, e.g. `[("page", 1), ("per_page", 100)]`
- `headers` - a list of headers, e.g. `[("content-type", "text/plain")]`
- `body`    - depends on the middleware in use:
    - by default it can be bytes or str
    - with a JSON encoding middleware it can be a nested dict
    - if the adapter supports it, an iterator of any of the above
- `opts`    - custom, per-request middleware or adapter options

Options are given as a list of (key, value) pairs, as keyword arguments, or both
(keywords win):

    ExampleApi.request([("method", "get"), ("url", "/users/path")])
    ExampleApi.request(method="get", url="/users/path")
    ExampleApi.request(client, [("method", "get"), ("url", "/users/path")])

You can also use shortcut methods like:

    ExampleApi.get("/users/1")
    ExampleApi.post(client, "/users", {"name": "Jon"})
"""


@runtime_checkable
class Executor(Protocol):
    """Runs a request through client pre-steps, the api's middleware, the adapter and client post-steps."""

    def __call__(self, api: type[Api], client: Client, request: Request) -> Result[Any, Any]: ...


class Api:
    """Base class for declarative HTTP clients. See the module docstring."""

    pipeline: ClassVar[PipelineConfig] = PipelineConfig()
    generation: ClassVar[GenerationOptions | None] = None
    entry_points: ClassVar[tuple[EntryPoint, ...]] = ()
    executor: ClassVar[Executor | None] = None

    def __init_subclass__(
        cls,
        *,
        only: Any = None,
        exclude: Any = None,
        docs: bool | None = None,
        executor: Executor | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        if executor is not None:
            cls.executor = staticmethod(executor)  # type: ignore[assignment]
        _build(cls, only=only, exclude=exclude, docs=docs)

    @staticmethod
    def configure(b: Builder) -> None:
        """Declare middleware and adapter. Subclasses override this."""

    @classmethod
    def middleware_steps(cls) -> tuple[Step, ...]:
        """Compiled middleware, first declared first."""
        return cls.pipeline.middleware

    @classmethod
    def adapter_step(cls) -> Step | None:
        """Compiled adapter, or None when the executor should use its default."""
        return cls.pipeline.adapter

    @classmethod
    def resolve_executor(cls) -> Executor:
        executor = cls.executor if cls.executor is not None else get_settings().executor
        if executor is None:
            raise ExecutorMissingError.create(
                f"{cls.__qualname__} has no executor; pass executor= to the class or set HTTPCASE_EXECUTOR",
                context(f"api:{cls.__qualname__}"),
            )
        return executor

    @classmethod
    def perform(cls, client: Client, options: Options, overrides: dict[str, Any] | None = None) -> Result[Any, Any]:
        """Build the Request and hand it to the executor."""
        request = Request.from_options(options, **(overrides or {}))
        return cls.resolve_executor()(cls, client, request)


def api(
    configure: Callable[[Builder], None] | None = None,
    /,
    *,
    only: Any = None,
    exclude: Any = None,
    docs: bool | None = None,
    executor: Executor | None = None,
) -> Any:
    """Turn a configuration function into an Api subclass of the same name."""
    def decorator(fn: Callable[[Builder], None]) -> type[Api]:
        def body(ns: dict[str, Any]) -> None:
            ns.update(
                configure=staticmethod(fn),
                __module__=fn.__module__,
                __qualname__=fn.__qualname__,
                __doc__=fn.__doc__,
            )

        kwds = {"only": only, "exclude": exclude, "docs": docs, "executor": executor}
        return types.new_class(fn.__name__, (Api,), kwds, body)

    return decorator(configure) if configure is not None else decorator


# ─────────────────────────────────────────────────────────────────────────────
# Build
# ─────────────────────────────────────────────────────────────────────────────


class _Excluded:
    """Hides an entry point inherited from a parent client that this client excludes."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __get__(self, obj: object, owner: type | None = None) -> Any:
        raise AttributeError(f"{getattr(owner, '__qualname__', owner)} does not generate {self.name!r}")


def _build(cls: type[Api], *, only: Any, exclude: Any, docs: bool | None) -> None:
    log = get_logger("httpcase.builder", api=cls.__qualname__)
    try:
        generation = _generation_options(cls, only, exclude, docs)
        builder = Builder(owner=cls.__qualname__)
        cls.configure(builder)
        middleware, adapter = builder.finish()
        pipeline = compile_pipeline(middleware, adapter)
        entry_points = generate_entry_points(generation)
    except ConfigurationError as e:
        log.error("api build failed", error=str(e), code=e.code.value)
        raise

    cls.pipeline = pipeline
    cls.generation = generation
    cls.entry_points = entry_points
    _install(cls, entry_points, generation.docs)
    log.debug(
        "api compiled",
        middleware=len(pipeline.middleware),
        adapter=pipeline.adapter is not None,
        verbs=[v.name for v in generation.verbs],
        entry_points=len(entry_points),
    )


def _generation_options(cls: type[Api], only: Any, exclude: Any, docs: bool | None) -> GenerationOptions:
    """Explicit keywords, else the parent client's options, else settings."""
    inherited = cls.generation
    defaults = get_settings().builder
    try:
        return GenerationOptions(
            only=only if only is not None else (inherited.only if inherited else defaults.verb_names or VERB_NAMES),
            exclude=exclude if exclude is not None else (inherited.exclude if inherited else ()),
            docs=docs if docs is not None else (inherited.docs if inherited else defaults.docs),
        )
    except ValidationError as e:
        raise ConfigurationError.create(
            f"invalid generation options for {cls.__qualname__}: {e.errors()[0]['msg']}",
            context(f"api:{cls.__qualname__}"),
            code=ErrorCode.INVALID_GENERATION_OPTIONS,
            details=str(e),
        ) from e


def _install(cls: type[Api], entry_points: tuple[EntryPoint, ...], docs: bool) -> None:
    for mode in ErrorMode:
        _set_entry(cls, entry_name("request", mode), _make_request(mode, docs))

    dispatchers = build_dispatchers(entry_points)
    for verb in HTTP_VERBS:
        for mode in ErrorMode:
            name = entry_name(verb.name, mode)
            if name in dispatchers:
                _set_entry(cls, name, dispatchers[name])
            elif hasattr(cls, name):
                setattr(cls, name, _Excluded(name))


def _set_entry(cls: type[Api], name: str, function: Callable[..., Any]) -> None:
    function.__qualname__ = f"{cls.__qualname__}.{name}"
    function.__module__ = cls.__module__
    setattr(cls, name, classmethod(function))


def _make_request(mode: ErrorMode, docs: bool) -> Callable[..., Any]:
    name = entry_name("request", mode)

    def request(api: type[Api], *args: Any, **options: Any) -> Any:
        client, opts = _request_arguments(api, name, args)
        result = api.perform(client, opts, options)
        return result if mode is ErrorMode.SAFE else _unwrap(api, name, result)

    request.__name__ = name
    request.__doc__ = REQUEST_DOC if docs else None
    return request


def _request_arguments(api: type[Api], name: str, args: tuple[Any, ...]) -> tuple[Client, Options]:
    """``request([client,] [options])``."""
    match args:
        case ():
            return EMPTY_CLIENT, []
        case (Client() as client,):
            return client, []
        case (list() as options,):
            return EMPTY_CLIENT, options
        case (Client() as client, list() as options):
            return client, options
    raise NoMatchingEntryPoint.create(
        f"no {api.__qualname__}.{name} entry point accepts ({describe_shapes(args)})",
        context(f"entry:{name}", api=api.__qualname__, arity=len(args)),
    )


def _unwrap(api: type[Api], name: str, result: Result[Any, Any]) -> Any:
    if result.is_ok():
        return result.unwrap()
    error = result.unwrap_err()
    ctx = context(f"entry:{name}", api=api.__qualname__)
    match error:
        case ErrorTrace():
            raise RequestError(error.with_context(ctx))
        case BaseException():
            raise RequestError.create(str(error) or type(error).__name__, ctx) from error
        case _:
            raise RequestError.create(f"request failed: {error!r}", ctx)
