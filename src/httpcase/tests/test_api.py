"""Tests for generated entry points on client classes."""

from __future__ import annotations

import inspect

import pytest
from pydantic import ValidationError

from httpcase import (
    Api,
    Builder,
    Client,
    ConfigurationError,
    Err,
    ErrorCode,
    ErrorTrace,
    ExecutorMissingError,
    LegacyUsageError,
    NoMatchingEntryPoint,
    Ok,
    Request,
    RequestError,
    api,
    client,
)
from httpcase.builder import REQUEST_DOC
from httpcase.foundation.config import reset_settings
from httpcase.observability import CaptureRenderer
from httpcase.testing import RecordingExecutor


class Auth:
    """Middleware module stand-in."""


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def users(executor: RecordingExecutor) -> type[Api]:
    class Users(Api, executor=executor):
        @staticmethod
        def configure(b: Builder) -> None:
            b.plug(Auth, "token")

    return Users


# ═════════════════════════════════════════════════════════════════════════════
# Verb entry points
# ═════════════════════════════════════════════════════════════════════════════


class TestVerbs:
    def test_implicit_client_without_opts(self, users: type[Api], executor: RecordingExecutor) -> None:
        result = users.get("/users")

        assert result.is_ok()
        assert result.unwrap() == Request(method="get", url="/users")
        executor.assert_called_with(method="get", url="/users", client=Client())
        assert executor.last_call.api is users

    def test_empty_opts_same_as_no_opts(self, users: type[Api], executor: RecordingExecutor) -> None:
        assert users.get("/users") == users.get("/users", [])
        assert executor.call_count == 2

    def test_opts_are_passed_through(self, users: type[Api], executor: RecordingExecutor) -> None:
        users.get("/users", [("query", [("page", 2)]), ("headers", [("accept", "text/plain")])])

        executor.assert_called_with(query=[("page", 2)], headers=[("accept", "text/plain")])

    def test_opts_override_method_and_url(self, users: type[Api], executor: RecordingExecutor) -> None:
        users.get("/users", [("url", "/admins")])

        executor.assert_called_with(url="/admins")

    def test_explicit_client(self, users: type[Api], executor: RecordingExecutor) -> None:
        runtime = client([(Auth, "other-token")])

        users.delete(runtime, "/users/1")
        executor.assert_called_with(method="delete", url="/users/1", client=runtime)

        users.head(runtime, "/users/1", [("query", [("q", 1)])])
        executor.assert_called_with(method="head", client=runtime, query=[("q", 1)])

    def test_body_verbs(self, users: type[Api], executor: RecordingExecutor) -> None:
        users.post("/users", {"name": "Jon"})
        executor.assert_called_with(method="post", url="/users", body={"name": "Jon"})

        users.patch(client(), "/users/1", b"raw", [("headers", [("content-type", "text/plain")])])
        executor.assert_called_with(method="patch", body=b"raw", headers=[("content-type", "text/plain")])

    def test_list_body_is_not_mistaken_for_opts(self, users: type[Api], executor: RecordingExecutor) -> None:
        users.put("/tags", ["a", "b"])

        executor.assert_called_with(method="put", body=["a", "b"], opts=[])

    def test_raising_variant_returns_value(self, users: type[Api]) -> None:
        assert users.get_or_raise("/users") == Request(url="/users")
        assert users.post_or_raise(client(), "/users", "x", []).body == "x"

    def test_raising_variant_raises_request_error(self) -> None:
        class Failing(Api, executor=RecordingExecutor.failing("connection refused")):
            pass

        assert Failing.get("/users").is_err()
        with pytest.raises(RequestError, match="connection refused") as exc_info:
            Failing.get_or_raise("/users")
        assert exc_info.value.code is ErrorCode.REQUEST_FAILED

    def test_raising_variant_chains_exceptions(self) -> None:
        boom = ConnectionError("reset by peer")

        class Failing(Api, executor=RecordingExecutor(error=boom)):
            pass

        with pytest.raises(RequestError, match="reset by peer") as exc_info:
            Failing.put_or_raise("/users/1", {})
        assert exc_info.value.__cause__ is boom

    def test_raising_variant_with_plain_error_value(self) -> None:
        class Failing(Api, executor=RecordingExecutor(side_effect=lambda request: Err(503))):
            pass

        with pytest.raises(RequestError, match="503"):
            Failing.get_or_raise("/status")

    def test_raising_variant_keeps_executor_error_codes(self) -> None:
        timeout = ErrorTrace(message="timed out", error_code="TIMEOUT")

        class Slow(Api, executor=RecordingExecutor(error=timeout)):
            pass

        with pytest.raises(RequestError, match="timed out") as exc_info:
            Slow.get_or_raise("/users")
        assert exc_info.value.code is ErrorCode.REQUEST_FAILED
        assert exc_info.value.trace.error_code == "TIMEOUT"


class TestDispatch:
    @pytest.mark.parametrize(
        "args",
        [
            (),
            ("/users", {"query": []}),
            ("/users", "query=1"),
            ("/users", [], "extra"),
            (Client(), "/users", [], "extra"),
        ],
    )
    def test_no_matching_entry_point(self, users: type[Api], executor: RecordingExecutor, args: tuple) -> None:
        with pytest.raises(NoMatchingEntryPoint, match="Users.get entry point"):
            users.get(*args)
        executor.assert_not_called()

    def test_no_matching_entry_point_is_a_type_error(self, users: type[Api]) -> None:
        with pytest.raises(TypeError):
            users.get_or_raise("/users", ("query", []))

    def test_legacy_client_function_is_rejected(
        self, users: type[Api], executor: RecordingExecutor, logs: CaptureRenderer
    ) -> None:
        def legacy_client(env):
            return env

        with pytest.raises(LegacyUsageError, match=r"httpcase.client\(pre, post\)") as exc_info:
            users.get(legacy_client, "/users")
        assert exc_info.value.code is ErrorCode.LEGACY_CLIENT_FUNCTION
        executor.assert_not_called()
        assert "legacy client function" in logs.events("warning")

    @pytest.mark.parametrize("name", ["get", "get_or_raise"])
    def test_legacy_client_function_with_opts(self, users: type[Api], name: str) -> None:
        with pytest.raises(LegacyUsageError):
            getattr(users, name)(lambda env: env, "/users", [])

    def test_legacy_client_function_on_body_verb(self, users: type[Api]) -> None:
        with pytest.raises(LegacyUsageError):
            users.post(print, "/users", {"a": 1})

    def test_client_value_works_where_function_failed(self, users: type[Api], executor: RecordingExecutor) -> None:
        with pytest.raises(LegacyUsageError):
            users.get(lambda env: env, "/users")

        assert users.get(client([lambda env: env]), "/users").is_ok()
        assert executor.call_count == 1


# ═════════════════════════════════════════════════════════════════════════════
# request
# ═════════════════════════════════════════════════════════════════════════════


class TestRequest:
    def test_keyword_options(self, users: type[Api], executor: RecordingExecutor) -> None:
        users.request(method="POST", url="/users", body="x")

        executor.assert_called_with(method="post", url="/users", body="x", client=Client())

    def test_options_list(self, users: type[Api], executor: RecordingExecutor) -> None:
        users.request([("method", "put"), ("url", "/a"), ("url", "/b")])

        executor.assert_called_with(method="put", url="/b")

    def test_keywords_win_over_list(self, users: type[Api], executor: RecordingExecutor) -> None:
        users.request([("url", "/a")], url="/b")

        executor.assert_called_with(url="/b")

    def test_with_client(self, users: type[Api], executor: RecordingExecutor) -> None:
        runtime = client(post=[Auth])

        users.request(runtime, [("url", "/a")])
        executor.assert_called_with(client=runtime, url="/a")

        users.request(runtime, url="/b")
        executor.assert_called_with(client=runtime, url="/b")

    def test_defaults_to_get(self, users: type[Api]) -> None:
        assert users.request_or_raise(url="/users").method == "get"

    def test_unknown_option_is_rejected(self, users: type[Api]) -> None:
        with pytest.raises(ValidationError):
            users.request([("timeout", 5)])

    def test_bad_positional_arguments(self, users: type[Api]) -> None:
        with pytest.raises(NoMatchingEntryPoint, match="Users.request entry point"):
            users.request("/users")

    def test_doc(self, users: type[Api]) -> None:
        assert users.request.__doc__ == REQUEST_DOC
        assert users.request_or_raise.__doc__ == REQUEST_DOC


# ═════════════════════════════════════════════════════════════════════════════
# Executor resolution
# ═════════════════════════════════════════════════════════════════════════════


class TestExecutor:
    def test_missing_executor(self) -> None:
        class Orphan(Api):
            pass

        with pytest.raises(ExecutorMissingError, match="Orphan has no executor") as exc_info:
            Orphan.get("/users")
        assert exc_info.value.code is ErrorCode.EXECUTOR_MISSING

    def test_executor_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCASE_EXECUTOR", "httpcase.testing.echo_executor")
        reset_settings()

        class Echo(Api):
            pass

        assert Echo.get("/users") == Ok(Request(url="/users"))

    def test_class_executor_wins_over_settings(self, monkeypatch: pytest.MonkeyPatch, executor: RecordingExecutor) -> None:
        monkeypatch.setenv("HTTPCASE_EXECUTOR", "httpcase.testing.echo_executor")
        reset_settings()

        class Own(Api, executor=executor):
            pass

        Own.get("/users")
        executor.assert_called()

    def test_subclass_inherits_executor(self, users: type[Api], executor: RecordingExecutor) -> None:
        class Admins(users):
            pass

        Admins.get("/admins")
        assert executor.last_call.api is Admins


# ═════════════════════════════════════════════════════════════════════════════
# Generation options
# ═════════════════════════════════════════════════════════════════════════════


class TestGeneration:
    def test_only(self, executor: RecordingExecutor) -> None:
        class Reader(Api, only={"get", "head"}, executor=executor):
            pass

        assert Reader.get("/a").is_ok()
        assert Reader.head_or_raise("/a").method == "head"
        assert not hasattr(Reader, "post")
        assert not hasattr(Reader, "post_or_raise")
        assert hasattr(Reader, "request")

    def test_exclude(self) -> None:
        class NoTrace(Api, exclude={"trace", "options"}):
            pass

        assert not hasattr(NoTrace, "trace")
        assert not hasattr(NoTrace, "options_or_raise")
        assert hasattr(NoTrace, "patch_or_raise")
        assert len(NoTrace.entry_points) == 48

    def test_invalid_only(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown verbs") as exc_info:

            class Broken(Api, only={"fetch"}):
                pass

        assert exc_info.value.code is ErrorCode.INVALID_GENERATION_OPTIONS

    def test_docs_enabled(self, users: type[Api]) -> None:
        assert "Perform a GET request" in users.get.__doc__
        assert "See `request_or_raise` for options definition" in users.get_or_raise.__doc__
        assert "Options:" in users.request.__doc__

    def test_docs_disabled(self, executor: RecordingExecutor) -> None:
        class Quiet(Api, docs=False, executor=executor):
            pass

        assert Quiet.get.__doc__ is None
        assert Quiet.post_or_raise.__doc__ is None
        assert Quiet.request.__doc__ is None
        assert Quiet.get("/users").is_ok()

    def test_signatures_are_recorded(self, users: type[Api]) -> None:
        variants = users.get.variants

        assert [list(inspect.signature(ep.function).parameters) for ep in variants] == [
            ["client", "url", "opts"],
            ["client", "url"],
            ["url", "opts"],
            ["url"],
        ]

    def test_entry_point_names(self, users: type[Api]) -> None:
        assert users.get.__qualname__.endswith("Users.get")
        assert users.request_or_raise.__name__ == "request_or_raise"

    def test_subclass_excludes_more(self, users: type[Api], executor: RecordingExecutor) -> None:
        class Limited(users, exclude={"delete"}):
            pass

        assert not hasattr(Limited, "delete")
        assert not hasattr(Limited, "delete_or_raise")
        assert hasattr(users, "delete")
        assert Limited.get("/x").is_ok()

    def test_subclass_keeps_parent_restriction(self, executor: RecordingExecutor) -> None:
        class Reader(Api, only={"get"}, executor=executor):
            pass

        class Child(Reader):
            pass

        assert Child.generation.only == frozenset({"get"})
        assert not hasattr(Child, "post")


class TestSettings:
    def test_docs_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCASE_BUILDER_DOCS", "false")
        reset_settings()

        class Quiet(Api):
            pass

        assert Quiet.get.__doc__ is None

    def test_explicit_docs_win_over_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCASE_BUILDER_DOCS", "false")
        reset_settings()

        class Loud(Api, docs=True):
            pass

        assert Loud.get.__doc__ is not None

    def test_verbs_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPCASE_BUILDER_VERBS", "GET, head")
        reset_settings()

        class Reader(Api):
            pass

        assert {v.name for v in Reader.generation.verbs} == {"get", "head"}
        assert not hasattr(Reader, "post")


# ═════════════════════════════════════════════════════════════════════════════
# Decorator form
# ═════════════════════════════════════════════════════════════════════════════


class TestDecorator:
    def test_builds_a_client_class(self, executor: RecordingExecutor) -> None:
        @api(only={"get"}, executor=executor)
        def Example(b: Builder) -> None:
            """Example client."""
            b.plug(Auth)
            b.adapter(Auth, "adapter")

        assert issubclass(Example, Api)
        assert Example.__name__ == "Example"
        assert Example.__doc__ == "Example client."
        assert len(Example.middleware_steps()) == 1
        assert Example.adapter_step().options == "adapter"
        assert Example.get("/users").is_ok()
        assert not hasattr(Example, "post")

    def test_bare_decorator(self) -> None:
        @api
        def Bare(b: Builder) -> None:
            b.plug(Auth)

        assert issubclass(Bare, Api)
        assert len(Bare.entry_points) == 64

    def test_declaration_errors_propagate(self) -> None:
        with pytest.raises(ConfigurationError):

            @api
            def Broken(b: Builder) -> None:
                b.plug("auth")
