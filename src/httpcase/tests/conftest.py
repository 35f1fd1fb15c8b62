"""Shared fixtures: clean settings and captured logs for every test."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from httpcase.foundation.config import reset_settings
from httpcase.observability import CaptureRenderer, configure_logging

_ENV_VARS = (
    "HTTPCASE_DEBUG",
    "HTTPCASE_EXECUTOR",
    "HTTPCASE_BUILDER_DOCS",
    "HTTPCASE_BUILDER_VERBS",
    "HTTPCASE_LOG_LEVEL",
    "HTTPCASE_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from HTTPCASE_* variables of the surrounding environment."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def logs(clean_settings: None) -> CaptureRenderer:
    renderer = CaptureRenderer()
    configure_logging(level="DEBUG", renderer=renderer)
    return renderer
