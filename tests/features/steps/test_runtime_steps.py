"""Behavioural coverage for the hooksink runtime service."""

from __future__ import annotations

import typing as typ

import falcon.testing
import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from tests.helpers import PUSH_PAYLOAD

scenarios("../runtime.feature")

_ENV_VARS = (
    "HOOKSINK_SECRET",
    "HOOKSINK_HOST",
    "HOOKSINK_PORT",
    "HOOKSINK_PATH",
    "HOOKSINK_HANDLER",
    "HOOKSINK_LOG_LEVEL",
)


class RuntimeContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    status: int
    exit_code: object


@pytest.fixture
def runtime_context() -> RuntimeContext:
    """Provide shared context for runtime steps."""
    return RuntimeContext()


@given("the hooksink environment is clean")
def given_clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every hooksink variable from the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@given(parsers.parse('{name} is set to "{value}"'))
def given_env_var(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    """Set a hooksink environment variable."""
    monkeypatch.setenv(name, value)


@when(parsers.parse('a push is posted to the runtime at "{path}"'))
def when_post_to_runtime(runtime_context: RuntimeContext, path: str) -> None:
    """Create the runtime app and post the canonical push to it."""
    from hooksink.runtime import create_app

    client = falcon.testing.TestClient(create_app())
    runtime_context["status"] = client.simulate_post(path, body=PUSH_PAYLOAD).status_code


@when("the runtime app is created")
def when_create_app(runtime_context: RuntimeContext) -> None:
    """Create the runtime app, keeping any exit code."""
    from hooksink.runtime import create_app

    try:
        create_app()
    except SystemExit as exc:
        runtime_context["exit_code"] = exc.code


@then(parsers.parse("the runtime response status is {status:d}"))
def then_runtime_status(runtime_context: RuntimeContext, status: int) -> None:
    """Assert the HTTP response status code."""
    assert runtime_context["status"] == status, (
        f"expected status {status}, got {runtime_context['status']}"
    )


@then("the runtime refuses to start")
def then_refuses(runtime_context: RuntimeContext) -> None:
    """Assert the factory exited with status 1."""
    assert runtime_context.get("exit_code") == 1
