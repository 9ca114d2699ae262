"""Unit tests for hooksink.handlers capability resolution."""

from __future__ import annotations

import pytest

from hooksink.errors import HandlerRegistrationError
from hooksink.handlers import (
    HandlerKind,
    LoggingPushHandler,
    PushConsumer,
    PushHandler,
    resolve_capability,
)
from hooksink.messages import PushMessage
from tests.helpers import AsyncRecordingHandler, NotAHandler, RecordingHandler


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message))
        return message


class TestResolveCapability:
    """Tests for resolve_capability."""

    @pytest.mark.parametrize(
        "handler_type",
        [RecordingHandler, AsyncRecordingHandler, LoggingPushHandler],
    )
    def test_push_handlers_resolve_to_push_consumer(
        self, handler_type: type[object]
    ) -> None:
        """Sync and async push handlers become PushConsumer capabilities."""
        handler = handler_type()
        capability = resolve_capability(handler)
        assert isinstance(capability, PushConsumer)
        assert capability.kind is HandlerKind.PUSH
        assert capability.handler is handler

    def test_unrecognised_handler_raises(self) -> None:
        """An object with no known entry point is rejected."""
        with pytest.raises(HandlerRegistrationError, match="NotAHandler"):
            resolve_capability(NotAHandler())

    def test_non_callable_push_attribute_is_rejected(self) -> None:
        """A push attribute that cannot be called does not count."""

        class _Impostor:
            push = "not a method"

        with pytest.raises(HandlerRegistrationError):
            resolve_capability(_Impostor())

    @pytest.mark.parametrize("handler", [None, 42, "push", object()])
    def test_plain_values_are_rejected(self, handler: object) -> None:
        """Values that are not handler objects are rejected."""
        with pytest.raises(HandlerRegistrationError):
            resolve_capability(handler)

    def test_error_message_preview_is_truncated(self) -> None:
        """Very long handler reprs are shortened in the error message."""
        with pytest.raises(HandlerRegistrationError) as excinfo:
            resolve_capability("x" * 500)
        assert str(excinfo.value).endswith("...")


def test_recording_handler_satisfies_protocol() -> None:
    """The protocol is runtime checkable."""
    assert isinstance(RecordingHandler(), PushHandler)
    assert not isinstance(NotAHandler(), PushHandler)


def test_capability_is_immutable() -> None:
    """Capabilities cannot be rebound to another handler."""
    capability = resolve_capability(RecordingHandler())
    with pytest.raises(AttributeError):
        capability.handler = RecordingHandler()  # type: ignore[misc]


def test_logging_handler_logs_message(monkeypatch: pytest.MonkeyPatch) -> None:
    """LoggingPushHandler logs every push at INFO."""
    fake = _FakeLogger()
    monkeypatch.setattr("hooksink.handlers.logger", fake)

    LoggingPushHandler().push(PushMessage(after="deadbeef"), {"k": ["v"]})

    assert len(fake.calls) == 1, "expected exactly one log call"
    level, message = fake.calls[0]
    assert level == "INFO"
    assert message.startswith("PUSH: ")
    assert "deadbeef" in message
    assert "{'k': ['v']}" in message


def test_handler_class_is_not_a_handler() -> None:
    """Registering the class instead of an instance is rejected."""
    with pytest.raises(HandlerRegistrationError):
        resolve_capability(RecordingHandler)
