"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from hooksink.sink import HookSink
from tests.helpers import (
    PUSH_PAYLOAD,
    SECRET,
    AsyncRecordingHandler,
    RecordingHandler,
)


@pytest.fixture
def push_payload() -> bytes:
    """Return the canonical push payload as bytes."""
    return PUSH_PAYLOAD.encode("utf-8")


@pytest.fixture
def recorder() -> RecordingHandler:
    """Provide a fresh synchronous recording handler."""
    return RecordingHandler()


@pytest.fixture
def async_recorder() -> AsyncRecordingHandler:
    """Provide a fresh coroutine recording handler."""
    return AsyncRecordingHandler()


@pytest.fixture
def secured_sink(recorder: RecordingHandler) -> HookSink:
    """Build a sink with a secret and the recorder bound at ``/hook``."""
    sink = HookSink(SECRET)
    sink.add("/hook", recorder)
    return sink


@pytest.fixture
def open_sink(recorder: RecordingHandler) -> HookSink:
    """Build a sink without a secret and the recorder bound at ``/hook``."""
    sink = HookSink("")
    sink.add("/hook", recorder)
    return sink
