"""Test doubles and payloads shared across the suite."""

from __future__ import annotations

import asyncio
import threading
import typing as typ

if typ.TYPE_CHECKING:
    from hooksink.handlers import QueryParams
    from hooksink.messages import PushMessage

SECRET = "topsecret"

# Minimal push notification exercising every nested object.
PUSH_PAYLOAD = (
    '{"repository":{"repo_url":"https://x","name":"r","star_count":3},'
    '"head_commit":{"id":"abc123"},'
    '"push_data":{"pushed_at":1000,"images":["a","b"],"pusher":"bob"},'
    '"after":"deadbeef"}'
)


class RecordingHandler:
    """Synchronous push handler that records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[PushMessage, QueryParams]] = []
        self._lock = threading.Lock()

    def push(self, message: PushMessage, params: QueryParams) -> None:
        """Record *message* and *params*."""
        with self._lock:
            self.calls.append((message, params))


class AsyncRecordingHandler:
    """Coroutine push handler that records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[PushMessage, QueryParams]] = []

    async def push(self, message: PushMessage, params: QueryParams) -> None:
        """Record *message* and *params* after yielding to the loop."""
        await asyncio.sleep(0)
        self.calls.append((message, params))


class FailingHandler:
    """Push handler that always raises."""

    def __init__(self) -> None:
        self.attempts = 0

    async def push(self, message: PushMessage, params: QueryParams) -> None:
        """Count the attempt, then fail."""
        self.attempts += 1
        msg = f"cannot build {message.after}"
        raise RuntimeError(msg)


class NotAHandler:
    """Object implementing no handler protocol."""

    def pull(self, message: object) -> None:
        """Look like a handler without being one."""
