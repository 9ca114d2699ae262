"""Detached dispatch of decoded messages to registered handlers.

Each dispatch becomes an independent :class:`asyncio.Task`; the caller
gets the task back but is not expected to await it.  Coroutine handlers
run on the event loop, plain handlers run in a worker thread so they do
not stall other requests.

Handler outcomes are deliberately invisible here: exceptions raised by a
handler stay on its task, and nothing limits how many tasks are in
flight or how long they run.
"""

from __future__ import annotations

import asyncio
import inspect
import typing as typ

from hooksink.handlers import HandlerKind

if typ.TYPE_CHECKING:
    from hooksink.handlers import Capability, QueryParams
    from hooksink.messages import PushMessage

__all__ = ["Dispatcher"]


class Dispatcher:
    """Spawn handler invocations as fire-and-forget tasks.

    The dispatcher holds a strong reference to every running task until
    it finishes, since the event loop itself only keeps weak references.
    """

    def __init__(self) -> None:
        """Start with no tasks in flight."""
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Return the number of handler tasks still running."""
        return len(self._pending)

    def dispatch(
        self,
        capability: Capability,
        message: PushMessage,
        params: QueryParams,
    ) -> asyncio.Task[None]:
        """Start *capability*'s entry point for *message* and return its task.

        Must be called from a running event loop.
        """
        match capability.kind:
            case HandlerKind.PUSH:
                task = asyncio.create_task(
                    _invoke(capability.handler.push, message, params),
                    name=f"hooksink-push-{message.after or 'unknown'}",
                )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait(self) -> None:
        """Wait until every task started so far has finished.

        Results and exceptions are left on the tasks untouched.
        """
        while self._pending:
            await asyncio.wait(set(self._pending))


async def _invoke(
    entry_point: typ.Callable[..., typ.Any],
    message: PushMessage,
    params: QueryParams,
) -> None:
    if inspect.iscoroutinefunction(entry_point):
        await entry_point(message, params)
        return

    result = await asyncio.to_thread(entry_point, message, params)
    if inspect.isawaitable(result):
        await result
