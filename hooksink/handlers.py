"""Handler capabilities recognised by the webhook receiver.

A handler is any object exposing an entry point for one kind of hosting
service event.  The sink resolves a handler to a :data:`Capability` once,
when the handler is registered, and never inspects it again at request
time.  Push events are the only kind currently recognised.

Adding an event kind means adding a member to :class:`HandlerKind`, a
protocol and a frozen capability variant, extending :data:`Capability`,
and teaching :func:`resolve_capability` and the dispatcher about it.
Existing push registrations are unaffected.

Usage
-----
>>> class Recorder:
...     def push(self, message, params):
...         print(message.after)
>>> resolve_capability(Recorder()).kind
<HandlerKind.PUSH: 'push'>

"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from hooksink.errors import HandlerRegistrationError
from hooksink.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from hooksink.messages import PushMessage

__all__ = [
    "Capability",
    "HandlerKind",
    "LoggingPushHandler",
    "PushConsumer",
    "PushHandler",
    "QueryParams",
    "resolve_capability",
]

logger = get_logger(__name__)

QueryParams = dict[str, list[str]]


class HandlerKind(enum.StrEnum):
    """Event kinds a handler can consume."""

    PUSH = "push"


@typ.runtime_checkable
class PushHandler(typ.Protocol):
    """Protocol for objects that consume push events.

    ``push`` may be a plain method or a coroutine method; its return value
    is ignored.  It receives the decoded message and the request's query
    parameters, each name mapped to its values in the order they appeared.
    """

    def push(
        self, message: PushMessage, params: QueryParams
    ) -> typ.Awaitable[None] | None: ...


@dc.dataclass(frozen=True, slots=True)
class PushConsumer:
    """Capability for handlers registered to receive push events."""

    handler: PushHandler
    kind: typ.Literal[HandlerKind.PUSH] = HandlerKind.PUSH


Capability = PushConsumer


def resolve_capability(handler: object) -> Capability:
    """Return the capability *handler* provides.

    Raises
    ------
    HandlerRegistrationError
        If *handler* implements none of the recognised protocols.

    """
    if (
        not isinstance(handler, type)
        and isinstance(handler, PushHandler)
        and callable(handler.push)
    ):
        return PushConsumer(handler)
    raise HandlerRegistrationError.unrecognised(handler)


class LoggingPushHandler:
    """Push handler that logs every message it receives."""

    def push(self, message: PushMessage, params: QueryParams) -> None:
        """Log *message* and *params* at INFO."""
        log_info(logger, "PUSH: %r params=%r", message, params)
