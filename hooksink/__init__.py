"""hooksink: signed push-event webhook endpoints on Falcon.

The package turns push notifications from a source-control hosting
service into calls on Python handler objects.  Each delivery is checked
against a shared-secret HMAC signature (and an optional request
predicate), decoded into a typed :class:`PushMessage`, and handed to the
handler registered for its path on a detached task, while the sender gets
its HTTP status straight away.

Usage
-----
::

    from hooksink import HookSink, LoggingPushHandler

    sink = HookSink("ssshhhh!")
    sink.add("/build", LoggingPushHandler())
    app = sink.app  # serve with any ASGI server

Public API
----------
HookSink
    Route registrar and ASGI application owner.
PushHandler
    Protocol push handlers implement.
PushMessage
    Decoded push payload.
"""

from __future__ import annotations

from hooksink.errors import (
    AuthenticationError,
    BodyReadError,
    DuplicateRouteError,
    HandlerRegistrationError,
    HookSinkConfigError,
    HookSinkError,
    PayloadDecodeError,
)
from hooksink.handlers import (
    Capability,
    HandlerKind,
    LoggingPushHandler,
    PushConsumer,
    PushHandler,
    resolve_capability,
)
from hooksink.messages import (
    HeadCommit,
    Owner,
    PushData,
    PushMessage,
    Repository,
    decode_push_message,
)
from hooksink.signature import SIGNATURE_HEADER, compute_signature, verify_signature
from hooksink.sink import HookSink

__all__ = [
    "SIGNATURE_HEADER",
    "AuthenticationError",
    "BodyReadError",
    "Capability",
    "DuplicateRouteError",
    "HandlerKind",
    "HandlerRegistrationError",
    "HeadCommit",
    "HookSink",
    "HookSinkConfigError",
    "HookSinkError",
    "LoggingPushHandler",
    "Owner",
    "PayloadDecodeError",
    "PushConsumer",
    "PushData",
    "PushHandler",
    "PushMessage",
    "Repository",
    "compute_signature",
    "decode_push_message",
    "resolve_capability",
    "verify_signature",
]
