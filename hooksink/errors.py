"""Exceptions raised by the webhook receiver and their Falcon handlers.

Request-time failures (authentication, body reading, decoding) are raised
as domain exceptions and translated into HTTP responses by the handlers
registered in :func:`register_error_handlers`.  Registration-time
failures are raised straight to the caller of :meth:`HookSink.add`, which
decides whether to abort the process.
"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "AuthenticationError",
    "BodyReadError",
    "DuplicateRouteError",
    "HandlerRegistrationError",
    "HookSinkConfigError",
    "HookSinkError",
    "PayloadDecodeError",
    "register_error_handlers",
]

_REPR_LIMIT = 80


class HookSinkError(Exception):
    """Base class for all webhook receiver errors."""


class AuthenticationError(HookSinkError):
    """Raised when a request fails the signature check or the auth predicate."""

    @classmethod
    def missing_signature(cls, header: str) -> AuthenticationError:
        """Return an error for a request without a signature header."""
        return cls(f"request carries no {header} header")

    @classmethod
    def invalid_signature(cls) -> AuthenticationError:
        """Return an error for a signature that does not match the payload."""
        return cls("payload signature does not match")

    @classmethod
    def predicate_rejected(cls) -> AuthenticationError:
        """Return an error for a request refused by the auth predicate."""
        return cls("request rejected by authentication predicate")


class BodyReadError(HookSinkError):
    """Raised when the request body cannot be read from the transport."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> BodyReadError:
        """Wrap a transport exception."""
        return cls(f"error reading request body: {exc}")


class PayloadDecodeError(HookSinkError):
    """Raised when a payload is not valid JSON or does not fit the message shape."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> PayloadDecodeError:
        """Wrap a msgspec decode or validation error."""
        return cls(f"error reading JSON data: {exc}")


class HandlerRegistrationError(HookSinkError):
    """Raised when a handler cannot be bound to a path.

    The sink never starts serving a path whose registration failed; hosts
    are expected to treat this error as fatal during startup.
    """

    @classmethod
    def unrecognised(cls, handler: object) -> HandlerRegistrationError:
        """Return an error for a handler matching no known capability."""
        preview = repr(handler)
        if len(preview) > _REPR_LIMIT:
            preview = preview[:_REPR_LIMIT] + "..."
        return cls(f"handler didn't match any known handler interface: {preview}")


class DuplicateRouteError(HandlerRegistrationError):
    """Raised when a path already has a handler bound to it."""

    def __init__(self, path: str) -> None:
        """Record the colliding *path*."""
        self.path = path
        super().__init__(f"a handler is already registered at {path!r}")


class HookSinkConfigError(HookSinkError):
    """Raised when environment configuration is invalid."""

    @classmethod
    def invalid_port(cls, raw: str) -> HookSinkConfigError:
        """Return an error for a port outside 1-65535 or not an integer."""
        return cls(f"HOOKSINK_PORT must be an integer in 1-65535, got: {raw!r}")

    @classmethod
    def invalid_path(cls, raw: str) -> HookSinkConfigError:
        """Return an error for a route path without a leading slash."""
        return cls(f"HOOKSINK_PATH must start with '/', got: {raw!r}")

    @classmethod
    def invalid_handler(cls, spec: str, reason: str) -> HookSinkConfigError:
        """Return an error for a handler import path that cannot be loaded."""
        return cls(f"HOOKSINK_HANDLER {spec!r} could not be loaded: {reason}")


async def _handle_authentication_error(
    _req: Request,
    resp: Response,
    ex: AuthenticationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthenticationError`` to HTTP 401."""
    resp.status = falcon.HTTP_401
    resp.media = {"title": "Unauthorized", "description": str(ex)}


async def _handle_server_side_error(
    _req: Request,
    resp: Response,
    ex: BodyReadError | PayloadDecodeError,
    _params: dict[str, typ.Any],
) -> None:
    """Map body-read and decode failures to HTTP 500."""
    resp.status = falcon.HTTP_500
    resp.media = {"title": "Unreadable payload", "description": str(ex)}


def register_error_handlers(app: App) -> None:
    """Install the request-time error handlers on *app*."""
    app.add_error_handler(AuthenticationError, _handle_authentication_error)
    app.add_error_handler(BodyReadError, _handle_server_side_error)
    app.add_error_handler(PayloadDecodeError, _handle_server_side_error)
