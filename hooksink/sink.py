"""The webhook sink: route registration on top of a Falcon ASGI app.

A :class:`HookSink` owns one Falcon app, one authenticator chain shared by
all of its routes, and one dispatcher for detached handler tasks.  Hosts
build the sink, register handlers, then serve :attr:`HookSink.app` with
any ASGI server, or drive it in-process with ``falcon.testing``.

Usage
-----
::

    sink = HookSink("ssshhhh!")
    sink.add("/build", LoggingPushHandler())
    client = falcon.testing.TestClient(sink.app)

Always configure a non-empty secret matching the one set on the sending
side.  With an empty secret no signature checking is performed at all,
which is only appropriate for local testing.
"""

from __future__ import annotations

import types
import typing as typ

import falcon.asgi

from hooksink.auth import AuthenticatorChain, WebhookAuthMiddleware
from hooksink.dispatch import Dispatcher
from hooksink.errors import DuplicateRouteError, register_error_handlers
from hooksink.handlers import HandlerKind, resolve_capability
from hooksink.logging import get_logger, log_info
from hooksink.resources import PushResource

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hooksink.auth import AuthPredicate
    from hooksink.handlers import Capability

__all__ = ["HookSink"]

logger = get_logger(__name__)


class HookSink:
    """Webhook endpoint server for push notifications.

    Parameters
    ----------
    secret
        Shared secret used to verify ``X-Hub-Signature``.  Fixed for the
        lifetime of the sink; empty disables verification.

    """

    def __init__(self, secret: str | bytes = "") -> None:
        """Build the Falcon app and its authentication middleware."""
        self._chain = AuthenticatorChain(secret)
        self._dispatcher = Dispatcher()
        self._routes: dict[str, Capability] = {}
        middleware: list[object] = [WebhookAuthMiddleware(self._chain)]
        self._app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs
        register_error_handlers(self._app)

    @property
    def app(self) -> falcon.asgi.App:
        """Return the ASGI application serving the registered routes."""
        return self._app

    @property
    def routes(self) -> cabc.Mapping[str, Capability]:
        """Return a read-only view of path -> capability bindings."""
        return types.MappingProxyType(self._routes)

    @property
    def pending_dispatches(self) -> int:
        """Return the number of handler tasks still running."""
        return self._dispatcher.pending

    def authenticate(self, predicate: AuthPredicate | None) -> None:
        """Register the request predicate run after the signature check.

        The predicate sees the whole request, so it can check anything the
        signature does not cover, for example an API key in the query
        string.  There is at most one predicate per sink; registering
        another replaces it, and ``None`` removes it.  Register it before
        serving starts.

        TLS is not terminated here, so secrets carried in the URL travel in
        clear text unless a proxy in front of the sink provides TLS.
        """
        self._chain.predicate = predicate

    def add(self, path: str, handler: object) -> Capability:
        """Bind *handler* to POST requests on *path*.

        Parameters
        ----------
        path
            Route path, for example ``/build``.
        handler
            Object implementing a recognised handler protocol; currently
            that means :class:`hooksink.handlers.PushHandler`.

        Returns
        -------
        Capability
            The capability the handler was registered under.

        Raises
        ------
        HandlerRegistrationError
            If *handler* implements no recognised protocol.
        DuplicateRouteError
            If *path* already has a handler.

        """
        capability = resolve_capability(handler)
        if path in self._routes:
            raise DuplicateRouteError(path)

        match capability.kind:
            case HandlerKind.PUSH:
                resource = PushResource(capability, self._dispatcher)
        self._app.add_route(path, resource)
        self._routes[path] = capability
        log_info(logger, "Registered %s handler at %s", capability.kind, path)
        return capability

    async def wait_for_dispatches(self) -> None:
        """Wait for every handler task started so far to finish.

        Handler results and exceptions are not collected.
        """
        await self._dispatcher.wait()
