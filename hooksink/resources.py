"""Falcon resources bound to webhook paths.

By the time a responder here runs, :class:`hooksink.auth.WebhookAuthMiddleware`
has read the body and authenticated the request, leaving the raw bytes on
``req.context.payload``.

Usage
-----
Bind a push handler to a path::

    capability = resolve_capability(handler)
    app.add_route("/build", PushResource(capability, dispatcher))

"""

from __future__ import annotations

import typing as typ

import falcon
from falcon.uri import parse_query_string

from hooksink.errors import PayloadDecodeError
from hooksink.logging import get_logger, log_debug, log_warning
from hooksink.messages import decode_push_message

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hooksink.dispatch import Dispatcher
    from hooksink.handlers import PushConsumer, QueryParams

__all__ = ["PushResource", "WebhookResource", "query_params"]

logger = get_logger(__name__)


def query_params(req: Request) -> QueryParams:
    """Return the request's query parameters as name -> ordered values.

    Values are taken verbatim from the query string, including blank ones,
    and each call returns a fresh mapping.
    """
    params: QueryParams = {}
    for name, value in parse_query_string(
        req.query_string, keep_blank=True, csv=False
    ).items():
        params[name] = list(value) if isinstance(value, list) else [value]
    return params


class WebhookResource:
    """Base class for resources whose POST bodies are authenticated."""


class PushResource(WebhookResource):
    """Resource accepting push deliveries for one registered handler.

    ``POST`` decodes the authenticated body and starts the handler as a
    detached task, answering ``200 OK`` as soon as the task exists.
    """

    def __init__(self, capability: PushConsumer, dispatcher: Dispatcher) -> None:
        """Bind the resource to *capability*, dispatching through *dispatcher*."""
        self._capability = capability
        self._dispatcher = dispatcher

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle a push delivery.

        Raises
        ------
        PayloadDecodeError
            If the body is not a well-formed push payload.

        """
        try:
            message = decode_push_message(req.context.payload)
        except PayloadDecodeError as exc:
            log_warning(logger, "Rejected payload for %s: %s", req.path, exc)
            raise

        self._dispatcher.dispatch(self._capability, message, query_params(req))
        log_debug(logger, "Dispatched push %s for %s", message.after, req.path)
        resp.status = falcon.HTTP_200
