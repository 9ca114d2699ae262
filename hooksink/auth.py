"""Request authentication for webhook routes.

Two checks guard every webhook route, in this order:

1. the shared-secret signature over the raw body, skipped entirely when
   the sink was built with an empty secret;
2. an optional predicate over the whole request (headers, path, query),
   for deployments that add API keys or similar to the hook URL.

:class:`WebhookAuthMiddleware` runs the chain from Falcon's
``process_resource`` hook, so it applies uniformly to every path bound to
a webhook resource and always before the resource decodes anything.

Usage
-----
Install the middleware when creating the Falcon app::

    chain = AuthenticatorChain("topsecret")
    app = falcon.asgi.App(middleware=[WebhookAuthMiddleware(chain)])

"""

from __future__ import annotations

import typing as typ

from hooksink.errors import AuthenticationError, BodyReadError
from hooksink.logging import get_logger, log_warning
from hooksink.resources import WebhookResource
from hooksink.signature import SIGNATURE_HEADER, verify_signature

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["AuthPredicate", "AuthenticatorChain", "WebhookAuthMiddleware"]

logger = get_logger(__name__)

AuthPredicate = typ.Callable[["Request"], bool]


class AuthenticatorChain:
    """Signature check followed by the optional request predicate.

    Parameters
    ----------
    secret
        Shared secret for signature verification.  An empty secret
        disables the signature check; use it for local testing only.
    predicate
        Optional callable receiving the request and returning whether it
        may proceed.  If it keeps internal state it must synchronise that
        state itself, as requests are authenticated concurrently.

    """

    def __init__(
        self,
        secret: str | bytes,
        predicate: AuthPredicate | None = None,
    ) -> None:
        """Store the secret and predicate."""
        self._secret = secret
        self.predicate = predicate

    @property
    def verifies_signatures(self) -> bool:
        """Return whether a secret is configured."""
        return bool(self._secret)

    def authenticate(self, req: Request, payload: bytes) -> None:
        """Authenticate *req* whose body is *payload*.

        Raises
        ------
        AuthenticationError
            If the signature is missing or wrong, or the predicate rejects
            the request.

        """
        if self.verifies_signatures:
            provided = req.get_header(SIGNATURE_HEADER)
            if not provided:
                log_warning(logger, "No signature on webhook for %s", req.path)
                raise AuthenticationError.missing_signature(SIGNATURE_HEADER)
            if not verify_signature(payload, self._secret, provided):
                log_warning(logger, "Signature was not valid for %s", req.path)
                raise AuthenticationError.invalid_signature()

        if self.predicate is not None and not self.predicate(req):
            log_warning(logger, "Predicate rejected webhook for %s", req.path)
            raise AuthenticationError.predicate_rejected()


class WebhookAuthMiddleware:
    """Falcon middleware that reads and authenticates webhook bodies.

    For ``POST`` requests routed to a webhook resource the full body is
    read into memory, authenticated, and left on ``req.context.payload``
    for the resource.  Other requests pass through untouched.

    Parameters
    ----------
    chain
        Authenticator chain shared by every webhook route.

    """

    def __init__(self, chain: AuthenticatorChain) -> None:
        """Bind the middleware to *chain*."""
        self._chain = chain

    async def process_resource(
        self,
        req: Request,
        _resp: Response,
        resource: object,
        _params: dict[str, typ.Any],
    ) -> None:
        """Authenticate webhook deliveries before the responder runs.

        Raises
        ------
        BodyReadError
            If the body cannot be read from the transport.
        AuthenticationError
            If the chain rejects the request.

        """
        if req.method != "POST" or not isinstance(resource, WebhookResource):
            return

        try:
            payload = await req.stream.read()
        except OSError as exc:
            log_warning(logger, "Error reading request body: %s", exc)
            raise BodyReadError.from_exception(exc) from exc

        self._chain.authenticate(req, payload)
        req.context.payload = payload
