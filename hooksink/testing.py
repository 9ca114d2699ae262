"""Helpers for posting payloads to a sink in tests.

Requests go straight into the sink's ASGI app through ``falcon.testing``;
no socket is bound and no server is started.

Usage
-----
::

    sink = HookSink("topsecret")
    sink.add("/hook", recorder)
    status = post_payload(sink, "/hook", payload, secret="topsecret")

"""

from __future__ import annotations

import typing as typ

import falcon.testing

from hooksink.signature import SIGNATURE_HEADER, compute_signature

if typ.TYPE_CHECKING:
    from hooksink.sink import HookSink

__all__ = ["post_payload", "sign_payload"]


def sign_payload(payload: str | bytes, secret: str | bytes) -> dict[str, str]:
    """Return headers carrying the signature of *payload* under *secret*."""
    body = payload.encode("utf-8") if isinstance(payload, str) else payload
    return {SIGNATURE_HEADER: compute_signature(body, secret)}


def post_payload(
    sink: HookSink,
    path: str,
    payload: str | bytes,
    *,
    secret: str | bytes | None = None,
    headers: dict[str, str] | None = None,
    query_string: str | None = None,
) -> int:
    """POST *payload* to *path* on *sink* and return the response status code.

    When *secret* is given the request is signed with it; explicit
    *headers* are applied afterwards and win over the computed signature.

    Only the status is observed.  The handler task may still be pending
    when this returns; use ``falcon.testing.ASGIConductor`` together with
    :meth:`HookSink.wait_for_dispatches` to observe handler calls.
    """
    request_headers: dict[str, str] = {}
    if secret is not None:
        request_headers.update(sign_payload(payload, secret))
    if headers:
        request_headers.update(headers)

    body = payload.encode("utf-8") if isinstance(payload, str) else payload
    result = falcon.testing.TestClient(sink.app).simulate_post(
        path,
        body=body,
        headers=request_headers,
        query_string=query_string,
    )
    return result.status_code
