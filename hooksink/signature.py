"""HMAC-SHA1 signatures for webhook payloads.

The sender signs the raw request body with the shared secret and places
the digest in the ``X-Hub-Signature`` header as ``sha1=<hex>``.

Usage
-----
>>> sig = compute_signature(b'{"after": "deadbeef"}', "topsecret")
>>> verify_signature(b'{"after": "deadbeef"}', "topsecret", sig)
True

"""

from __future__ import annotations

import hashlib
import hmac

__all__ = ["SIGNATURE_HEADER", "SIGNATURE_PREFIX", "compute_signature", "verify_signature"]

SIGNATURE_HEADER = "X-Hub-Signature"
SIGNATURE_PREFIX = "sha1="


def _as_bytes(secret: str | bytes) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else secret


def compute_signature(payload: bytes, secret: str | bytes) -> str:
    """Return the ``sha1=<hex>`` signature of *payload* under *secret*."""
    digest = hmac.new(_as_bytes(secret), payload, hashlib.sha1).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(
    payload: bytes,
    secret: str | bytes,
    provided: str | None,
) -> bool:
    """Check *provided* against the signature computed for *payload*.

    Parameters
    ----------
    payload
        Raw request body exactly as received.
    secret
        Shared secret configured on both ends.
    provided
        Value of the signature header, or ``None`` when absent.

    Returns
    -------
    bool
        ``False`` for an empty or missing signature, otherwise the result
        of a constant-time comparison with the expected signature.

    """
    if not provided:
        return False

    expected = compute_signature(payload, secret)
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("ascii"))
