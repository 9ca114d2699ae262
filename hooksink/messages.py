"""Typed push-event payloads and their JSON decoder.

The structures cover the subset of the hosting service's push payload the
receiver cares about.  Attribute names match the wire names, every field
has a zero-value default, and unknown fields are ignored, so partial
payloads decode cleanly.  A JSON ``null`` counts as a missing field.  Only
malformed JSON or a non-null value of the wrong type is rejected.
"""

from __future__ import annotations

import msgspec

from hooksink.errors import PayloadDecodeError

__all__ = [
    "HeadCommit",
    "Owner",
    "PushData",
    "PushMessage",
    "Repository",
    "decode_push_message",
]


class Owner(msgspec.Struct, kw_only=True, frozen=True):
    """Repository owner contact details."""

    name: str = ""
    email: str = ""


class Repository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository the push was made to.

    Attributes
    ----------
    status : str
        Hosting-side repository status.
    repo_url : str
        Browser URL of the repository.
    owner : Owner
        Owner contact details.
    is_private : bool
        Whether the repository is private.
    name : str
        Short repository name.
    star_count : int
        Number of stars at the time of the push.
    repo_name : str
        Fully qualified ``owner/name`` identifier.
    git_url : str
        Clone URL.

    """

    status: str = ""
    repo_url: str = ""
    owner: Owner = msgspec.field(default_factory=Owner)
    is_private: bool = False
    name: str = ""
    star_count: int = 0
    repo_name: str = ""
    git_url: str = ""


class HeadCommit(msgspec.Struct, kw_only=True, frozen=True):
    """Most recent commit included in the push."""

    id: str = ""


class PushData(msgspec.Struct, kw_only=True, frozen=True):
    """Details of the push itself.

    Attributes
    ----------
    pushed_at : int
        Push time as seconds since the epoch.
    images : tuple[str, ...]
        Image or ref names affected by the push, in payload order.
    pusher : str
        Account that performed the push.

    """

    pushed_at: int = 0
    images: tuple[str, ...] = ()
    pusher: str = ""


class PushMessage(msgspec.Struct, kw_only=True, frozen=True):
    """Decoded push notification handed to push handlers."""

    repository: Repository = msgspec.field(default_factory=Repository)
    head_commit: HeadCommit = msgspec.field(default_factory=HeadCommit)
    push_data: PushData = msgspec.field(default_factory=PushData)
    after: str = ""


def _drop_nulls(value: object) -> object:
    """Return *value* with every ``null`` object member removed.

    A dropped member falls back to its field default, so ``null`` reads
    as "absent" at any depth.  ``null`` array elements are kept.
    """
    if isinstance(value, dict):
        return {
            key: _drop_nulls(item) for key, item in value.items() if item is not None
        }
    if isinstance(value, list):
        return [_drop_nulls(item) for item in value]
    return value


def decode_push_message(raw: bytes) -> PushMessage:
    """Decode *raw* JSON bytes into a :class:`PushMessage`.

    A ``null`` member, or a top-level ``null``, decodes to the field's
    zero value.

    Raises
    ------
    PayloadDecodeError
        If *raw* is not well-formed JSON, is not a JSON object, or holds a
        non-null value whose type does not match the declared field.

    """
    try:
        document = msgspec.json.decode(raw)
        if document is None:
            document = {}
        return msgspec.convert(_drop_nulls(document), PushMessage)
    except msgspec.DecodeError as exc:
        # ValidationError subclasses DecodeError, so type mismatches land here too.
        raise PayloadDecodeError.from_exception(exc) from exc
