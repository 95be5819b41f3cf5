"""Announcement codec: raw bus payload to ReplicationRequest."""

import json
import re
from typing import Any, Callable

from ..errors import DecodeError
from ..models import Announcement, AnnouncementKind, ReplicationRequest


PayloadDecoder = Callable[[Any], ReplicationRequest]

# Multibase CID alphabets (base58btc, base32, base36, base64url).
_CONTENT_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


def is_content_id(value: object) -> bool:
    """True if value can be used as a single Codex path segment."""
    return isinstance(value, str) and _CONTENT_ID_RE.fullmatch(value) is not None


def _decode_persist(payload: Any) -> ReplicationRequest:
    """Decode the payload of a persist announcement."""
    if not isinstance(payload, dict):
        raise DecodeError("persist payload must be an object")

    content_id = payload.get("cid")
    if not isinstance(content_id, str) or not content_id:
        raise DecodeError("persist payload has no cid")
    if not is_content_id(content_id):
        raise DecodeError(f"invalid cid: {content_id!r}")

    return ReplicationRequest(
        content_id=content_id,
        owner=_optional_str(payload, "owner"),
        integrity_hash=_optional_str(payload, "hash"),
    )


# Every AnnouncementKind must have an entry here.
_PAYLOAD_DECODERS: dict[AnnouncementKind, PayloadDecoder] = {
    AnnouncementKind.PERSIST: _decode_persist,
}


def decode_announcement(data: bytes) -> Announcement:
    """
    Decode a full announcement envelope.

    Args:
        data: Raw message payload as delivered by the bus.

    Returns:
        Parsed Announcement.

    Raises:
        DecodeError: The payload is not JSON, the kind is unknown, or
            required fields are missing.
    """
    try:
        envelope = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"payload is not valid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise DecodeError("announcement must be a JSON object")

    raw_kind = envelope.get("type")
    try:
        kind = AnnouncementKind(raw_kind)
    except ValueError as e:
        raise DecodeError(f"unknown announcement type: {raw_kind!r}") from e

    request = _PAYLOAD_DECODERS[kind](envelope.get("payload"))

    timestamp = envelope.get("timestamp")
    if timestamp is not None and (
        isinstance(timestamp, bool) or not isinstance(timestamp, int)
    ):
        raise DecodeError("timestamp must be an integer")

    return Announcement(
        kind=kind,
        request=request,
        timestamp=timestamp,
        signature=_optional_str(envelope, "signature"),
        signer=_optional_str(envelope, "signer"),
    )


def decode(data: bytes) -> ReplicationRequest:
    """Decode a raw payload into the ReplicationRequest it carries."""
    return decode_announcement(data).request


def _optional_str(source: dict, key: str) -> str:
    value = source.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{key} must be a string")
    return value
