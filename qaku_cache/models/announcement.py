"""Announcement-related data models."""

from dataclasses import dataclass
from enum import Enum


class AnnouncementKind(str, Enum):
    """Kinds of announcements published on the content topic."""

    PERSIST = "persist"


@dataclass(frozen=True)
class ReplicationRequest:
    """Payload of a persist announcement."""

    content_id: str
    owner: str = ""
    integrity_hash: str = ""


@dataclass(frozen=True)
class Announcement:
    """Envelope delivered by the bus."""

    kind: AnnouncementKind
    request: ReplicationRequest
    timestamp: int | None = None
    signature: str = ""  # captured, not verified
    signer: str = ""


@dataclass(frozen=True)
class Delivery:
    """A raw message as handed over by the bus."""

    content_topic: str
    payload: bytes
    timestamp: int | None = None
