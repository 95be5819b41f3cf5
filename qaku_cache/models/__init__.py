"""Core data models for the Qaku cache node."""

from .announcement import Announcement, AnnouncementKind, Delivery, ReplicationRequest
from .manifest import DatasetManifest
from .outcome import Failed, Outcome, PipelineStage, Rejected, Succeeded

__all__ = [
    # Announcements
    "Announcement",
    "AnnouncementKind",
    "Delivery",
    "ReplicationRequest",
    # Storage network
    "DatasetManifest",
    # Outcomes
    "Failed",
    "Outcome",
    "PipelineStage",
    "Rejected",
    "Succeeded",
]
