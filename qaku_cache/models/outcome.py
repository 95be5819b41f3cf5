"""Pipeline outcome models."""

from dataclasses import dataclass
from enum import Enum


class PipelineStage(str, Enum):
    """States of one pipeline execution."""

    RECEIVED = "received"
    DECODED = "decoded"
    MANIFEST_RESOLVED = "manifest_resolved"
    POLICY_EVALUATED = "policy_evaluated"
    REPLICATION_TRIGGERED = "replication_triggered"
    RECORDED = "recorded"


@dataclass(frozen=True)
class Succeeded:
    """Replication was accepted by the storage network."""

    content_id: str


@dataclass(frozen=True)
class Rejected:
    """The size policy denied replication."""

    content_id: str
    reason: str
    size_bytes: int
    max_size_bytes: int


@dataclass(frozen=True)
class Failed:
    """The announcement could not be processed."""

    cause: str
    stage: PipelineStage
    content_id: str | None = None


Outcome = Succeeded | Rejected | Failed
