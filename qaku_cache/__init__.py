"""Qaku cache node: replicates announced snapshots into Codex."""

from .app import Application, IApplication
from .config import PolicyConfig, Settings
from .errors import (
    DecodeError,
    QakuCacheError,
    ResolutionError,
    ResolutionErrorKind,
    StorageNetworkError,
    TriggerError,
)
from .event_bus import EventBus, IEventBus
from .metrics import IOutcomeRecorder, PrometheusRecorder
from .models import (
    Announcement,
    AnnouncementKind,
    DatasetManifest,
    Delivery,
    Failed,
    Outcome,
    PipelineStage,
    Rejected,
    ReplicationRequest,
    Succeeded,
)
from .pipeline import Dispatcher, IDispatcher, IReplicationPipeline, ReplicationPipeline
from .storage_network import CodexClient, IManifestResolver, IReplicationTrigger
from .waku import IBusSource, WakuRelaySource

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    "PolicyConfig",
    # Models
    "Announcement",
    "AnnouncementKind",
    "ReplicationRequest",
    "DatasetManifest",
    "Delivery",
    "Outcome",
    "Succeeded",
    "Rejected",
    "Failed",
    "PipelineStage",
    # Errors
    "QakuCacheError",
    "DecodeError",
    "ResolutionError",
    "ResolutionErrorKind",
    "TriggerError",
    "StorageNetworkError",
    # Components
    "IEventBus",
    "EventBus",
    "IManifestResolver",
    "IReplicationTrigger",
    "CodexClient",
    "IOutcomeRecorder",
    "PrometheusRecorder",
    "IReplicationPipeline",
    "ReplicationPipeline",
    "IDispatcher",
    "Dispatcher",
    "IBusSource",
    "WakuRelaySource",
]
