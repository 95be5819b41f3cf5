"""Replication pipeline module."""

from .dispatcher import Dispatcher, IDispatcher
from .pipeline import IReplicationPipeline, ReplicationPipeline

__all__ = [
    "Dispatcher",
    "IDispatcher",
    "IReplicationPipeline",
    "ReplicationPipeline",
]
