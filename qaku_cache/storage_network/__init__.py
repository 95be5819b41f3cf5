"""Codex storage network module."""

from .client import (
    CodexClient,
    DataResponse,
    IManifestResolver,
    IReplicationTrigger,
    NodeInfo,
)

__all__ = [
    "CodexClient",
    "DataResponse",
    "IManifestResolver",
    "IReplicationTrigger",
    "NodeInfo",
]
