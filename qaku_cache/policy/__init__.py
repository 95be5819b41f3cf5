"""Replication policy module."""

from ..config import PolicyConfig
from .size_policy import TOO_LARGE, Decision, Deny, Permit, evaluate

__all__ = ["Decision", "Deny", "Permit", "PolicyConfig", "TOO_LARGE", "evaluate"]
