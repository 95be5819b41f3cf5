"""Metrics module."""

from .recorder import SIZE_BUCKETS_KB, IOutcomeRecorder, PrometheusRecorder
from .server import start_metrics_server

__all__ = [
    "IOutcomeRecorder",
    "PrometheusRecorder",
    "SIZE_BUCKETS_KB",
    "start_metrics_server",
]
