"""Outcome recorder backed by prometheus_client."""

from typing import Protocol

from prometheus_client import CollectorRegistry, Counter, Histogram

from ..models import DatasetManifest, Failed, Outcome, Rejected, Succeeded

SIZE_BUCKETS_KB = (100.0, 200.0, 500.0, 1000.0, 2000.0, 5000.0, 10000.0, 20000.0)


class IOutcomeRecorder(Protocol):
    """Accounting of pipeline outcomes."""

    def record(self, outcome: Outcome, manifest: DatasetManifest | None = None) -> None:
        """Record one terminal outcome."""
        ...


class PrometheusRecorder:
    """Counts outcomes and observes replicated dataset sizes.

    Rejected announcements move the failure counter like any other
    non-success, and additionally ``qaku_cache_rejections{reason}``.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self._registry = registry or CollectorRegistry()
        self._successes = Counter(
            "qaku_cache_successes",
            "The total number successfully cached snapshots",
            registry=self._registry,
        )
        self._failures = Counter(
            "qaku_cache_failures",
            "The total number of failed attempts to cache a snapshot",
            registry=self._registry,
        )
        self._rejections = Counter(
            "qaku_cache_rejections",
            "Snapshots skipped by the replication policy",
            ["reason"],
            registry=self._registry,
        )
        self._sizes = Histogram(
            "qaku_cache_sizes",
            "Histogram of sizes of cached snapshots in kB",
            buckets=SIZE_BUCKETS_KB,
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record(self, outcome: Outcome, manifest: DatasetManifest | None = None) -> None:
        """Record one terminal outcome."""
        if isinstance(outcome, Succeeded):
            self._successes.inc()
            if manifest is not None:
                self._sizes.observe(manifest.dataset_size_kb)
        elif isinstance(outcome, Rejected):
            self._failures.inc()
            self._rejections.labels(reason=outcome.reason).inc()
        elif isinstance(outcome, Failed):
            self._failures.inc()
        else:
            raise TypeError(f"unknown outcome: {outcome!r}")
