"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from prometheus_client import CollectorRegistry

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

CODEX_URL = "http://codex.test"
WAKU_URL = "http://waku.test"
CONTENT_TOPIC = "/0/qaku/1/persist/json"


def persist_payload(cid: str = "zCID1", **extra) -> bytes:
    """Build a raw persist announcement."""
    envelope = {
        "type": "persist",
        "payload": {"cid": cid, "owner": "alice", "hash": "h1"},
        "timestamp": 1700000000,
    }
    envelope.update(extra)
    return json.dumps(envelope).encode()


class FakeCodex:
    """Scriptable Codex REST API behind an httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.manifest_status = 200
        self.dataset_size = 2_000_000
        self.manifest_body: object | None = None
        self.trigger_status = 200
        self.raise_on: str | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if self.raise_on and self.raise_on in path:
            raise httpx.ConnectError("connection refused", request=request)

        if request.method == "GET" and path.endswith("/network/manifest"):
            if self.manifest_status != 200:
                return httpx.Response(self.manifest_status, text="not found")
            cid = path.split("/")[-3]
            body = self.manifest_body
            if body is None:
                body = {
                    "cid": cid,
                    "manifest": {
                        "datasetSize": self.dataset_size,
                        "blockSize": 65536,
                        "protected": False,
                        "treeCid": "zTree",
                        "uploadedAt": "2024-01-01T00:00:00Z",
                    },
                }
            return httpx.Response(200, json=body)

        if request.method == "POST" and path.endswith("/network"):
            return httpx.Response(self.trigger_status)

        if path.endswith("/debug/info"):
            return httpx.Response(
                200,
                json={"id": "16Uiu2Peer", "announceAddresses": ["/ip4/1.2.3.4/tcp/8070"]},
            )

        if "/data/" in path:
            return httpx.Response(
                200, content=b"snapshot-bytes", headers={"content-type": "application/octet-stream"}
            )

        return httpx.Response(404)

    @property
    def manifest_calls(self) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith("/network/manifest"))

    @property
    def trigger_calls(self) -> int:
        return sum(
            1 for r in self.requests if r.method == "POST" and r.url.path.endswith("/network")
        )

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_codex():
    """Fake Codex node."""
    return FakeCodex()


@pytest_asyncio.fixture
async def codex_client(fake_codex):
    """CodexClient wired to the fake Codex node."""
    from qaku_cache.storage_network import CodexClient

    client = CodexClient(CODEX_URL, client=fake_codex.client())
    yield client
    await client.aclose()


@pytest.fixture
def registry():
    """Isolated metrics registry."""
    return CollectorRegistry()


@pytest.fixture
def recorder(registry):
    """Prometheus outcome recorder on an isolated registry."""
    from qaku_cache.metrics import PrometheusRecorder

    return PrometheusRecorder(registry)


@pytest.fixture
def policy():
    """Default 5 MiB policy."""
    from qaku_cache.config import PolicyConfig

    return PolicyConfig()


@pytest.fixture
def pipeline(codex_client, recorder, policy):
    """ReplicationPipeline against the fake Codex node."""
    from qaku_cache.pipeline import ReplicationPipeline

    return ReplicationPipeline(
        resolver=codex_client,
        trigger=codex_client,
        recorder=recorder,
        policy=policy,
    )


@pytest.fixture
def event_bus():
    """Create EventBus."""
    from qaku_cache.event_bus import EventBus

    return EventBus()


def sample(registry: CollectorRegistry, name: str, labels: dict | None = None) -> float:
    """Read a metric sample, treating missing as zero."""
    return registry.get_sample_value(name, labels or {}) or 0.0
