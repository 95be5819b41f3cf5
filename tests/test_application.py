"""Tests for Application."""

import asyncio
import base64

import httpx
import pytest

from conftest import CODEX_URL, CONTENT_TOPIC, WAKU_URL, persist_payload, sample
from qaku_cache.app import Application
from qaku_cache.config import Settings
from qaku_cache.models import Delivery


def _waku_with(messages: list[bytes]) -> httpx.AsyncClient:
    batches = [
        [
            {"payload": base64.b64encode(m).decode(), "contentTopic": CONTENT_TOPIC}
            for m in messages
        ]
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=batches.pop(0) if batches else [])
        return httpx.Response(200)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _settings(**overrides) -> Settings:
    return Settings(
        codex_api_url=CODEX_URL,
        waku_api_url=WAKU_URL,
        poll_interval=0.01,
        **overrides,
    )


class TestApplicationLifecycle:
    """Tests for Application.start()/stop()."""

    @pytest.mark.asyncio
    async def test_start_initializes_components(self, fake_codex):
        """Test that start wires components in dependency order."""
        app = Application(
            settings=_settings(),
            codex_http=fake_codex.client(),
            waku_http=_waku_with([]),
        )
        await app.start()

        assert app._recorder is not None
        assert app._pipeline._resolver is app.codex
        assert app._pipeline._trigger is app.codex
        assert app._dispatcher._event_bus is app.event_bus
        assert app._source._event_bus is app.event_bus

        await app.stop()

    def test_components_before_start(self):
        """Test that accessing components before start fails."""
        app = Application(settings=_settings())

        with pytest.raises(RuntimeError):
            _ = app.codex
        with pytest.raises(RuntimeError):
            _ = app.dispatcher


class TestApplicationFlow:
    """End-to-end flow from Waku relay to Codex."""

    @pytest.mark.asyncio
    async def test_relay_message_is_replicated(self, fake_codex):
        """Test that an announcement polled from Waku triggers replication."""
        app = Application(
            settings=_settings(),
            codex_http=fake_codex.client(),
            waku_http=_waku_with([persist_payload("zCID1"), b"garbage"]),
        )
        await app.start()

        for _ in range(200):
            if sample(app.registry, "qaku_cache_failures_total") >= 1 and fake_codex.trigger_calls:
                break
            await asyncio.sleep(0.01)
        await app.stop()

        assert fake_codex.trigger_calls == 1
        assert sample(app.registry, "qaku_cache_successes_total") == 1
        assert sample(app.registry, "qaku_cache_failures_total") == 1

    @pytest.mark.asyncio
    async def test_custom_max_size(self, fake_codex):
        """Test that the configured maximum is applied."""
        fake_codex.dataset_size = 2_000_000
        app = Application(
            settings=_settings(max_dataset_size=1_000_000),
            codex_http=fake_codex.client(),
            waku_http=_waku_with([]),
        )
        await app.start()

        await app.event_bus.publish(
            Delivery(content_topic=CONTENT_TOPIC, payload=persist_payload("zBig"))
        )
        await app.stop()

        assert fake_codex.trigger_calls == 0
        assert sample(
            app.registry, "qaku_cache_rejections_total", {"reason": "too_large"}
        ) == 1
