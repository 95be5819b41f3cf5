"""Waku relay source polling a node's REST API for announcements."""

import asyncio
import base64
import binascii
from typing import Protocol
from urllib.parse import quote

import httpx

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import Delivery

logger = get_logger(__name__)


class IBusSource(Protocol):
    """Feeds bus deliveries into the EventBus."""

    async def start(self) -> None:
        """Subscribe and start the receive loop."""
        ...

    async def stop(self) -> None:
        """Stop the receive loop."""
        ...


class WakuRelaySource:
    """Consumes a content topic through the nwaku REST relay (autosharding) API."""

    def __init__(
        self,
        api_url: str,
        content_topic: str,
        event_bus: IEventBus,
        poll_interval: float = 1.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_url = api_url.rstrip("/")
        self._content_topic = content_topic
        self._event_bus = event_bus
        self._poll_interval = poll_interval
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Subscribe to the content topic and start polling."""
        if self._running:
            return

        self._running = True
        await self.subscribe()
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("Starting main loop for %s", self._content_topic)

    async def stop(self) -> None:
        """Stop polling and close the HTTP client."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        await self._client.aclose()

    async def subscribe(self) -> bool:
        """Register the content topic with the Waku node."""
        try:
            response = await self._client.post(
                f"{self._api_url}/relay/v1/auto/subscriptions",
                json=[self._content_topic],
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to subscribe to %s: %s", self._content_topic, e)
            return False

        logger.info("Subscribed to %s", self._content_topic)
        return True

    async def poll_once(self) -> int:
        """Fetch pending messages and publish them. Returns the number published."""
        topic = quote(self._content_topic, safe="")
        response = await self._client.get(
            f"{self._api_url}/relay/v1/auto/messages/{topic}"
        )
        response.raise_for_status()

        messages = response.json()
        if not isinstance(messages, list):
            logger.warning("Unexpected relay response: %r", messages)
            return 0

        published = 0
        for message in messages:
            delivery = self._to_delivery(message)
            if delivery is None:
                continue
            await self._event_bus.publish(delivery)
            published += 1
        return published

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except (httpx.HTTPError, ValueError) as e:
                logger.error("Failed to poll relay messages: %s", e)
            await asyncio.sleep(self._poll_interval)

    def _to_delivery(self, message: object) -> Delivery | None:
        if not isinstance(message, dict):
            logger.warning("Skipping relay message that is not an object")
            return None

        try:
            payload = base64.b64decode(message.get("payload") or "", validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            logger.warning("Skipping relay message with bad payload: %s", e)
            return None

        timestamp = message.get("timestamp")
        return Delivery(
            content_topic=message.get("contentTopic") or self._content_topic,
            payload=payload,
            timestamp=timestamp if isinstance(timestamp, int) else None,
        )
