"""EventBus implementation for pub/sub of bus deliveries."""

import asyncio
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import Delivery

logger = get_logger(__name__)


DeliveryHandler = Callable[[Delivery], Awaitable[None]]


class IEventBus(Protocol):
    """In-process pub/sub keyed by content topic."""

    def subscribe(self, content_topic: str, handler: DeliveryHandler) -> None:
        """Subscribe a handler to a content topic."""
        ...

    def unsubscribe(self, content_topic: str, handler: DeliveryHandler) -> None:
        """Remove a handler from a content topic."""
        ...

    async def publish(self, delivery: Delivery) -> None:
        """Publish a Delivery to the handlers of its content topic."""
        ...


class EventBus:
    """In-memory pub/sub event bus."""

    def __init__(self):
        self._subscribers: dict[str, list[DeliveryHandler]] = {}

    def subscribe(self, content_topic: str, handler: DeliveryHandler) -> None:
        """Subscribe a handler to a content topic."""
        self._subscribers.setdefault(content_topic, []).append(handler)

    def unsubscribe(self, content_topic: str, handler: DeliveryHandler) -> None:
        """Remove a handler from a content topic."""
        handlers = self._subscribers.get(content_topic, [])
        if handler in handlers:
            handlers.remove(handler)

    async def publish(self, delivery: Delivery) -> None:
        """Publish a Delivery: calls subscriber callbacks of its topic."""
        handlers = list(self._subscribers.get(delivery.content_topic, []))
        if not handlers:
            logger.debug("No subscribers for %s", delivery.content_topic)
            return

        # Call all handlers concurrently
        results = await asyncio.gather(
            *[handler(delivery) for handler in handlers],
            return_exceptions=True,
        )

        # Log any exceptions
        for i, result in enumerate(results):
            if isinstance(result, Exception):
                logger.error("Error in handler %s: %s", i, result)
