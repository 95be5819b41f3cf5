"""Dispatcher launching pipeline executions for bus deliveries."""

import asyncio
from typing import Protocol

from ..codec import decode
from ..errors import DecodeError
from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import Delivery
from .pipeline import IReplicationPipeline

logger = get_logger(__name__)

DEFAULT_DRAIN_TIMEOUT = 5.0


class IDispatcher(Protocol):
    """Owns the concurrency policy of the pipeline."""

    async def start(self) -> None:
        """Subscribe to the content topic."""
        ...

    async def stop(self) -> None:
        """Unsubscribe and drain in-flight executions."""
        ...

    @property
    def in_flight(self) -> int:
        """Number of running executions."""
        ...


class Dispatcher:
    """Runs one pipeline execution per delivery, at most max_in_flight at once.

    The bus handler waits for a free slot before launching an execution,
    so a slow storage network slows down the consumer instead of piling up
    tasks.
    """

    def __init__(
        self,
        event_bus: IEventBus,
        pipeline: IReplicationPipeline,
        content_topic: str,
        max_in_flight: int,
        dedupe_in_flight: bool = False,
        drain_timeout: float = DEFAULT_DRAIN_TIMEOUT,
    ):
        if max_in_flight <= 0:
            raise ValueError("max_in_flight must be positive")

        self._event_bus = event_bus
        self._pipeline = pipeline
        self._content_topic = content_topic
        self._dedupe = dedupe_in_flight
        self._drain_timeout = drain_timeout
        self._slots = asyncio.Semaphore(max_in_flight)
        self._tasks: set[asyncio.Task] = set()
        self._in_flight_ids: set[str] = set()
        self._running = False

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def start(self) -> None:
        """Subscribe to the content topic."""
        if self._running:
            return
        self._running = True
        self._event_bus.subscribe(self._content_topic, self._handle_delivery)
        logger.info("Dispatcher subscribed to %s", self._content_topic)

    async def stop(self) -> None:
        """Unsubscribe and wait for in-flight executions, cancelling stragglers."""
        if not self._running:
            return
        self._running = False
        self._event_bus.unsubscribe(self._content_topic, self._handle_delivery)

        if not self._tasks:
            return

        pending = set(self._tasks)
        _, still_running = await asyncio.wait(pending, timeout=self._drain_timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning("Cancelled %d in-flight executions", len(still_running))
            await asyncio.gather(*still_running, return_exceptions=True)

    async def dispatch(self, delivery: Delivery) -> asyncio.Task | None:
        """
        Launch a pipeline execution for a delivery.

        Waits for a free slot first. Returns the launched task, or None when
        the delivery was skipped (other topic, stopped, or duplicate CID).
        """
        if delivery.content_topic != self._content_topic:
            logger.debug("Ignoring delivery on %s", delivery.content_topic)
            return None
        if not self._running:
            logger.warning("Dispatcher stopped, dropping delivery")
            return None

        claimed, key = self._claim(delivery.payload)
        if not claimed:
            return None

        try:
            await self._slots.acquire()
        except asyncio.CancelledError:
            self._release_claim(key)
            raise

        task = asyncio.create_task(self._execute(delivery.payload, key))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _handle_delivery(self, delivery: Delivery) -> None:
        await self.dispatch(delivery)

    async def _execute(self, payload: bytes, key: str | None) -> None:
        try:
            await self._pipeline.process(payload)
        except Exception:
            logger.exception("Pipeline execution failed", extra={"context": {"content_id": key}})
        finally:
            self._slots.release()
            self._release_claim(key)

    def _claim(self, payload: bytes) -> tuple[bool, str | None]:
        """Mark a CID in flight; (False, cid) if it already is."""
        if not self._dedupe:
            return True, None
        try:
            content_id = decode(payload).content_id
        except DecodeError:
            # the pipeline records the failure
            return True, None

        if content_id in self._in_flight_ids:
            logger.debug(
                "Skipping duplicate announcement",
                extra={"context": {"content_id": content_id}},
            )
            return False, content_id
        self._in_flight_ids.add(content_id)
        return True, content_id

    def _release_claim(self, key: str | None) -> None:
        if key:
            self._in_flight_ids.discard(key)
