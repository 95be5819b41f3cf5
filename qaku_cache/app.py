"""Application bootstrap and lifecycle management."""

from typing import Protocol

import httpx
from prometheus_client import CollectorRegistry

from .config import Settings
from .event_bus import EventBus
from .logging_config import get_logger
from .metrics import PrometheusRecorder
from .pipeline import Dispatcher, ReplicationPipeline
from .storage_network import CodexClient
from .waku import WakuRelaySource

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def codex(self) -> CodexClient:
        """Storage network client."""
        ...

    @property
    def dispatcher(self) -> Dispatcher:
        """Pipeline dispatcher."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        registry: CollectorRegistry | None = None,
        codex_http: httpx.AsyncClient | None = None,
        waku_http: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or Settings.from_env()
        self._registry = registry or CollectorRegistry()
        self._codex_http = codex_http
        self._waku_http = waku_http

        # Components (will be initialized in start())
        self._recorder: PrometheusRecorder | None = None
        self._codex: CodexClient | None = None
        self._event_bus: EventBus | None = None
        self._pipeline: ReplicationPipeline | None = None
        self._dispatcher: Dispatcher | None = None
        self._source: WakuRelaySource | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        settings = self._settings
        logger.info(
            "Starting cache node (max dataset size %d bytes)",
            settings.max_dataset_size,
        )

        # 1. Metrics (no dependencies)
        self._recorder = PrometheusRecorder(self._registry)

        # 2. Storage network client
        self._codex = CodexClient(settings.codex_api_url, client=self._codex_http)
        logger.info("Codex client for %s initialized", settings.codex_api_url)

        # 3. EventBus
        self._event_bus = EventBus()

        # 4. Pipeline (depends on Codex client + recorder)
        self._pipeline = ReplicationPipeline(
            resolver=self._codex,
            trigger=self._codex,
            recorder=self._recorder,
            policy=settings.policy,
        )

        # 5. Dispatcher (depends on EventBus + pipeline)
        self._dispatcher = Dispatcher(
            event_bus=self._event_bus,
            pipeline=self._pipeline,
            content_topic=settings.content_topic,
            max_in_flight=settings.max_in_flight,
            dedupe_in_flight=settings.dedupe_in_flight,
        )
        await self._dispatcher.start()

        # 6. Bus source (feeds the EventBus)
        self._source = WakuRelaySource(
            api_url=settings.waku_api_url,
            content_topic=settings.content_topic,
            event_bus=self._event_bus,
            poll_interval=settings.poll_interval,
            client=self._waku_http,
        )
        await self._source.start()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._source:
            await self._source.stop()
        if self._dispatcher:
            await self._dispatcher.stop()
        if self._codex:
            await self._codex.aclose()
            logger.info("Codex client closed")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    @property
    def codex(self) -> CodexClient:
        """Get storage network client."""
        if not self._codex:
            raise RuntimeError("Application not started")
        return self._codex

    @property
    def event_bus(self) -> EventBus:
        """Get event bus instance."""
        if not self._event_bus:
            raise RuntimeError("Application not started")
        return self._event_bus

    @property
    def dispatcher(self) -> Dispatcher:
        """Get dispatcher instance."""
        if not self._dispatcher:
            raise RuntimeError("Application not started")
        return self._dispatcher
