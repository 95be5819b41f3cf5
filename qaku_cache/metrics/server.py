"""Prometheus metrics HTTP endpoint.

Usage:
    start_metrics_server(8003, recorder.registry)

    # Prometheus scrapes http://<host>:8003/metrics
"""

from prometheus_client import CollectorRegistry, start_http_server

from ..logging_config import get_logger

logger = get_logger(__name__)


def start_metrics_server(
    port: int,
    registry: CollectorRegistry,
    host: str = "0.0.0.0",
) -> bool:
    """Start the metrics server in a background thread.

    Returns:
        True if the server started, False if binding failed.
    """
    try:
        start_http_server(port, addr=host, registry=registry)
    except OSError as e:
        logger.error("Failed to start metrics server on %s:%s: %s", host, port, e)
        return False

    logger.info("Metrics server started on http://%s:%s/metrics", host, port)
    return True

