"""HTTP endpoint serving the Prometheus metrics."""

import logging
from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

logger = logging.getLogger(__name__)


def init_metrics_server(port: int = 8000, registry: CollectorRegistry = REGISTRY) -> None:
    """Serve `registry` on ``/metrics``.

    prometheus_client runs the server on its own daemon thread, so the kopf
    event loop is not blocked and shutdown does not wait for it.

    Raises:
        OSError: the port can't be bound
    """
    try:
        start_http_server(port, registry=registry)
    except OSError as e:
        logger.error(f"Failed to start metrics server on port {port}: {e}")
        raise
    logger.info(f"Prometheus metrics available at http://0.0.0.0:{port}/metrics")
