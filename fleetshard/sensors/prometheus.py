"""Prometheus monitoring backend for the fleetshard operator.

PrometheusMonitor turns sensor events into Prometheus metrics:

1. Installed Strimzi versions and their readiness
2. ManagedKafkaAgent status publication results and latency
3. Runtime armed watches and Kafka handover progress
"""

from typing import Dict, Optional, Any
import time
import logging

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, Gauge

from fleetshard.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(OperatorSensor):
    """Prometheus metrics monitor for the fleetshard operator.

    Metrics are organized into three categories:
    - fleetshard_strimzi_* - Installed Strimzi versions
    - fleetshard_agent_status_* - Status publication to the ManagedKafkaAgent
    - fleetshard_informers_* / fleetshard_reconcile_pause_* / fleetshard_strimzi_handover_*
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()
        self._versions: Dict[str, bool] = {}

        self.strimzi_version_ready = Gauge(
            'fleetshard_strimzi_version_ready',
            'Readiness (1/0) of an installed Strimzi operator version',
            labelnames=['version'],
            registry=registry,
        )

        self.strimzi_versions_installed = Gauge(
            'fleetshard_strimzi_versions_installed',
            'Number of Strimzi operator versions currently installed',
            registry=registry,
        )

        self.agent_status_updates_total = Counter(
            'fleetshard_agent_status_updates_total',
            'Total number of ManagedKafkaAgent status writes',
            labelnames=['result'],
            registry=registry,
        )

        self.agent_status_update_duration = Histogram(
            'fleetshard_agent_status_update_duration_seconds',
            'Time spent writing the ManagedKafkaAgent status',
            labelnames=['result'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0],
            registry=registry,
        )

        self.informers_created_total = Counter(
            'fleetshard_informers_created_total',
            'Total number of watches armed at runtime',
            labelnames=['kind', 'namespace'],
            registry=registry,
        )

        self.reconcile_pause_total = Counter(
            'fleetshard_reconcile_pause_total',
            'Total number of Kafka pause annotation changes',
            labelnames=['action'],
            registry=registry,
        )

        self.strimzi_handover_total = Counter(
            'fleetshard_strimzi_handover_total',
            'Total number of Kafka handovers between Strimzi versions',
            labelnames=['from_version', 'to_version'],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    def on_strimzi_version_observed(self, version: str, ready: bool) -> None:
        self._versions[version] = ready
        self.strimzi_version_ready.labels(version=version).set(1 if ready else 0)
        self.strimzi_versions_installed.set(len(self._versions))

    def on_strimzi_version_removed(self, version: str) -> None:
        if self._versions.pop(version, None) is not None:
            try:
                self.strimzi_version_ready.remove(version)
            except KeyError:
                pass
        self.strimzi_versions_installed.set(len(self._versions))

    def on_agent_status_update_start(
        self, namespace: str, name: str, versions: int
    ) -> Optional[Dict[str, Any]]:
        return {'start_time': time.time()}

    def on_agent_status_update_complete(
        self,
        namespace: str,
        name: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        result = 'success' if success else 'failure'
        self.agent_status_updates_total.labels(result=result).inc()
        if state:
            duration = time.time() - state['start_time']
            self.agent_status_update_duration.labels(result=result).observe(duration)

    def on_informer_created(self, kind: str, namespace: Optional[str]) -> None:
        self.informers_created_total.labels(kind=kind, namespace=namespace or "").inc()

    def on_reconcile_pause_toggled(self, name: str, namespace: str, action: str) -> None:
        self.reconcile_pause_total.labels(action=action).inc()

    def on_strimzi_handover(
        self, name: str, namespace: str, from_version: str, to_version: str
    ) -> None:
        self.strimzi_handover_total.labels(
            from_version=from_version, to_version=to_version
        ).inc()
