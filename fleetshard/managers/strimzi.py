import logging
from typing import Dict, MutableMapping, Optional, Tuple

from fleetshard.common.models.labels import Annotations, Labels
from fleetshard.managers.versions import StrimziVersionRegistry
from fleetshard.resources.kafka import KafkaCluster
from fleetshard.resources.managedkafka import ManagedKafka
from fleetshard.sensors.base import OperatorSensor
from fleetshard.types.models import StrimziVersionStatus
from fleetshard.utils.helpers import labels_of

logger = logging.getLogger(__name__)

PAUSE = "pause"
UNPAUSE = "unpause"
CLEAR_REASON = "clear_reason"


class StrimziManager:
    """Moves Kafka resources between installed Strimzi operator versions.

    Each Strimzi version only reconciles the Kafka resources whose version
    selector label carries its own version. A handover therefore goes:

    1. the Kafka is ready and a different Strimzi version is requested:
       pause reconciliation (reason ``strimziupdating``)
    2. Strimzi reports the Kafka as paused: switch the selector label to the
       requested version and lift the pause in the same pass
    3. the new version reconciled the Kafka to ready: drop the pause reason

    Both operations only mutate the dict handed in; the caller writes it to
    the Kafka resource.
    """

    def __init__(
        self,
        registry: StrimziVersionRegistry,
        version_label: str = Labels.DEFAULT_STRIMZI_VERSION_LABEL,
        sensor: Optional[OperatorSensor] = None,
    ) -> None:
        self.registry = registry
        self._version_label = version_label
        self.sensor = sensor

    @property
    def version_label(self) -> str:
        return self._version_label

    @property
    def strimzi_versions(self) -> Tuple[StrimziVersionStatus, ...]:
        """Installed Strimzi versions with related readiness status."""
        return self.registry.snapshot()

    def toggle_pause_reconciliation(
        self,
        managed_kafka: ManagedKafka,
        kafka_cluster: KafkaCluster,
        annotations: MutableMapping[str, str],
    ) -> None:
        """Add or remove the pause annotations of the Kafka.

        May set or remove ``strimzi.io/pause-reconciliation`` and set or remove
        ``managedkafka.bf2.org/pause-reason``; no other key is touched. A pause
        set for another reason is never lifted.

        Args:
            managed_kafka: ManagedKafka instance
            kafka_cluster: Readiness predicates of the Kafka
            annotations: Kafka annotations, mutated in place
        """
        if self.has_strimzi_changed(managed_kafka, kafka_cluster):
            logger.info(
                f"Strimzi change from {self.current_strimzi_version(managed_kafka, kafka_cluster)} "
                f"to {managed_kafka.strimzi_version}"
            )
            if kafka_cluster.is_ready_not_updating(managed_kafka):
                self.pause_reconcile(managed_kafka, annotations)
                annotations[Annotations.STRIMZI_PAUSE_REASON_ANNOTATION] = Annotations.STRIMZI_UPDATING_REASON
            elif kafka_cluster.is_reconciliation_paused(managed_kafka) and self.is_pause_reason_strimzi_update(
                annotations
            ):
                self.unpause_reconcile(managed_kafka, annotations)
        elif kafka_cluster.is_ready_not_updating(managed_kafka) and self.is_pause_reason_strimzi_update(
            annotations
        ):
            logger.debug(f"Removing Strimzi update pause reason from {managed_kafka}")
            annotations.pop(Annotations.STRIMZI_PAUSE_REASON_ANNOTATION)
            self._on_pause_toggled(managed_kafka, CLEAR_REASON)

    def change_strimzi_version(
        self,
        managed_kafka: ManagedKafka,
        kafka_cluster: KafkaCluster,
        labels: MutableMapping[str, str],
    ) -> None:
        """Set the version selector label of the Kafka.

        Only the version label key is written. It moves to the requested
        version once Strimzi reports the Kafka as paused; otherwise the
        current owner is kept.

        Args:
            managed_kafka: ManagedKafka instance
            kafka_cluster: Readiness predicates of the Kafka
            labels: Kafka labels, mutated in place
        """
        current = self.current_strimzi_version(managed_kafka, kafka_cluster)

        if kafka_cluster.is_reconciliation_paused(managed_kafka) and current != managed_kafka.strimzi_version:
            logger.info(
                f"Handing {managed_kafka} over from Strimzi {current} to {managed_kafka.strimzi_version}"
            )
            labels[self._version_label] = managed_kafka.strimzi_version
        else:
            labels[self._version_label] = current

    def has_strimzi_changed(self, managed_kafka: ManagedKafka, kafka_cluster: KafkaCluster) -> bool:
        """A Strimzi version other than the one owning the Kafka was requested."""
        return self.current_strimzi_version(managed_kafka, kafka_cluster) != managed_kafka.strimzi_version

    def current_strimzi_version(self, managed_kafka: ManagedKafka, kafka_cluster: KafkaCluster) -> str:
        """Strimzi version owning the Kafka.

        Read from the Kafka's version label; before the Kafka exists, the
        requested version is the current one.
        """
        kafka = kafka_cluster.cached_kafka(managed_kafka)
        labels: Dict[str, str] = labels_of(kafka) if kafka is not None else {}
        return labels.get(self._version_label, managed_kafka.strimzi_version)

    def pause_reconcile(self, managed_kafka: ManagedKafka, annotations: MutableMapping[str, str]) -> None:
        if Annotations.STRIMZI_PAUSE_RECONCILE_ANNOTATION not in annotations:
            logger.debug(f"Pause reconcile for {managed_kafka.name}")
            annotations[Annotations.STRIMZI_PAUSE_RECONCILE_ANNOTATION] = Annotations.TRUE
            self._on_pause_toggled(managed_kafka, PAUSE)

    def unpause_reconcile(self, managed_kafka: ManagedKafka, annotations: MutableMapping[str, str]) -> None:
        if Annotations.STRIMZI_PAUSE_RECONCILE_ANNOTATION in annotations:
            logger.debug(f"Unpause reconcile for {managed_kafka.name}")
            annotations.pop(Annotations.STRIMZI_PAUSE_RECONCILE_ANNOTATION)
            self._on_pause_toggled(managed_kafka, UNPAUSE)

    @staticmethod
    def is_pause_reason_strimzi_update(annotations: MutableMapping[str, str]) -> bool:
        return annotations.get(Annotations.STRIMZI_PAUSE_REASON_ANNOTATION) == Annotations.STRIMZI_UPDATING_REASON

    def _on_pause_toggled(self, managed_kafka: ManagedKafka, action: str) -> None:
        if self.sensor:
            self.sensor.on_reconcile_pause_toggled(managed_kafka.name, managed_kafka.namespace, action)
