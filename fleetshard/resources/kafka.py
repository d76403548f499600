import logging
from typing import Any, Dict, Mapping, Optional

from kubernetes_asyncio.client.api_client import ApiClient

from fleetshard.common.models.labels import Annotations
from fleetshard.informers.manager import InformerManager
from fleetshard.resources.base import BaseResource
from fleetshard.resources.managedkafka import ManagedKafka
from fleetshard.utils.helpers import annotations_of, is_condition_true

logger = logging.getLogger(__name__)


class KafkaCluster(BaseResource):
    """Strimzi Kafka resources as seen through the local cache.

    Provides the readiness predicates the Strimzi handover decisions are
    based on, and writes the labels/annotations decided for a Kafka.
    """

    KIND = "Kafka"
    GROUP_NAME = "kafka.strimzi.io"
    GROUP_VERSION = "v1beta2"
    PLURAL_NAME = "kafkas"

    READY_CONDITION = "Ready"
    RECONCILIATION_PAUSED_CONDITION = "ReconciliationPaused"

    def __init__(self, informer_manager: InformerManager, api_client: ApiClient = None):
        super().__init__(api_client=api_client)
        self.informer_manager = informer_manager

    def cached_kafka(self, managed_kafka: ManagedKafka) -> Optional[Dict[str, Any]]:
        return self.informer_manager.get_local_kafka(
            managed_kafka.kafka_cluster_namespace, managed_kafka.kafka_cluster_name
        )

    def is_reconciliation_paused(self, managed_kafka: ManagedKafka) -> bool:
        """Strimzi acknowledged the pause annotation."""
        kafka = self.cached_kafka(managed_kafka)
        return kafka is not None and is_condition_true(
            kafka, self.RECONCILIATION_PAUSED_CONDITION
        )

    def is_strimzi_updating(self, managed_kafka: ManagedKafka) -> bool:
        """Paused because the Kafka is moving to another Strimzi version."""
        kafka = self.cached_kafka(managed_kafka)
        if kafka is None:
            return False
        reason = annotations_of(kafka).get(Annotations.STRIMZI_PAUSE_REASON_ANNOTATION)
        return (
            reason == Annotations.STRIMZI_UPDATING_REASON
            and self.is_reconciliation_paused(managed_kafka)
        )

    def is_ready_not_updating(self, managed_kafka: ManagedKafka) -> bool:
        kafka = self.cached_kafka(managed_kafka)
        if kafka is None:
            return False
        return is_condition_true(kafka, self.READY_CONDITION) and not self.is_strimzi_updating(
            managed_kafka
        )

    async def patch_metadata(
        self,
        managed_kafka: ManagedKafka,
        labels: Mapping[str, Optional[str]],
        annotations: Mapping[str, Optional[str]],
    ) -> Optional[Dict[str, Any]]:
        """Merge patch labels/annotations of the Kafka; None values delete keys."""
        metadata = {}
        if labels:
            metadata["labels"] = dict(labels)
        if annotations:
            metadata["annotations"] = dict(annotations)
        if not metadata:
            return None
        logger.debug(f"Patching Kafka {managed_kafka.namespace}/{managed_kafka.name} with {metadata}")
        return await self.patch_custom_object(
            self.custom_objects_api,
            namespace=managed_kafka.kafka_cluster_namespace,
            group=self.GROUP_NAME,
            version=self.GROUP_VERSION,
            plural=self.PLURAL_NAME,
            name=managed_kafka.kafka_cluster_name,
            body={"metadata": metadata},
        )
