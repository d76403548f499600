import logging
from typing import Any, Dict, Optional

from kubernetes_asyncio.client import CustomObjectsApi

from fleetshard.informers.factory import ResourceInformerFactory
from fleetshard.informers.guard import ArmingGuard
from fleetshard.informers.handler import LoggingEventHandler
from fleetshard.informers.informer import ResourceInformer

logger = logging.getLogger(__name__)


class InformerManager:
    """Owns the watch over the Strimzi Kafka resources.

    That watch is expensive fleet wide, so it is only created once at least
    one Strimzi version is known to be installed.
    """

    KAFKA_KIND = "Kafka"
    KAFKA_GROUP = "kafka.strimzi.io"
    KAFKA_VERSION = "v1beta2"
    KAFKA_PLURAL = "kafkas"

    def __init__(self, factory: ResourceInformerFactory) -> None:
        self.factory = factory
        self._kafka_guard = ArmingGuard()
        self._kafka_informer: Optional[ResourceInformer] = None

    @property
    def kafka_informer(self) -> Optional[ResourceInformer]:
        return self._kafka_informer

    def create_kafka_informer(self) -> Optional[ResourceInformer]:
        """Create the Kafka informer unless it exists already."""
        if not self._kafka_guard.try_arm():
            return self._kafka_informer
        try:
            api = CustomObjectsApi(self.factory.api_client)
            self._kafka_informer = self.factory.create(
                self.KAFKA_KIND,
                api.list_cluster_custom_object,
                LoggingEventHandler(self.KAFKA_KIND),
                group=self.KAFKA_GROUP,
                version=self.KAFKA_VERSION,
                plural=self.KAFKA_PLURAL,
            )
        except Exception:
            self._kafka_guard.disarm()
            raise
        logger.info("Created informer for Strimzi Kafka resources")
        return self._kafka_informer

    def get_local_kafka(self, namespace: str, name: str) -> Optional[Dict[str, Any]]:
        if self._kafka_informer is None:
            return None
        return self._kafka_informer.get(namespace, name)
