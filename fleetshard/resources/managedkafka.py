from fleetshard.resources.base import BaseResource
from fleetshard.types.models import ManagedKafkaSpec


class ManagedKafka(BaseResource):
    """ManagedKafka, the desired state of one Kafka instance."""

    KIND = "ManagedKafka"
    PLURAL_NAME = "managedkafkas"

    spec: ManagedKafkaSpec

    @classmethod
    def from_spec(
        cls,
        name: str,
        namespace: str,
        spec: ManagedKafkaSpec,
    ) -> "ManagedKafka":
        managed_kafka = ManagedKafka(name, namespace)
        managed_kafka.spec = spec
        return managed_kafka

    @property
    def strimzi_version(self) -> str:
        """Strimzi version requested for this instance."""
        return self.spec.versions.strimzi

    @property
    def kafka_cluster_name(self) -> str:
        return self.name

    @property
    def kafka_cluster_namespace(self) -> str:
        return self.namespace

    def __repr__(self) -> str:
        return f"ManagedKafka<{self.namespace}/{self.name}>"
