from .strimzi_version import StrimziVersionStatus
from .managedkafka_spec import Versions, ManagedKafkaSpec

__all__ = [
    "StrimziVersionStatus",
    "Versions",
    "ManagedKafkaSpec",
]
