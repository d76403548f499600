from .strimzi_version import StrimziVersionStatusSchema
from .managedkafka_spec import VersionsSchema, ManagedKafkaSpecSchema

__all__ = [
    "StrimziVersionStatusSchema",
    "VersionsSchema",
    "ManagedKafkaSpecSchema",
]
