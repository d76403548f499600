from .managedkafka import ManagedKafka
from .managedkafkaagent import ManagedKafkaAgent
from .kafka import KafkaCluster

__all__ = ["ManagedKafka", "ManagedKafkaAgent", "KafkaCluster"]
