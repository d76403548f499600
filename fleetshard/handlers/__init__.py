from fleetshard.handlers import (
    probes,
    replicasets,
    managedkafka,
)

__all__ = [
    "probes",
    "replicasets",
    "managedkafka",
]
