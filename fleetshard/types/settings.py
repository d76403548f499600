import os
from typing import Any

_TRUE, _FALSE = {"True", "true", "yes", "1"}, {"False", "false", "no", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

#: Label on the Kafka resource pinning it to a Strimzi operator version.
#: Must match STRIMZI_CUSTOM_RESOURCE_SELECTOR in the Strimzi Deployment(s).
STRIMZI_VERSION_LABEL = str(
    _getenv("STRIMZI_VERSION_LABEL", "managedkafka.bf2.org/strimziVersion")
)

#: Name prefix identifying Strimzi cluster operator Deployments
STRIMZI_DEPLOYMENT_PREFIX = str(
    _getenv("STRIMZI_DEPLOYMENT_PREFIX", "strimzi-cluster-operator")
)

#: Value of app.kubernetes.io/part-of carried by the managed components' ReplicaSets.
#: Read at import by the ReplicaSet event filter, not part of `Settings`.
MANAGED_COMPONENTS_PART_OF = str(_getenv("MANAGED_COMPONENTS_PART_OF", "managed-kafka"))

#: Namespace the operator runs in (hosts the ManagedKafkaAgent resource)
OPERATOR_NAMESPACE = str(_getenv("OPERATOR_NAMESPACE", "default"))

#: Name of the singleton ManagedKafkaAgent resource
AGENT_RESOURCE_NAME = str(_getenv("AGENT_RESOURCE_NAME", "managed-agent"))

#: Server side timeout of a single watch request before it is restarted
INFORMER_WATCH_TIMEOUT_SECONDS = int(_getenv("INFORMER_WATCH_TIMEOUT_SECONDS", 300))

#: Seconds to wait before restarting a watch that failed
INFORMER_RETRY_DELAY_SECONDS = float(_getenv("INFORMER_RETRY_DELAY_SECONDS", 5.0))

#: Interval of the periodic ManagedKafka reconcile timer.
#: Read at import by the timer decorator, not part of `Settings`.
RECONCILE_INTERVAL_SECONDS = float(_getenv("RECONCILE_INTERVAL_SECONDS", 30.0))

#: Port of the Prometheus metrics endpoint
METRICS_PORT = int(_getenv("METRICS_PORT", 8000))


class Settings:
    """Operator settings"""

    strimzi_version_label: str = STRIMZI_VERSION_LABEL
    strimzi_deployment_prefix: str = STRIMZI_DEPLOYMENT_PREFIX
    operator_namespace: str = OPERATOR_NAMESPACE
    agent_resource_name: str = AGENT_RESOURCE_NAME
    informer_watch_timeout_seconds: int = INFORMER_WATCH_TIMEOUT_SECONDS
    informer_retry_delay_seconds: float = INFORMER_RETRY_DELAY_SECONDS
    metrics_port: int = METRICS_PORT

    def __init__(
        self,
        *args,
        strimzi_version_label: str = None,
        strimzi_deployment_prefix: str = None,
        operator_namespace: str = None,
        agent_resource_name: str = None,
        informer_watch_timeout_seconds: int = None,
        informer_retry_delay_seconds: float = None,
        metrics_port: int = None,
        **kwargs,
    ):
        if strimzi_version_label is not None:
            self.strimzi_version_label = strimzi_version_label

        if strimzi_deployment_prefix is not None:
            self.strimzi_deployment_prefix = strimzi_deployment_prefix

        if operator_namespace is not None:
            self.operator_namespace = operator_namespace

        if agent_resource_name is not None:
            self.agent_resource_name = agent_resource_name

        if informer_watch_timeout_seconds is not None:
            self.informer_watch_timeout_seconds = informer_watch_timeout_seconds

        if informer_retry_delay_seconds is not None:
            self.informer_retry_delay_seconds = informer_retry_delay_seconds

        if metrics_port is not None:
            self.metrics_port = metrics_port
