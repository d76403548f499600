from typing import Dict


class Annotations:
    STRIMZI_DOMAIN: str = "strimzi.io/"

    MANAGED_KAFKA_DOMAIN: str = "managedkafka.bf2.org/"

    #: Understood by every Strimzi version; stops it reconciling the resource
    STRIMZI_PAUSE_RECONCILE_ANNOTATION = STRIMZI_DOMAIN + "pause-reconciliation"

    #: Why the pause annotation was set
    STRIMZI_PAUSE_REASON_ANNOTATION = MANAGED_KAFKA_DOMAIN + "pause-reason"

    #: Pause reason set while handing a Kafka over to another Strimzi version
    STRIMZI_UPDATING_REASON = "strimziupdating"

    TRUE = "true"


class Labels:
    KUBERNETES_DOMAIN = "app.kubernetes.io/"

    KUBERNETES_PART_OF_LABEL = KUBERNETES_DOMAIN + "part-of"

    DEFAULT_STRIMZI_VERSION_LABEL = "managedkafka.bf2.org/strimziVersion"

    _labels: Dict[str, str]

    def __init__(self, labels: Dict[str, str] = None) -> None:
        self._labels = labels if labels else dict()

    def update(self, labels: Dict[str, str]) -> "Labels":
        self._labels.update(labels.copy())
        return self

    def as_dict(self) -> Dict[str, str]:
        """Return labels are dictionary."""
        return self._labels.copy()

    def include(self, label: str, value: str) -> "Labels":
        self.update({label: value})
        return self

    def include_kubernetes_part_of(self, part_of: str) -> "Labels":
        return self.include(self.KUBERNETES_PART_OF_LABEL, part_of)

    def __str__(self):
        return f"Labels<{self._labels}>"

    @classmethod
    def managed_components_selector(cls, part_of: str) -> "Labels":
        """Selector matching the ReplicaSets of this fleet's managed components."""
        return Labels().include_kubernetes_part_of(part_of)
