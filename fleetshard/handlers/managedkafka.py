import kopf
from logging import Logger
from marshmallow import ValidationError
from kubernetes_asyncio.client import ApiException

from fleetshard.managers.strimzi import StrimziManager
from fleetshard.resources import ManagedKafka, KafkaCluster
from fleetshard.types.models import ManagedKafkaSpec
from fleetshard.types.schemas import ManagedKafkaSpecSchema
from fleetshard.types.settings import RECONCILE_INTERVAL_SECONDS
from fleetshard.utils.errors import convert_api_exception
from fleetshard.utils.helpers import annotations_of, labels_of, metadata_patch

KIND = "ManagedKafka"


async def reconcile_strimzi_version(
    name: str,
    namespace: str,
    spec,
    memo: kopf.Memo,
    logger: Logger,
) -> None:
    """Apply the Strimzi pause/handover decisions to the Kafka of a ManagedKafka."""
    try:
        spec_model: ManagedKafkaSpec = ManagedKafkaSpecSchema().load(dict(spec))
    except ValidationError as e:
        raise kopf.PermanentError(f"Invalid ManagedKafka spec: {e.messages}")
    if spec_model.deleted:
        return

    managed_kafka = ManagedKafka.from_spec(name, namespace, spec_model)
    strimzi_manager: StrimziManager = memo.strimzi_manager
    kafka_cluster: KafkaCluster = memo.kafka_cluster

    kafka = kafka_cluster.cached_kafka(managed_kafka)
    if kafka is None:
        logger.debug(f"Kafka {namespace}/{name} not found in cache, nothing to hand over")
        return

    ready_versions = {v.version for v in strimzi_manager.strimzi_versions if v.ready}
    if managed_kafka.strimzi_version not in ready_versions:
        logger.warning(
            f"Requested Strimzi version {managed_kafka.strimzi_version} is not installed and ready "
            f"(ready: {sorted(ready_versions)})"
        )

    labels, annotations = labels_of(kafka), annotations_of(kafka)
    desired_labels, desired_annotations = dict(labels), dict(annotations)
    strimzi_manager.toggle_pause_reconciliation(managed_kafka, kafka_cluster, desired_annotations)
    strimzi_manager.change_strimzi_version(managed_kafka, kafka_cluster, desired_labels)

    labels_patch = metadata_patch(labels, desired_labels)
    annotations_patch = metadata_patch(annotations, desired_annotations)
    if not labels_patch and not annotations_patch:
        return
    logger.info(f"Updating Kafka {namespace}/{name} labels {labels_patch} annotations {annotations_patch}")
    try:
        await kafka_cluster.patch_metadata(managed_kafka, labels_patch, annotations_patch)
    except ApiException as e:
        convert_api_exception(e)

    version_label = strimzi_manager.version_label
    sensor = getattr(memo, "sensor", None)
    previous = labels.get(version_label)
    if sensor and previous and labels_patch.get(version_label, previous) != previous:
        # counted once the new selector label is on the Kafka
        sensor.on_strimzi_handover(
            name, namespace, previous, labels_patch[version_label]
        )


@kopf.on.resume(kind=KIND)
@kopf.on.create(kind=KIND)
async def on_create(name, namespace, spec, memo: kopf.Memo, logger: Logger, **kwargs):
    await reconcile_strimzi_version(name, namespace, spec, memo, logger)


@kopf.on.update(kind=KIND, field="spec.versions")
async def on_versions_update(
    old, new, name, namespace, spec, memo: kopf.Memo, logger: Logger, **kwargs
):
    logger.info(f"Versions of {namespace}/{name} changed from {old} to {new}")
    await reconcile_strimzi_version(name, namespace, spec, memo, logger)


@kopf.timer(KIND, initial_delay=5.0, interval=RECONCILE_INTERVAL_SECONDS)
async def reconcile(name, namespace, spec, memo: kopf.Memo, logger: Logger, **kwargs):
    """Periodic pass; a handover advances as Strimzi reports the Kafka state."""
    await reconcile_strimzi_version(name, namespace, spec, memo, logger)
