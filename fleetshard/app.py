import kopf
import logging
import fleetshard.handlers  # noqa: F401
from fleetshard.types.settings import Settings
from fleetshard.informers import InformerManager, ResourceInformerFactory
from fleetshard.managers import (
    AgentStatusPublisher,
    StrimziDeploymentEventHandler,
    StrimziDiscoveryWatcher,
    StrimziManager,
    StrimziVersionRegistry,
)
from fleetshard.resources import KafkaCluster, ManagedKafkaAgent
from fleetshard.sensors import init_metrics_server, OperatorSensor, SensorDelegate, PrometheusMonitor
from kubernetes_asyncio import config
from kubernetes_asyncio.client.api_client import ApiClient


def wire_components(
    memo: kopf.Memo, conf: Settings, api_client: ApiClient, sensor: OperatorSensor
) -> kopf.Memo:
    """Build the process wide components and keep them on the memo.

    The version registry lives as long as the process; it starts empty and is
    filled by the Deployment watch replay.
    """
    registry = StrimziVersionRegistry()
    factory = ResourceInformerFactory(api_client, conf, sensor)
    informer_manager = InformerManager(factory)
    agent = ManagedKafkaAgent(
        conf.operator_namespace, conf.agent_resource_name, api_client=api_client
    )
    publisher = AgentStatusPublisher(registry, agent, informer_manager, sensor)
    deployment_handler = StrimziDeploymentEventHandler(
        registry, publisher, conf.strimzi_deployment_prefix, sensor
    )

    memo.conf = conf
    memo.api_client = api_client
    memo.sensor = sensor
    memo.registry = registry
    memo.informer_factory = factory
    memo.informer_manager = informer_manager
    memo.publisher = publisher
    memo.discovery = StrimziDiscoveryWatcher(factory, deployment_handler)
    memo.kafka_cluster = KafkaCluster(informer_manager, api_client=api_client)
    memo.strimzi_manager = StrimziManager(registry, conf.strimzi_version_label, sensor)
    return memo


@kopf.on.startup()
async def setup(
    settings: kopf.OperatorSettings, memo: kopf.Memo, logger: logging.Logger, **kwargs
):
    # Load Kubernetes config - try in-cluster first (for production), then local kubeconfig (for dev)
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        logger.info("In-cluster config not found, trying local kubeconfig")
        try:
            await config.load_kube_config()
            logger.info("Loaded local Kubernetes configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    conf = Settings()

    # Create a shared ApiClient for all watches and resources to prevent connection leaks
    shared_client = ApiClient()
    logger.info("Shared Kubernetes API client initialized")

    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    logger.info("Sensor infrastructure initialized with PrometheusMonitor")

    try:
        init_metrics_server(conf.metrics_port)
    except OSError:
        logger.warning("Continuing without metrics server")

    wire_components(memo, conf, shared_client, sensor_delegate)
    logger.info(
        f"Strimzi version label {conf.strimzi_version_label}, "
        f"agent {conf.operator_namespace}/{conf.agent_resource_name}"
    )

    # Post only warnings and errors as Kubernetes events
    settings.posting.enabled = True
    settings.posting.level = logging.WARNING


@kopf.on.cleanup()
async def cleanup(memo: kopf.Memo, logger: logging.Logger, **kwargs):
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    factory = getattr(memo, "informer_factory", None)
    if factory is not None:
        await factory.stop_all()
        logger.info("Informers stopped")

    api_client = getattr(memo, "api_client", None)
    if api_client is not None:
        await api_client.close()
        logger.info("Shared API client closed")

    logger.info("Operator shutdown complete")
