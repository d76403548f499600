import logging
from typing import Any, Dict, Optional

from fleetshard.informers.handler import ResourceEventHandler
from fleetshard.managers.status import AgentStatusPublisher
from fleetshard.managers.versions import StrimziVersionRegistry
from fleetshard.sensors.base import OperatorSensor
from fleetshard.utils.helpers import name_of, namespace_of
from fleetshard.utils.readiness import is_deployment_ready

logger = logging.getLogger(__name__)


class StrimziDeploymentEventHandler(ResourceEventHandler):
    """Feeds the version registry from the Strimzi operator Deployments.

    Runs on the namespace scoped Deployment watch armed by the discovery
    watcher. Other Deployments of that namespace (drain cleaner, ...) are
    ignored.
    """

    def __init__(
        self,
        registry: StrimziVersionRegistry,
        publisher: AgentStatusPublisher,
        prefix: str = "strimzi-cluster-operator",
        sensor: Optional[OperatorSensor] = None,
    ) -> None:
        self.registry = registry
        self.publisher = publisher
        self.prefix = prefix
        self.sensor = sensor

    def is_strimzi_deployment(self, deployment: Dict[str, Any]) -> bool:
        name = name_of(deployment)
        return name is not None and name.startswith(self.prefix)

    async def on_add(self, deployment):
        if not self.is_strimzi_deployment(deployment):
            return
        logger.debug(
            f"Add event received for Deployment {namespace_of(deployment)}/{name_of(deployment)}"
        )
        self.update_strimzi_version(deployment)
        await self.publisher.publish()

    async def on_update(self, old_deployment, new_deployment):
        if not self.is_strimzi_deployment(new_deployment):
            return
        logger.debug(
            f"Update event received for Deployment {namespace_of(new_deployment)}/{name_of(new_deployment)}"
        )
        if is_deployment_ready(new_deployment) ^ is_deployment_ready(old_deployment):
            self.update_strimzi_version(new_deployment)
            await self.publisher.publish()

    async def on_delete(self, deployment, deleted_final_state_unknown=False):
        if not self.is_strimzi_deployment(deployment):
            return
        logger.debug(
            f"Delete event received for Deployment {namespace_of(deployment)}/{name_of(deployment)}"
        )
        self.delete_strimzi_version(deployment)
        await self.publisher.publish()

    def update_strimzi_version(self, deployment: Dict[str, Any]) -> None:
        version, ready = name_of(deployment), is_deployment_ready(deployment)
        self.registry.record_observed(version, ready)
        if self.sensor:
            self.sensor.on_strimzi_version_observed(version, ready)

    def delete_strimzi_version(self, deployment: Dict[str, Any]) -> None:
        version = name_of(deployment)
        self.registry.record_removed(version)
        if self.sensor:
            self.sensor.on_strimzi_version_removed(version)
