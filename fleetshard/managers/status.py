import logging
from typing import Optional

from kubernetes_asyncio.client import ApiException

from fleetshard.informers.manager import InformerManager
from fleetshard.managers.versions import StrimziVersionRegistry
from fleetshard.resources.managedkafkaagent import ManagedKafkaAgent
from fleetshard.sensors.base import OperatorSensor
from fleetshard.utils.errors import conflict_error

logger = logging.getLogger(__name__)


class AgentStatusPublisher:
    """Pushes the installed Strimzi versions to the ManagedKafkaAgent status.

    The status is recomputed from a full registry snapshot every time, so a
    failed write is only logged; the next Deployment event repeats the work.
    """

    def __init__(
        self,
        registry: StrimziVersionRegistry,
        agent: ManagedKafkaAgent,
        informer_manager: InformerManager,
        sensor: Optional[OperatorSensor] = None,
    ) -> None:
        self.registry = registry
        self.agent = agent
        self.informer_manager = informer_manager
        self.sensor = sensor

    async def publish(self) -> None:
        await self.update_agent_status()
        # the Kafka watch is only worth having once a Strimzi bundle is installed
        if len(self.registry) > 0:
            try:
                self.informer_manager.create_kafka_informer()
            except Exception as e:
                logger.error(f"Failed to create the Kafka informer: {e}")

    async def update_agent_status(self) -> bool:
        """Write the registry snapshot to the agent, True if it was written."""
        try:
            resource = await self.agent.fetch()
        except ApiException as e:
            logger.error(
                f"Failed to read ManagedKafkaAgent {self.agent.namespace}/{self.agent.name}: "
                f"({e.status}) {e.reason}"
            )
            return False
        except Exception as e:
            # transport failures (timeouts, dropped connections) are not ApiExceptions
            logger.error(f"Failed to read ManagedKafkaAgent {self.agent.namespace}/{self.agent.name}: {e!r}")
            return False
        if resource is None or resource.get("status") is None:
            logger.debug(
                f"ManagedKafkaAgent {self.agent.namespace}/{self.agent.name} has no status yet, "
                "skipping Strimzi versions update"
            )
            return False

        versions = self.registry.versions()
        logger.debug(f"Updating Strimzi versions {versions}")
        resource["status"]["strimzi"] = versions

        sensor_state = None
        if self.sensor:
            sensor_state = self.sensor.on_agent_status_update_start(
                self.agent.namespace, self.agent.name, len(versions)
            )
        try:
            await self.agent.update_status(resource)
        except ApiException as e:
            hint = ", written again on the next version change" if conflict_error(e) else ""
            logger.error(
                f"Failed to update ManagedKafkaAgent {self.agent.namespace}/{self.agent.name} "
                f"status: ({e.status}) {e.reason}{hint}"
            )
            if self.sensor:
                self.sensor.on_agent_status_update_complete(
                    self.agent.namespace, self.agent.name, sensor_state, False, e
                )
            return False
        except Exception as e:
            logger.error(
                f"Failed to update ManagedKafkaAgent {self.agent.namespace}/{self.agent.name} status: {e!r}"
            )
            if self.sensor:
                self.sensor.on_agent_status_update_complete(
                    self.agent.namespace, self.agent.name, sensor_state, False, e
                )
            return False
        if self.sensor:
            self.sensor.on_agent_status_update_complete(
                self.agent.namespace, self.agent.name, sensor_state, True
            )
        return True
