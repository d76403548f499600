from typing import Any, Dict, Optional

from kubernetes_asyncio.client.api_client import ApiClient

from fleetshard.resources.base import BaseResource


class ManagedKafkaAgent(BaseResource):
    """The singleton ManagedKafkaAgent, the fleet wide status resource."""

    KIND = "ManagedKafkaAgent"
    PLURAL_NAME = "managedkafkaagents"
    RESOURCE_NAME = "managed-agent"

    def __init__(
        self,
        namespace: str,
        name: str = RESOURCE_NAME,
        api_client: ApiClient = None,
    ):
        super().__init__(name, namespace, api_client=api_client)

    async def fetch(self) -> Optional[Dict[str, Any]]:
        """Fetch the agent, None if it does not exist (yet)."""
        return await self.get_custom_object(
            self.custom_objects_api,
            namespace=self.namespace,
            group=self.GROUP_NAME,
            version=self.GROUP_VERSION,
            plural=self.PLURAL_NAME,
            name=self.name,
        )

    async def update_status(self, agent: Dict[str, Any]) -> Dict[str, Any]:
        """Write `agent` through the status subresource.

        The body carries the fetched resourceVersion, a concurrent writer makes
        this fail with a conflict.
        """
        return await self.replace_custom_object_status(
            self.custom_objects_api,
            namespace=self.namespace,
            group=self.GROUP_NAME,
            version=self.GROUP_VERSION,
            plural=self.PLURAL_NAME,
            name=self.name,
            body=agent,
        )
