import logging
from typing import Any, Dict, Optional

from kubernetes_asyncio.client import ApiException, AppsV1Api

from fleetshard.informers.factory import ResourceInformerFactory
from fleetshard.informers.guard import ArmingGuard
from fleetshard.informers.handler import ResourceEventHandler
from fleetshard.informers.informer import ResourceInformer
from fleetshard.utils.errors import not_found_error
from fleetshard.utils.helpers import meta_of, name_of, namespace_of

logger = logging.getLogger(__name__)


class StrimziDiscoveryWatcher(ResourceEventHandler):
    """Finds the namespace the Strimzi operators are installed in.

    Watching the Strimzi Deployments fleet wide is not reliable at first
    sight, but the ReplicaSets of the managed components (selected by their
    part-of label) are. The first such ReplicaSet leads to its owning
    Deployment; a Deployment watch scoped to that namespace is then armed
    exactly once and feeds the version registry from then on.
    """

    DEPLOYMENT_KIND = "Deployment"

    def __init__(
        self,
        factory: ResourceInformerFactory,
        deployment_handler: ResourceEventHandler,
        apps_v1_api: AppsV1Api = None,
    ) -> None:
        self.factory = factory
        self.deployment_handler = deployment_handler
        self.apps_v1_api = apps_v1_api or AppsV1Api(factory.api_client)
        self._guard = ArmingGuard()
        self._deployments_informer: Optional[ResourceInformer] = None

    @property
    def armed(self) -> bool:
        return self._guard.armed

    @property
    def deployments_informer(self) -> Optional[ResourceInformer]:
        return self._deployments_informer

    async def on_add(self, replica_set):
        logger.debug(
            f"Add event received for ReplicaSet {namespace_of(replica_set)}/{name_of(replica_set)}"
        )
        if self._guard.armed:
            return
        namespace = await self.resolve_namespace(replica_set)
        # resolving awaited, another event may have armed in the meantime
        if not self._guard.try_arm():
            return
        logger.info(f"Creating informer for Strimzi operator Deployments in {namespace} namespace")
        try:
            self._deployments_informer = self.factory.create(
                self.DEPLOYMENT_KIND,
                self.apps_v1_api.list_namespaced_deployment,
                self.deployment_handler,
                namespace=namespace,
            )
        except Exception:
            self._guard.disarm()
            raise

    async def on_update(self, old_replica_set, new_replica_set):
        # nothing to do
        pass

    async def on_delete(self, replica_set, deleted_final_state_unknown=False):
        # nothing to do
        pass

    async def resolve_namespace(self, replica_set: Dict[str, Any]) -> str:
        """Namespace of the Deployment owning `replica_set`.

        Owner references never cross namespaces, so the ReplicaSet's own
        namespace is used when the owner can't be read.
        """
        namespace = namespace_of(replica_set)
        owner = self.owner_deployment_name(replica_set)
        if owner is None:
            logger.warning(
                f"ReplicaSet {namespace}/{name_of(replica_set)} has no owning Deployment"
            )
            return namespace
        try:
            deployment = await self.apps_v1_api.read_namespaced_deployment(
                name=owner, namespace=namespace
            )
        except ApiException as ex:
            if not_found_error(ex):
                logger.warning(f"Deployment {namespace}/{owner} not found")
                return namespace
            raise
        return deployment.metadata.namespace or namespace

    @staticmethod
    def owner_deployment_name(replica_set: Dict[str, Any]) -> Optional[str]:
        owners = meta_of(replica_set).get("ownerReferences") or []
        for owner in owners:
            if owner.get("kind") == "Deployment":
                return owner.get("name")
        return owners[0].get("name") if owners else None
