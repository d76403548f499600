from typing import Any, Dict, Optional

from kubernetes_asyncio.client import ApiException, CustomObjectsApi
from kubernetes_asyncio.client.api_client import ApiClient

from fleetshard.utils.errors import not_found_error


class BaseResource:
    """Base resource model."""

    GROUP_NAME = "managedkafka.bf2.org"
    GROUP_VERSION = "v1alpha1"

    # defined by subclasses
    KIND = None
    PLURAL_NAME = None

    _name: str
    _namespace: str

    # k8s resources
    _api_client: ApiClient = None
    _custom_objects_api: CustomObjectsApi = None

    def __init__(
        self, name: str = None, namespace: str = None, api_client: ApiClient = None
    ):
        self._name = name
        self._namespace = namespace
        self._api_client = api_client

    @property
    def name(self) -> str:
        return self._name

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def custom_objects_api(self) -> CustomObjectsApi:
        if self._custom_objects_api is None:
            self._custom_objects_api = CustomObjectsApi(self._api_client)
        return self._custom_objects_api

    async def get_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
    ) -> Optional[Dict[str, Any]]:
        try:
            return await custom_objects_api.get_namespaced_custom_object(
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except ApiException as ex:
            if not_found_error(ex):
                return None
            raise

    async def patch_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
        body: Dict[str, Any],
    ):
        return await custom_objects_api.patch_namespaced_custom_object(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            name=name,
            body=body,
            _content_type="application/merge-patch+json",
        )

    async def replace_custom_object_status(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
        body: Dict[str, Any],
    ):
        return await custom_objects_api.replace_namespaced_custom_object_status(
            group=group,
            version=version,
            namespace=namespace,
            plural=plural,
            name=name,
            body=body,
        )
