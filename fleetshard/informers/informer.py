import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from kubernetes_asyncio import watch
from kubernetes_asyncio.client import ApiException
from kubernetes_asyncio.client.api_client import ApiClient

from fleetshard.informers.handler import ResourceEventHandler
from fleetshard.utils.helpers import meta_of, resource_key

logger = logging.getLogger(__name__)

ADDED = "ADDED"
MODIFIED = "MODIFIED"
DELETED = "DELETED"
BOOKMARK = "BOOKMARK"
ERROR = "ERROR"


class ResourceInformer:
    """Local mirror of one resource collection plus its event stream.

    The collection is listed once (every item replayed to the handler as an
    add) and then watched from the listing's resourceVersion. When the server
    answers `410 Gone` the collection is listed again and the store is
    reconciled against it, so handlers see the adds, updates and deletes that
    happened while the watch was broken.
    """

    def __init__(
        self,
        kind: str,
        list_func: Callable,
        handler: ResourceEventHandler,
        api_client: ApiClient = None,
        watch_timeout_seconds: int = 300,
        retry_delay_seconds: float = 5.0,
        **list_kwargs: Any,
    ) -> None:
        self.kind = kind
        self.handler = handler
        self._list_func = list_func
        self._list_kwargs = list_kwargs
        self._api_client = api_client
        self._watch_timeout_seconds = watch_timeout_seconds
        self._retry_delay_seconds = retry_delay_seconds
        self._store: Dict[str, Dict[str, Any]] = {}
        self._resource_version: Optional[str] = None

    def __repr__(self) -> str:
        return f"ResourceInformer<{self.kind} {self._list_kwargs}>"

    @property
    def namespace(self) -> Optional[str]:
        return self._list_kwargs.get("namespace")

    def get(self, namespace: Optional[str], name: str) -> Optional[Dict[str, Any]]:
        return self._store.get(resource_key(namespace, name))

    def list(self) -> List[Dict[str, Any]]:
        return list(self._store.values())

    async def run(self) -> None:
        """List and watch until cancelled."""
        logger.info(f"Starting informer for {self.kind} {self._list_kwargs}")
        while True:
            try:
                if self._resource_version is None:
                    await self.relist()
                await self.watch()
            except asyncio.CancelledError:
                logger.info(f"Stopping informer for {self.kind}")
                raise
            except ApiException as ex:
                if ex.status == 410:
                    logger.info(f"Watch on {self.kind} expired, relisting")
                    self._resource_version = None
                    continue
                logger.error(f"Watch on {self.kind} failed ({ex.status}): {ex.reason}")
                await asyncio.sleep(self._retry_delay_seconds)
            except Exception as ex:
                logger.error(f"Watch on {self.kind} failed: {ex}")
                await asyncio.sleep(self._retry_delay_seconds)

    async def relist(self) -> None:
        result = self._to_dict(await self._list_func(**self._list_kwargs))
        await self.replace(result.get("items") or [])
        self._resource_version = (result.get("metadata") or {}).get("resourceVersion")

    async def watch(self) -> None:
        w = watch.Watch()
        try:
            async for event in w.stream(
                self._list_func,
                resource_version=self._resource_version,
                timeout_seconds=self._watch_timeout_seconds,
                allow_watch_bookmarks=True,
                **self._list_kwargs,
            ):
                await self.process_event(event)
        finally:
            w.stop()

    async def replace(self, items: List[Dict[str, Any]]) -> None:
        """Reconcile the store with a full listing."""
        listed = {}
        for item in items:
            item = self._to_dict(item)
            meta = meta_of(item)
            listed[resource_key(meta.get("namespace"), meta.get("name"))] = item

        previous, self._store = self._store, dict(listed)
        for key, obj in listed.items():
            old = previous.get(key)
            if old is None:
                await self._dispatch("on_add", obj)
            elif meta_of(old).get("resourceVersion") != meta_of(obj).get("resourceVersion"):
                await self._dispatch("on_update", old, obj)
        for key, obj in previous.items():
            if key not in listed:
                await self._dispatch("on_delete", obj, True)

    async def process_event(self, event: Dict[str, Any]) -> None:
        """Apply a single watch event to the store and notify the handler."""
        event_type = event.get("type")
        obj = event.get("raw_object")
        if obj is None:
            obj = self._to_dict(event.get("object"))

        if event_type == ERROR:
            code = (obj or {}).get("code")
            raise ApiException(status=code or 500, reason=(obj or {}).get("message"))

        meta = meta_of(obj)
        if meta.get("resourceVersion"):
            self._resource_version = meta["resourceVersion"]
        if event_type == BOOKMARK:
            return

        key = resource_key(meta.get("namespace"), meta.get("name"))
        if event_type in (ADDED, MODIFIED):
            old = self._store.get(key)
            self._store[key] = obj
            if old is None:
                await self._dispatch("on_add", obj)
            else:
                await self._dispatch("on_update", old, obj)
        elif event_type == DELETED:
            self._store.pop(key, None)
            await self._dispatch("on_delete", obj, False)
        else:
            logger.warning(f"Unknown {self.kind} watch event type {event_type}")

    async def _dispatch(self, hook: str, *args: Any) -> None:
        # a failing handler must not stop the stream
        try:
            await getattr(self.handler, hook)(*args)
        except Exception as ex:
            logger.error(
                f"{self.handler.__class__.__name__}.{hook} failed for {self.kind}: {ex}",
                exc_info=True,
            )

    def _to_dict(self, obj: Any) -> Dict[str, Any]:
        if obj is None or isinstance(obj, dict):
            return obj or {}
        if self._api_client is None:
            self._api_client = ApiClient()
        return self._api_client.sanitize_for_serialization(obj)
