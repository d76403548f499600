import asyncio
import logging
from typing import Any, Callable, List, Optional

from kubernetes_asyncio.client.api_client import ApiClient

from fleetshard.informers.handler import ResourceEventHandler
from fleetshard.informers.informer import ResourceInformer
from fleetshard.sensors.base import OperatorSensor
from fleetshard.types.settings import Settings

logger = logging.getLogger(__name__)


class ResourceInformerFactory:
    """Creates informers and runs each of them as an asyncio task."""

    def __init__(
        self,
        api_client: ApiClient,
        conf: Settings = None,
        sensor: Optional[OperatorSensor] = None,
    ) -> None:
        self.api_client = api_client
        self.conf = conf or Settings()
        self.sensor = sensor
        self._informers: List[ResourceInformer] = []
        self._tasks: List[asyncio.Task] = []

    @property
    def informers(self) -> List[ResourceInformer]:
        return list(self._informers)

    def create(
        self,
        kind: str,
        list_func: Callable,
        handler: ResourceEventHandler,
        **list_kwargs: Any,
    ) -> ResourceInformer:
        informer = ResourceInformer(
            kind,
            list_func,
            handler,
            api_client=self.api_client,
            watch_timeout_seconds=self.conf.informer_watch_timeout_seconds,
            retry_delay_seconds=self.conf.informer_retry_delay_seconds,
            **list_kwargs,
        )
        self._informers.append(informer)
        self._tasks.append(asyncio.create_task(informer.run(), name=repr(informer)))
        if self.sensor:
            self.sensor.on_informer_created(kind, list_kwargs.get("namespace"))
        logger.info(f"Created informer for {kind} {list_kwargs}")
        return informer

    async def stop_all(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        self._informers.clear()
