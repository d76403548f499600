import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class ResourceEventHandler:
    """Callbacks for one watched resource kind.

    Objects are plain dicts as served by the API. Subclasses override the
    callbacks they need; the defaults do nothing.
    """

    async def on_add(self, obj: Dict[str, Any]) -> None:
        pass

    async def on_update(self, old: Dict[str, Any], new: Dict[str, Any]) -> None:
        pass

    async def on_delete(
        self, obj: Dict[str, Any], deleted_final_state_unknown: bool = False
    ) -> None:
        pass


class LoggingEventHandler(ResourceEventHandler):
    """Handler for watches that only feed the local cache."""

    def __init__(self, kind: str) -> None:
        self.kind = kind

    async def on_add(self, obj):
        meta = obj.get("metadata", {})
        logger.debug(f"Add event received for {self.kind} {meta.get('namespace')}/{meta.get('name')}")

    async def on_update(self, old, new):
        meta = new.get("metadata", {})
        logger.debug(f"Update event received for {self.kind} {meta.get('namespace')}/{meta.get('name')}")

    async def on_delete(self, obj, deleted_final_state_unknown=False):
        meta = obj.get("metadata", {})
        logger.debug(f"Delete event received for {self.kind} {meta.get('namespace')}/{meta.get('name')}")
