import kopf
from logging import Logger

from fleetshard.common.models.labels import Labels
from fleetshard.managers.discovery import StrimziDiscoveryWatcher
from fleetshard.types.settings import MANAGED_COMPONENTS_PART_OF

SELECTOR = Labels.managed_components_selector(MANAGED_COMPONENTS_PART_OF)


@kopf.on.event("apps", "v1", "replicasets", labels=SELECTOR.as_dict())
async def on_replica_set_event(event, memo: kopf.Memo, logger: Logger, **kwargs):
    """Hand managed component ReplicaSet events to the discovery watcher."""
    watcher: StrimziDiscoveryWatcher = getattr(memo, "discovery", None)
    if watcher is None:
        logger.debug("Discovery watcher not initialized yet")
        return
    event_type, replica_set = event.get("type"), event.get("object") or {}
    # kopf reports the initial listing with no event type
    if event_type in (None, "ADDED"):
        await watcher.on_add(replica_set)
    elif event_type == "MODIFIED":
        await watcher.on_update(replica_set, replica_set)
    elif event_type == "DELETED":
        await watcher.on_delete(replica_set, False)
