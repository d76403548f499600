import logging
import threading
from typing import Dict, List, Tuple

from fleetshard.types.models import StrimziVersionStatus
from fleetshard.types.schemas import StrimziVersionStatusSchema

logger = logging.getLogger(__name__)


class StrimziVersionRegistry:
    """Installed Strimzi operator versions and their readiness.

    One instance lives for the whole operator process. It is never persisted:
    after a restart the Deployment watch replays its initial listing and
    rebuilds it. Keys are Deployment names, which double as version
    identifiers. Writes are last-write-wins per key, nothing spans keys.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._versions: Dict[str, bool] = {}

    def record_observed(self, version: str, ready: bool) -> None:
        with self._lock:
            self._versions[version] = ready

    def record_removed(self, version: str) -> None:
        """Forget a version; unknown versions are ignored."""
        with self._lock:
            self._versions.pop(version, None)

    def snapshot(self) -> Tuple[StrimziVersionStatus, ...]:
        """Point-in-time copy, safe to iterate any number of times."""
        with self._lock:
            items = list(self._versions.items())
        return tuple(StrimziVersionStatus(version=v, ready=r) for v, r in items)

    def versions(self) -> List[Dict[str, object]]:
        """Snapshot serialized the way the ManagedKafkaAgent status carries it."""
        versions = StrimziVersionStatusSchema(many=True).dump(self.snapshot())
        logger.debug(f"Strimzi versions {versions}")
        return versions

    def clear(self) -> None:
        with self._lock:
            self._versions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._versions)
