from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional


def now() -> str:
    return datetime.now(timezone.utc).isoformat()


def resource_key(namespace: Optional[str], name: str) -> str:
    """Cache key of a resource, `namespace/name` or just `name` if cluster scoped."""
    return f"{namespace}/{name}" if namespace else name


def meta_of(obj: Mapping) -> Mapping:
    return (obj or {}).get("metadata") or {}


def name_of(obj: Mapping) -> Optional[str]:
    return meta_of(obj).get("name")


def namespace_of(obj: Mapping) -> Optional[str]:
    return meta_of(obj).get("namespace")


def labels_of(obj: Mapping) -> Dict[str, str]:
    return dict(meta_of(obj).get("labels") or {})


def annotations_of(obj: Mapping) -> Dict[str, str]:
    return dict(meta_of(obj).get("annotations") or {})


def get_condition(conditions: Optional[List[Dict[str, Any]]], type_: str) -> Optional[Dict[str, Any]]:
    """Return the first condition of the given type, if any."""
    for condition in conditions or []:
        if condition.get("type") == type_:
            return condition
    return None


def is_condition_true(obj: Mapping, type_: str) -> bool:
    status = (obj or {}).get("status") or {}
    condition = get_condition(status.get("conditions"), type_)
    return condition is not None and str(condition.get("status")) == "True"


def metadata_patch(
    original: Mapping[str, str], desired: Mapping[str, str]
) -> Dict[str, Optional[str]]:
    """JSON merge patch turning `original` into `desired`.

    Removed keys map to None, which a merge patch interprets as delete.
    """
    patch: Dict[str, Optional[str]] = {}
    for key, value in desired.items():
        if original.get(key) != value:
            patch[key] = value
    for key in original:
        if key not in desired:
            patch[key] = None
    return patch
