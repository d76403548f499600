import json
from typing import Any, Dict

import kopf
from kubernetes_asyncio.client import ApiException

#: Client errors worth retrying: timeout, stale resourceVersion, throttling
RETRYABLE_CLIENT_STATUSES = (408, 409, 429)

#: Delay kopf waits before retrying a handler after a transient API error
RETRY_DELAY_SECONDS = 30


def _status_body(ex: ApiException) -> Dict[str, Any]:
    """The `Status` object the API server sent back, if it parses."""
    try:
        body = json.loads(ex.body) if ex.body else {}
    except (json.JSONDecodeError, TypeError):
        return {}
    return body if isinstance(body, dict) else {}


def not_found_error(ex: Exception) -> bool:
    if not isinstance(ex, ApiException):
        return False
    return ex.status == 404 or str(_status_body(ex).get("reason", "")).lower() == "notfound"


def conflict_error(ex: Exception) -> bool:
    """Optimistic concurrency failure, the resourceVersion sent was stale."""
    if not isinstance(ex, ApiException):
        return False
    return ex.status == 409 or str(_status_body(ex).get("reason", "")).lower() == "conflict"


def convert_api_exception(ex: ApiException, permanent: bool = None):
    """Re-raise an API failure as the kopf error that gets it retried or not.

    Client errors other than `RETRYABLE_CLIENT_STATUSES` are permanent,
    everything else is retried after `RETRY_DELAY_SECONDS`. Pass `permanent`
    to force either way.
    """
    if not isinstance(ex, ApiException):
        raise ex

    message = f"Kubernetes API error ({ex.status}): {ex.reason}"
    details = _status_body(ex).get("message")
    if details:
        message = f"{message} - {details}"

    if permanent is None:
        permanent = 400 <= ex.status < 500 and ex.status not in RETRYABLE_CLIENT_STATUSES
    if permanent:
        raise kopf.PermanentError(message)
    raise kopf.TemporaryError(message, delay=RETRY_DELAY_SECONDS)
