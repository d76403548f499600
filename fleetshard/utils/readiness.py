from typing import Mapping


def is_deployment_ready(deployment: Mapping) -> bool:
    """A Deployment is ready once every desired replica is rolled out and available."""
    if not deployment:
        return False
    spec = deployment.get("spec") or {}
    status = deployment.get("status") or {}

    desired = spec.get("replicas")
    replicas = status.get("replicas")
    available = status.get("availableReplicas")
    if desired is None or replicas is None or available is None:
        return False
    return desired == replicas and desired <= available
