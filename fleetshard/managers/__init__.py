from .versions import StrimziVersionRegistry
from .status import AgentStatusPublisher
from .deployments import StrimziDeploymentEventHandler
from .discovery import StrimziDiscoveryWatcher
from .strimzi import StrimziManager

__all__ = [
    "StrimziVersionRegistry",
    "AgentStatusPublisher",
    "StrimziDeploymentEventHandler",
    "StrimziDiscoveryWatcher",
    "StrimziManager",
]
