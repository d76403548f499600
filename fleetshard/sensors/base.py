"""Base sensor classes for operator monitoring.

This module defines the base OperatorSensor class that provides lifecycle hooks
for monitoring the Strimzi version coordination. All hooks are no-ops by
default, allowing subclasses to override only the events they care about.

Hooks come in two flavours:
- Single events (a version observed, a watch created, a pause toggled)
- Start/complete pairs where the start hook returns an optional state dict
  that is handed back to the complete hook
"""

from typing import Dict, Optional, Any
import logging

logger = logging.getLogger(__name__)


class OperatorSensor:
    """Base sensor class for fleetshard operator monitoring.

    This class defines lifecycle hooks for three main categories:
    1. Strimzi version registry (versions observed/removed, status publication)
    2. Watches (informers created at runtime)
    3. Kafka handover (pause/unpause and version selector changes)

    All methods are no-ops by default. Subclasses override only the hooks
    they need to monitor.

    Example:
        class LoggingSensor(OperatorSensor):
            def on_strimzi_handover(self, name, namespace, from_version, to_version):
                logger.info(f"{namespace}/{name} moved to {to_version}")
    """

    # =============================================================================
    # Strimzi Version Registry Hooks
    # =============================================================================

    def on_strimzi_version_observed(self, version: str, ready: bool) -> None:
        """Called when a Strimzi operator Deployment is recorded.

        Args:
            version: Deployment name, doubles as the version identifier
            ready: Whether the Deployment is fully rolled out
        """
        pass

    def on_strimzi_version_removed(self, version: str) -> None:
        """Called when a Strimzi operator Deployment goes away.

        Args:
            version: Deployment name, doubles as the version identifier
        """
        pass

    def on_agent_status_update_start(
        self, namespace: str, name: str, versions: int
    ) -> Optional[Dict[str, Any]]:
        """Called before the installed versions are written to the agent status.

        Args:
            namespace: Namespace of the ManagedKafkaAgent
            name: Name of the ManagedKafkaAgent
            versions: Number of versions about to be published

        Returns:
            Optional state dict passed to on_agent_status_update_complete
        """
        pass

    def on_agent_status_update_complete(
        self,
        namespace: str,
        name: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Called after the agent status write finished or failed."""
        pass

    # =============================================================================
    # Watch Hooks
    # =============================================================================

    def on_informer_created(self, kind: str, namespace: Optional[str]) -> None:
        """Called when a watch is armed at runtime.

        Args:
            kind: Watched resource kind
            namespace: Namespace scope, None for cluster wide
        """
        pass

    # =============================================================================
    # Handover Hooks
    # =============================================================================

    def on_reconcile_pause_toggled(self, name: str, namespace: str, action: str) -> None:
        """Called when the pause annotations of a Kafka are changed.

        Args:
            name: Kafka name
            namespace: Kafka namespace
            action: One of ``pause``, ``unpause`` or ``clear_reason``
        """
        pass

    def on_strimzi_handover(
        self, name: str, namespace: str, from_version: str, to_version: str
    ) -> None:
        """Called when a Kafka selector label moves to another Strimzi version."""
        pass
