"""Sensor delegation for fan-out pattern.

SensorDelegate routes sensor events to multiple monitoring backends. Each
backend receives the same events and keeps independent state. A failing
backend is logged and never breaks the caller.
"""

from typing import Set, Dict, Optional, Any
import logging

from fleetshard.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class SensorDelegate(OperatorSensor):
    """Delegate sensor that fans out events to multiple backends.

    Example:
        delegate = SensorDelegate()
        delegate.add(PrometheusMonitor())
        delegate.on_strimzi_version_observed("strimzi-cluster-operator.v0.23.0", True)
    """

    def __init__(self) -> None:
        self._sensors: Set[OperatorSensor] = set()

    def add(self, sensor: OperatorSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def remove(self, sensor: OperatorSensor) -> None:
        logger.info(f"Removing sensor: {sensor.__class__.__name__}")
        self._sensors.discard(sensor)

    def clear(self) -> None:
        logger.info(f"Clearing {len(self._sensors)} sensors")
        self._sensors.clear()

    def _fan_out(self, hook: str, *args, **kwargs) -> None:
        for sensor in self._sensors:
            try:
                getattr(sensor, hook)(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )

    def on_strimzi_version_observed(self, version: str, ready: bool) -> None:
        self._fan_out("on_strimzi_version_observed", version, ready)

    def on_strimzi_version_removed(self, version: str) -> None:
        self._fan_out("on_strimzi_version_removed", version)

    def on_agent_status_update_start(
        self, namespace: str, name: str, versions: int
    ) -> Optional[Dict[OperatorSensor, Any]]:
        """Delegate agent_status_update_start to all sensors.

        Returns:
            Dict mapping each sensor to its returned state, or None if no sensors
        """
        if not self._sensors:
            return None

        states = {}
        for sensor in self._sensors:
            try:
                state = sensor.on_agent_status_update_start(namespace, name, versions)
                if state is not None:
                    states[sensor] = state
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_agent_status_update_start: {e}",
                    exc_info=True,
                )

        return states if states else None

    def on_agent_status_update_complete(
        self,
        namespace: str,
        name: str,
        state: Optional[Dict[OperatorSensor, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Delegate agent_status_update_complete to all sensors with their specific state."""
        for sensor in self._sensors:
            try:
                sensor_state = state.get(sensor) if state else None
                sensor.on_agent_status_update_complete(
                    namespace, name, sensor_state, success, error
                )
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_agent_status_update_complete: {e}",
                    exc_info=True,
                )

    def on_informer_created(self, kind: str, namespace: Optional[str]) -> None:
        self._fan_out("on_informer_created", kind, namespace)

    def on_reconcile_pause_toggled(self, name: str, namespace: str, action: str) -> None:
        self._fan_out("on_reconcile_pause_toggled", name, namespace, action)

    def on_strimzi_handover(
        self, name: str, namespace: str, from_version: str, to_version: str
    ) -> None:
        self._fan_out("on_strimzi_handover", name, namespace, from_version, to_version)
