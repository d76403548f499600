"""Fleetshard Operator Sensor Framework.

Hook based instrumentation of the Strimzi version coordination.

Key components:
- OperatorSensor: Base class defining lifecycle hooks
- SensorDelegate: Fan-out to multiple sensor backends
- PrometheusMonitor: Prometheus metrics exporter

Usage:
    from fleetshard.sensors import SensorDelegate, PrometheusMonitor

    delegate = SensorDelegate()
    delegate.add(PrometheusMonitor())
"""

from fleetshard.sensors.base import OperatorSensor
from fleetshard.sensors.delegate import SensorDelegate
from fleetshard.sensors.prometheus import PrometheusMonitor
from fleetshard.sensors.server import init_metrics_server

__all__ = [
    'OperatorSensor',
    'SensorDelegate',
    'PrometheusMonitor',
    'init_metrics_server',
]
