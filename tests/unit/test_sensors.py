"""Unit tests for the sensor fan-out and the Prometheus backend."""

import pytest
from unittest.mock import Mock
from prometheus_client import CollectorRegistry

from fleetshard.sensors.base import OperatorSensor
from fleetshard.sensors.delegate import SensorDelegate
from fleetshard.sensors.prometheus import PrometheusMonitor

V23 = "strimzi-cluster-operator.v0.23.0"


@pytest.fixture
def metrics():
    registry = CollectorRegistry()
    return registry, PrometheusMonitor(registry=registry)


class TestPrometheusMonitor:

    def test_strimzi_versions(self, metrics):
        registry, monitor = metrics
        monitor.on_strimzi_version_observed(V23, True)
        monitor.on_strimzi_version_observed("strimzi-cluster-operator.v0.22.1", False)

        assert registry.get_sample_value("fleetshard_strimzi_version_ready", {"version": V23}) == 1
        assert registry.get_sample_value("fleetshard_strimzi_versions_installed") == 2

        monitor.on_strimzi_version_removed(V23)
        assert registry.get_sample_value("fleetshard_strimzi_version_ready", {"version": V23}) is None
        assert registry.get_sample_value("fleetshard_strimzi_versions_installed") == 1

    def test_removing_unknown_version(self, metrics):
        registry, monitor = metrics
        monitor.on_strimzi_version_removed(V23)
        assert registry.get_sample_value("fleetshard_strimzi_versions_installed") == 0

    def test_agent_status_updates(self, metrics):
        registry, monitor = metrics
        state = monitor.on_agent_status_update_start("kas", "managed-agent", 2)
        monitor.on_agent_status_update_complete("kas", "managed-agent", state, True)
        monitor.on_agent_status_update_complete("kas", "managed-agent", None, False, Exception())

        assert registry.get_sample_value("fleetshard_agent_status_updates_total", {"result": "success"}) == 1
        assert registry.get_sample_value("fleetshard_agent_status_updates_total", {"result": "failure"}) == 1
        assert (
            registry.get_sample_value(
                "fleetshard_agent_status_update_duration_seconds_count", {"result": "success"}
            )
            == 1
        )

    def test_handover_counters(self, metrics):
        registry, monitor = metrics
        monitor.on_informer_created("Kafka", None)
        monitor.on_reconcile_pause_toggled("my-kafka", "ns", "pause")
        monitor.on_strimzi_handover("my-kafka", "ns", "0.21.1", "0.23.0")

        assert registry.get_sample_value(
            "fleetshard_informers_created_total", {"kind": "Kafka", "namespace": ""}
        ) == 1
        assert registry.get_sample_value("fleetshard_reconcile_pause_total", {"action": "pause"}) == 1
        assert registry.get_sample_value(
            "fleetshard_strimzi_handover_total", {"from_version": "0.21.1", "to_version": "0.23.0"}
        ) == 1


class TestSensorDelegate:

    def test_fans_out_to_all_sensors(self):
        first, second = Mock(spec=OperatorSensor), Mock(spec=OperatorSensor)
        delegate = SensorDelegate()
        delegate.add(first)
        delegate.add(second)

        delegate.on_strimzi_handover("my-kafka", "ns", "0.21.1", "0.23.0")

        first.on_strimzi_handover.assert_called_once_with("my-kafka", "ns", "0.21.1", "0.23.0")
        second.on_strimzi_handover.assert_called_once_with("my-kafka", "ns", "0.21.1", "0.23.0")

    def test_failing_sensor_is_isolated(self):
        failing, working = Mock(spec=OperatorSensor), Mock(spec=OperatorSensor)
        failing.on_strimzi_version_observed.side_effect = RuntimeError("boom")
        delegate = SensorDelegate()
        delegate.add(failing)
        delegate.add(working)

        delegate.on_strimzi_version_observed(V23, True)

        working.on_strimzi_version_observed.assert_called_once_with(V23, True)

    def test_state_is_routed_back_per_sensor(self):
        sensor = Mock(spec=OperatorSensor)
        sensor.on_agent_status_update_start.return_value = {"start_time": 1}
        delegate = SensorDelegate()
        delegate.add(sensor)

        state = delegate.on_agent_status_update_start("kas", "managed-agent", 1)
        delegate.on_agent_status_update_complete("kas", "managed-agent", state, True)

        sensor.on_agent_status_update_complete.assert_called_once_with(
            "kas", "managed-agent", {"start_time": 1}, True, None
        )

    def test_no_sensors(self):
        delegate = SensorDelegate()
        assert delegate.on_agent_status_update_start("kas", "managed-agent", 1) is None
        delegate.remove(Mock())
        delegate.clear()
