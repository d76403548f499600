import random

import pytest
from unittest.mock import AsyncMock, Mock

from builders import make_deployment
from fleetshard.informers.informer import ResourceInformer
from fleetshard.managers.deployments import StrimziDeploymentEventHandler
from fleetshard.managers.status import AgentStatusPublisher
from fleetshard.managers.versions import StrimziVersionRegistry
from fleetshard.sensors.base import OperatorSensor

V21 = "strimzi-cluster-operator.v0.21.1"
V22 = "strimzi-cluster-operator.v0.22.1"
V23 = "strimzi-cluster-operator.v0.23.0"


@pytest.fixture
def registry():
    return StrimziVersionRegistry()


@pytest.fixture
def publisher():
    publisher = Mock(spec=AgentStatusPublisher)
    publisher.publish = AsyncMock()
    return publisher


@pytest.fixture
def sensor():
    return Mock(spec=OperatorSensor)


@pytest.fixture
def handler(registry, publisher, sensor):
    return StrimziDeploymentEventHandler(registry, publisher, sensor=sensor)


def as_dict(registry):
    return {v.version: v.ready for v in registry.snapshot()}


class TestStrimziDeploymentEventHandler:

    @pytest.mark.asyncio
    async def test_add_records_version_and_publishes(self, handler, registry, publisher, sensor):
        await handler.on_add(make_deployment(V23))

        assert as_dict(registry) == {V23: True}
        publisher.publish.assert_awaited_once()
        sensor.on_strimzi_version_observed.assert_called_once_with(V23, True)

    @pytest.mark.asyncio
    async def test_add_not_ready_deployment(self, handler, registry):
        await handler.on_add(make_deployment(V23, replicas=1, ready_replicas=0))
        await handler.on_add(make_deployment(V22, ready_replicas=None))

        assert as_dict(registry) == {V23: False, V22: False}

    @pytest.mark.asyncio
    async def test_other_deployments_are_ignored(self, handler, registry, publisher):
        drain_cleaner = make_deployment("strimzi-drain-cleaner")
        await handler.on_add(drain_cleaner)
        await handler.on_update(drain_cleaner, drain_cleaner)
        await handler.on_delete(drain_cleaner)

        assert len(registry) == 0
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_only_acts_on_readiness_change(self, handler, registry, publisher):
        not_ready = make_deployment(V23, ready_replicas=0, resource_version="1")
        ready = make_deployment(V23, resource_version="2")
        ready_again = make_deployment(V23, resource_version="3")

        await handler.on_add(not_ready)
        await handler.on_update(not_ready, ready)
        await handler.on_update(ready, ready_again)

        assert as_dict(registry) == {V23: True}
        assert publisher.publish.await_count == 2

    @pytest.mark.asyncio
    async def test_update_to_not_ready(self, handler, registry, publisher):
        ready = make_deployment(V23)
        rolling = make_deployment(V23, replicas=2, ready_replicas=1, resource_version="2")

        await handler.on_add(ready)
        await handler.on_update(ready, rolling)

        assert as_dict(registry) == {V23: False}
        assert publisher.publish.await_count == 2

    @pytest.mark.asyncio
    async def test_delete_removes_version(self, handler, registry, publisher, sensor):
        await handler.on_add(make_deployment(V21))
        await handler.on_add(make_deployment(V23))
        await handler.on_delete(make_deployment(V21), deleted_final_state_unknown=True)

        assert as_dict(registry) == {V23: True}
        assert publisher.publish.await_count == 3
        sensor.on_strimzi_version_removed.assert_called_once_with(V21)

    @pytest.mark.asyncio
    async def test_delete_unknown_version_still_publishes(self, handler, registry, publisher):
        await handler.on_delete(make_deployment(V21))

        assert len(registry) == 0
        publisher.publish.assert_awaited_once()

    def test_custom_prefix(self, registry, publisher):
        handler = StrimziDeploymentEventHandler(registry, publisher, prefix="my-strimzi")
        assert handler.is_strimzi_deployment(make_deployment("my-strimzi-0.23.0"))
        assert not handler.is_strimzi_deployment(make_deployment(V23))
        assert not handler.is_strimzi_deployment({"metadata": {}})


class TestWatchReplay:
    """The registry mirrors whatever the Deployment watch delivered last."""

    @staticmethod
    def random_events(rng, count):
        names = [V21, V22, V23, "strimzi-drain-cleaner"]
        events = []
        for rv in range(1, count + 1):
            name = rng.choice(names)
            if rng.random() < 0.25:
                events.append({"type": "DELETED", "raw_object": make_deployment(name, resource_version=str(rv))})
            else:
                ready = rng.random() < 0.5
                events.append(
                    {
                        "type": rng.choice(["ADDED", "MODIFIED"]),
                        "raw_object": make_deployment(
                            name, ready_replicas=1 if ready else 0, resource_version=str(rv)
                        ),
                    }
                )
        return events

    @staticmethod
    def expected_state(events):
        expected = {}
        for event in events:
            obj = event["raw_object"]
            name = obj["metadata"]["name"]
            if not name.startswith("strimzi-cluster-operator"):
                continue
            if event["type"] == "DELETED":
                expected.pop(name, None)
            else:
                expected[name] = obj["status"]["availableReplicas"] >= 1
        return expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(20))
    async def test_registry_matches_last_event_per_deployment(self, seed, publisher):
        rng = random.Random(seed)
        registry = StrimziVersionRegistry()
        handler = StrimziDeploymentEventHandler(registry, publisher)
        informer = ResourceInformer("Deployment", Mock(), handler, namespace="redhat-managed-kafka-operator")

        events = self.random_events(rng, 50)
        for event in events:
            await informer.process_event(event)

        assert as_dict(registry) == self.expected_state(events)

    @pytest.mark.asyncio
    async def test_relist_reconciles_missed_events(self, registry, publisher):
        handler = StrimziDeploymentEventHandler(registry, publisher)
        informer = ResourceInformer("Deployment", Mock(), handler, namespace="redhat-managed-kafka-operator")

        await informer.replace(
            [make_deployment(V21), make_deployment(V22, ready_replicas=0)]
        )
        assert as_dict(registry) == {V21: True, V22: False}

        # V21 went away, V22 turned ready and V23 appeared while the watch was down
        await informer.replace(
            [make_deployment(V22, resource_version="5"), make_deployment(V23, resource_version="6")]
        )
        assert as_dict(registry) == {V22: True, V23: True}

    @pytest.mark.asyncio
    async def test_restart_replay_matches_published_status(self, registry, publisher):
        live = {}
        handler = StrimziDeploymentEventHandler(registry, publisher)
        informer = ResourceInformer("Deployment", Mock(), handler)
        for event in self.random_events(random.Random(7), 40):
            await informer.process_event(event)
            obj = event["raw_object"]
            if event["type"] == "DELETED":
                live.pop(obj["metadata"]["name"], None)
            else:
                live[obj["metadata"]["name"]] = obj
        published = registry.versions()

        # a restarted process only sees the initial listing
        rebuilt = StrimziVersionRegistry()
        replay = ResourceInformer("Deployment", Mock(), StrimziDeploymentEventHandler(rebuilt, publisher))
        await replay.replace(list(live.values()))

        assert {(v["version"], v["ready"]) for v in rebuilt.versions()} == {
            (v["version"], v["ready"]) for v in published
        }
