"""Unit tests for the resource helpers, readiness checks and settings."""

import json

import kopf
import pytest
from kubernetes_asyncio.client import ApiException

from builders import make_deployment
from fleetshard.common.models.labels import Labels
from fleetshard.types import settings
from fleetshard.types.settings import Settings
from fleetshard.utils.errors import conflict_error, convert_api_exception, not_found_error
from fleetshard.utils.helpers import is_condition_true, metadata_patch, resource_key
from fleetshard.utils.readiness import is_deployment_ready


class TestDeploymentReadiness:

    def test_ready(self):
        assert is_deployment_ready(make_deployment("d", replicas=3, ready_replicas=3))

    def test_more_available_than_desired(self):
        deployment = make_deployment("d", replicas=1, ready_replicas=2)
        assert is_deployment_ready(deployment)

    def test_not_available(self):
        assert not is_deployment_ready(make_deployment("d", replicas=3, ready_replicas=2))

    def test_rolling_out(self):
        deployment = make_deployment("d", replicas=1)
        deployment["status"]["replicas"] = 2
        assert not is_deployment_ready(deployment)

    def test_no_status(self):
        assert not is_deployment_ready(make_deployment("d", ready_replicas=None))
        assert not is_deployment_ready(None)

    def test_scaled_to_zero(self):
        deployment = make_deployment("d", replicas=0, ready_replicas=0)
        assert is_deployment_ready(deployment)


class TestHelpers:

    def test_resource_key(self):
        assert resource_key("ns", "name") == "ns/name"
        assert resource_key(None, "name") == "name"

    def test_condition(self):
        obj = {"status": {"conditions": [{"type": "Ready", "status": "False"}, {"type": "Warning", "status": "True"}]}}
        assert not is_condition_true(obj, "Ready")
        assert is_condition_true(obj, "Warning")
        assert not is_condition_true(obj, "ReconciliationPaused")
        assert not is_condition_true({}, "Ready")

    def test_metadata_patch(self):
        original = {"keep": "1", "change": "a", "drop": "x"}
        desired = {"keep": "1", "change": "b", "add": "y"}
        assert metadata_patch(original, desired) == {"change": "b", "add": "y", "drop": None}
        assert metadata_patch(original, dict(original)) == {}


class TestLabels:

    def test_managed_components_selector(self):
        selector = Labels.managed_components_selector("managed-kafka")
        assert selector.as_dict() == {"app.kubernetes.io/part-of": "managed-kafka"}
        assert str(selector) == "Labels<{'app.kubernetes.io/part-of': 'managed-kafka'}>"

    def test_only_selector_helpers_remain(self):
        for name in ("get", "as_str", "contains", "empty", "KUBERNETES_MANAGED_BY_LABEL"):
            assert not hasattr(Labels, name)


class TestErrors:

    def test_not_found(self):
        assert not_found_error(ApiException(status=404))
        assert not not_found_error(ValueError())

    def test_conflict(self):
        ex = ApiException(status=409)
        ex.body = json.dumps({"reason": "Conflict"})
        assert conflict_error(ex)

    @pytest.mark.parametrize("status", [408, 409, 429, 500, 503])
    def test_retryable(self, status):
        with pytest.raises(kopf.TemporaryError):
            convert_api_exception(ApiException(status=status, reason="x"))

    @pytest.mark.parametrize("status", [400, 403, 404, 422])
    def test_permanent(self, status):
        with pytest.raises(kopf.PermanentError):
            convert_api_exception(ApiException(status=status, reason="x"))

    def test_message_from_body(self):
        ex = ApiException(status=422, reason="Unprocessable Entity")
        ex.body = json.dumps({"message": "metadata.labels: Invalid value"})
        with pytest.raises(kopf.PermanentError, match="Invalid value"):
            convert_api_exception(ex)


class TestSettings:

    def test_defaults(self):
        conf = Settings()
        assert conf.strimzi_version_label == "managedkafka.bf2.org/strimziVersion"
        assert conf.strimzi_deployment_prefix == "strimzi-cluster-operator"
        assert conf.agent_resource_name == "managed-agent"

    def test_overrides(self):
        conf = Settings(operator_namespace="kas", metrics_port=9090)
        assert conf.operator_namespace == "kas"
        assert conf.metrics_port == 9090

    def test_import_time_values_are_module_constants(self):
        conf = Settings(managed_components_part_of="other", reconcile_interval_seconds=1.0)
        assert not hasattr(conf, "managed_components_part_of")
        assert not hasattr(conf, "reconcile_interval_seconds")
        assert settings.MANAGED_COMPONENTS_PART_OF == "managed-kafka"
        assert settings.RECONCILE_INTERVAL_SECONDS == 30.0
