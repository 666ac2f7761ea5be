"""Tests for lcp.adapters.deployment module."""

from lcp.adapters.deployment import SimulatedDeploymentProvider
from lcp.core.errors import DeploymentCode
from lcp.domain.models import DependencyConfiguration, PolicyDocument
from lcp.protocols import DeploymentProvider

POSTGRES = DependencyConfiguration(type="database", name="postgres")
TAGS = {"lc:environment": "dev"}


class TestSimulatedDeploymentProvider:
    def test_satisfies_protocol(self):
        assert isinstance(SimulatedDeploymentProvider(), DeploymentProvider)

    def test_dependency_success(self):
        provider = SimulatedDeploymentProvider(dependency_duration_ms=250)
        result = provider.deploy_dependency(dependency=POSTGRES, environment="dev", tags=TAGS).unwrap()
        assert result.status == "completed"
        assert result.duration_ms == 250
        assert result.applied_tags == TAGS
        assert [call.target for call in provider.calls_for("deploy_dependency")] == ["postgres"]

    def test_injected_dependency_failure(self):
        provider = SimulatedDeploymentProvider(fail_dependencies={"postgres"})
        result = provider.deploy_dependency(dependency=POSTGRES, environment="dev", tags=TAGS)
        assert result.error.code is DeploymentCode.DEPLOYMENT_FAILED

    def test_application(self):
        provider = SimulatedDeploymentProvider()
        doc = PolicyDocument(version="2012-10-17")
        result = provider.deploy_application(artifact_path="a", policy_document=doc, environment="dev", tags=TAGS)
        assert result.is_ok()
        assert provider.calls[0].operation == "deploy_application"

    def test_rollback_failure(self):
        provider = SimulatedDeploymentProvider(fail_rollbacks=True)
        assert provider.rollback_deployment("d-1").error.code is DeploymentCode.ROLLBACK_FAILED
        assert provider.calls_for("rollback_deployment")[0].target == "d-1"
