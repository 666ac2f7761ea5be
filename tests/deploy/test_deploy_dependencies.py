"""Tests for lcp.deploy.dependencies module."""

import pytest

from lcp.adapters import SimulatedDeploymentProvider
from lcp.configure import DeployRequest, InitVersionRequest, VersionIdentifier
from lcp.core.errors import ConfigurationCode
from lcp.core.result import Ok
from lcp.core.settings import RollbackOrder, get_settings
from lcp.deploy import DeployDependencies
from lcp.domain.deployment import DeploymentStatus
from lcp.domain.models import DependencyConfiguration


def _deploy(storage, provider, identifier, *, rollback_order=None, custom_tags=None):
    use_case = DeployDependencies(storage, provider, rollback_order=rollback_order)
    return use_case.execute(DeployRequest(identifier, "dev", custom_tags or {}))


def _deployed_names(provider):
    """Dependency names the provider was asked to deploy, in call order."""
    return [call.target for call in provider.calls_for("deploy_dependency")]


class RecordingProvider(SimulatedDeploymentProvider):
    """Remembers the deployment id of every successful dependency deploy."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.deployment_ids: dict[str, str] = {}

    def deploy_dependency(self, *, dependency, environment, tags):
        result = super().deploy_dependency(dependency=dependency, environment=environment, tags=tags)
        if isinstance(result, Ok):
            self.deployment_ids[dependency.name] = result.value.deployment_id
        return result


@pytest.fixture
def three_dependencies(versions, seeded_application):
    identifier = VersionIdentifier("acme", "core", "billing", "2.0.0")
    deps = [
        DependencyConfiguration(type="database", name="postgres"),
        DependencyConfiguration(type="cache", name="redis"),
        DependencyConfiguration(type="queue", name="rabbitmq"),
    ]
    versions.init(InitVersionRequest(identifier, deps)).unwrap()
    return identifier


class TestSuccess:
    def test_deploys_in_declaration_order(self, storage, deployer, seeded_version, version_identifier):
        outcome = _deploy(storage, deployer, version_identifier).unwrap()

        assert _deployed_names(deployer) == ["postgres", "rabbitmq"]
        assert len(outcome.deployments) == 2
        assert outcome.deployment.status is DeploymentStatus.COMPLETED
        assert [(r.type, r.reference) for r in outcome.deployment.deployed_resources] == [
            ("database", "postgres"),
            ("queue", "rabbitmq"),
        ]
        assert deployer.calls_for("rollback_deployment") == []

    def test_tags_applied(self, storage, deployer, seeded_version, version_identifier):
        outcome = _deploy(storage, deployer, version_identifier, custom_tags={"cost-center": "42"}).unwrap()
        tags = outcome.deployments[0].applied_tags
        assert tags["lc:application"] == "billing"
        assert tags["lc:environment"] == "dev"
        assert tags["cost-center"] == "42"

    def test_no_dependencies(self, storage, deployer, versions, seeded_application):
        identifier = VersionIdentifier("acme", "core", "billing", "0.1.0")
        versions.init(InitVersionRequest(identifier)).unwrap()
        outcome = _deploy(storage, deployer, identifier).unwrap()
        assert outcome.deployments == []
        assert outcome.deployment.status is DeploymentStatus.COMPLETED


class TestRollback:
    def test_second_dependency_fails(self, storage, seeded_version, version_identifier):
        """postgres deploys, rabbitmq fails: exactly postgres is rolled back."""
        provider = RecordingProvider(fail_dependencies={"rabbitmq"})
        result = _deploy(storage, provider, version_identifier)

        assert result.error.code is ConfigurationCode.VALIDATION_FAILED
        assert result.error.context.environment == "dev"
        assert result.error.context.version == "1.0.0"
        rollbacks = provider.calls_for("rollback_deployment")
        assert [call.target for call in rollbacks] == [provider.deployment_ids["postgres"]]

    def test_first_dependency_fails_nothing_to_undo(self, storage, seeded_version, version_identifier):
        provider = SimulatedDeploymentProvider(fail_dependencies={"postgres"})
        result = _deploy(storage, provider, version_identifier)

        assert result.is_err()
        assert _deployed_names(provider) == ["postgres"]
        assert provider.calls_for("rollback_deployment") == []

    def test_reverse_order(self, storage, three_dependencies):
        provider = RecordingProvider(fail_dependencies={"rabbitmq"})
        _deploy(storage, provider, three_dependencies, rollback_order=RollbackOrder.REVERSE)

        ids = provider.deployment_ids
        assert [c.target for c in provider.calls_for("rollback_deployment")] == [ids["redis"], ids["postgres"]]

    def test_forward_order(self, storage, three_dependencies):
        provider = RecordingProvider(fail_dependencies={"rabbitmq"})
        _deploy(storage, provider, three_dependencies, rollback_order=RollbackOrder.FORWARD)

        ids = provider.deployment_ids
        assert [c.target for c in provider.calls_for("rollback_deployment")] == [ids["postgres"], ids["redis"]]

    def test_order_from_settings(self, monkeypatch, storage, three_dependencies):
        monkeypatch.setenv("LCP_ROLLBACK_ORDER", "forward")
        get_settings.cache_clear()
        provider = RecordingProvider(fail_dependencies={"rabbitmq"})
        _deploy(storage, provider, three_dependencies)

        ids = provider.deployment_ids
        assert [c.target for c in provider.calls_for("rollback_deployment")] == [ids["postgres"], ids["redis"]]

    def test_rollback_failures_are_reported(self, storage, three_dependencies):
        """Every rollback is attempted even when earlier ones fail."""
        provider = RecordingProvider(fail_dependencies={"rabbitmq"}, fail_rollbacks=True)
        result = _deploy(storage, provider, three_dependencies)

        assert len(provider.calls_for("rollback_deployment")) == 2
        failures = result.error.context.metadata["rollback_failures"]
        assert {f["deployment_id"] for f in failures} == set(provider.deployment_ids.values())

    def test_raising_provider(self, storage, seeded_version, version_identifier):
        class ExplodingProvider(SimulatedDeploymentProvider):
            def deploy_dependency(self, *, dependency, environment, tags):
                if dependency.name == "rabbitmq":
                    raise TimeoutError("provider timed out")
                return super().deploy_dependency(dependency=dependency, environment=environment, tags=tags)

        provider = ExplodingProvider()
        result = _deploy(storage, provider, version_identifier)

        assert result.error.code is ConfigurationCode.VALIDATION_FAILED
        assert isinstance(result.error.cause, TimeoutError)
        assert len(provider.calls_for("rollback_deployment")) == 1


class TestPreconditions:
    def test_missing_version(self, storage, deployer, seeded_application, version_identifier):
        result = _deploy(storage, deployer, version_identifier)
        assert result.error.code is ConfigurationCode.NOT_FOUND
        assert deployer.calls == []

    def test_reserved_custom_tag(self, storage, deployer, seeded_version, version_identifier):
        result = _deploy(storage, deployer, version_identifier, custom_tags={"lc:team": "other"})
        assert result.error.code is ConfigurationCode.VALIDATION_FAILED
        assert deployer.calls == []
