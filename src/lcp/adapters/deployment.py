"""
Simulated deployment provider.

Reports every deployment as completed without provisioning anything. Each
call is recorded on :attr:`SimulatedDeploymentProvider.calls` so callers
(the CLI's dry runs, tests) can see exactly what orchestration asked for and
in which order.

Failures can be injected per dependency name, for the application deploy,
or for rollbacks, which makes the rollback path reproducible without a real
backend::

    provider = SimulatedDeploymentProvider(fail_dependencies={"rabbitmq"})
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from lcp.core.errors import DeploymentCode, DeploymentError
from lcp.core.logging import get_logger
from lcp.core.result import Err, Ok, Result
from lcp.core.timestamps import utc_now
from lcp.domain.models import DependencyConfiguration, DeploymentResult, PolicyDocument

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderCall:
    """One recorded provider invocation."""

    operation: str  # deploy_dependency | deploy_application | rollback_deployment
    target: str
    details: dict[str, Any] = field(default_factory=dict)


class SimulatedDeploymentProvider:
    """:class:`~lcp.protocols.DeploymentProvider` that only records what it is asked to do."""

    def __init__(
        self,
        *,
        fail_dependencies: Iterable[str] = (),
        fail_application: bool = False,
        fail_rollbacks: bool = False,
        dependency_duration_ms: int = 500,
        application_duration_ms: int = 1000,
    ):
        self.fail_dependencies = set(fail_dependencies)
        self.fail_application = fail_application
        self.fail_rollbacks = fail_rollbacks
        self.dependency_duration_ms = dependency_duration_ms
        self.application_duration_ms = application_duration_ms
        self.calls: list[ProviderCall] = []

    def _result(self, duration_ms: int, tags: Mapping[str, str]) -> DeploymentResult:
        started = utc_now()
        return DeploymentResult(
            deployment_id=str(uuid.uuid4()),
            status="completed",
            started_at=started,
            completed_at=started + timedelta(milliseconds=duration_ms),
            duration_ms=duration_ms,
            applied_tags=dict(tags),
        )

    def deploy_dependency(
        self,
        *,
        dependency: DependencyConfiguration,
        environment: str,
        tags: Mapping[str, str],
    ) -> Result[DeploymentResult]:
        self.calls.append(
            ProviderCall("deploy_dependency", dependency.name, {"type": dependency.type, "environment": environment})
        )
        if dependency.name in self.fail_dependencies:
            return Err(
                DeploymentError(
                    DeploymentCode.DEPLOYMENT_FAILED,
                    f"Simulated failure deploying {dependency.type}/{dependency.name}",
                ).with_context(environment=environment)
            )
        result = self._result(self.dependency_duration_ms, tags)
        logger.debug("simulated.dependency_deployed", name=dependency.name, deployment_id=result.deployment_id)
        return Ok(result)

    def deploy_application(
        self,
        *,
        artifact_path: str,
        policy_document: PolicyDocument,
        environment: str,
        tags: Mapping[str, str],
    ) -> Result[DeploymentResult]:
        self.calls.append(
            ProviderCall(
                "deploy_application",
                artifact_path,
                {"environment": environment, "statements": len(policy_document.statements)},
            )
        )
        if self.fail_application:
            return Err(
                DeploymentError(DeploymentCode.DEPLOYMENT_FAILED, "Simulated application deployment failure")
                .with_context(environment=environment)
            )
        return Ok(self._result(self.application_duration_ms, tags))

    def rollback_deployment(self, deployment_id: str) -> Result[None]:
        self.calls.append(ProviderCall("rollback_deployment", deployment_id))
        if self.fail_rollbacks:
            return Err(DeploymentError(DeploymentCode.ROLLBACK_FAILED, f"Simulated rollback failure for {deployment_id}"))
        return Ok(None)

    def calls_for(self, operation: str) -> list[ProviderCall]:
        return [call for call in self.calls if call.operation == operation]


__all__ = ["ProviderCall", "SimulatedDeploymentProvider"]
