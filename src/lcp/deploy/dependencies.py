"""
Dependency deployment with compensating rollback.

Deploys every dependency a version declares, one at a time and in
declaration order, tagging each with the version's resource tags.

Manifesto:
    A version's dependencies are deployed as a unit. Either all of them
    come up, or every one that did come up is rolled back and the caller
    gets a single ``VALIDATION_FAILED`` describing the first failure.

Architecture:
    ::

        execute(request)
          │
          ├─ read version            (NOT_FOUND / INVALID_FORMAT pass through)
          ├─ build + merge tags      (VALIDATION_FAILED, nothing deployed)
          │
          ├─ phase 1: deploy         sequential, stop at first failure
          │     └─ record each success on the Deployment aggregate
          │
          └─ phase 2: rollback       only after a failure
                └─ every recorded success, continue on error

Features:
    - Sequential execution: rollback order and tag application are
      deterministic
    - Rollback order is configurable through ``LcpSettings.rollback_order``
      (reverse by default)
    - Rollback failures never change the returned error code; they are
      logged and listed under ``error.context.metadata["rollback_failures"]``
    - A collaborator that raises is handled like one that returned ``Err``

Guardrails:
    ❌ DON'T: Deploy dependencies concurrently
    ✅ DO: Keep one in-flight call so the success list is an exact undo log

    ❌ DON'T: Abort the rollback loop when one rollback fails
    ✅ DO: Attempt every compensation, then report

Tags:
    deployment, rollback, orchestration, dependencies, lcp-deploy
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lcp.configure.requests import DeployRequest
from lcp.configure.versions import ReadVersion
from lcp.core.logging import get_logger
from lcp.core.result import Err, Ok, Result
from lcp.core.settings import RollbackOrder, get_settings
from lcp.deploy.support import call_provider, deployment_failed, deployment_tags, log_context
from lcp.domain.deployment import Deployment, DeploymentStatus
from lcp.domain.models import DeployedResource, DeploymentResult
from lcp.protocols import DeploymentProvider, StorageProvider

logger = get_logger(__name__)


@dataclass(frozen=True)
class DependencyDeploymentOutcome:
    """What a successful :class:`DeployDependencies` run produced.

    Attributes:
        deployments: One provider result per dependency, in declaration order.
        deployment: The tracking aggregate, ``completed`` with one deployed
            resource per dependency.
    """

    deployments: list[DeploymentResult]
    deployment: Deployment


class DeployDependencies:
    """Deploy a version's declared dependencies, rolling back on the first failure."""

    def __init__(
        self,
        storage: StorageProvider,
        deployment: DeploymentProvider,
        *,
        rollback_order: RollbackOrder | None = None,
    ):
        self.provider = deployment
        self.rollback_order = rollback_order or get_settings().rollback_order
        self._read = ReadVersion(storage)

    def execute(self, request: DeployRequest) -> Result[DependencyDeploymentOutcome]:
        with log_context(request):
            return self._execute(request)

    def _execute(self, request: DeployRequest) -> Result[DependencyDeploymentOutcome]:
        match self._read.execute(request.identifier):
            case Err(error):
                return Err(error)
            case Ok(version):
                pass

        match deployment_tags(request):
            case Err(error):
                logger.warning("deploy.tags_rejected", error=str(error))
                return Err(error)
            case Ok(tags):
                pass

        match Deployment.create(version.id, request.environment, tags):
            case Err(error):
                return Err(deployment_failed(f"Could not start deployment: {error}", error, request))
            case Ok(deployment):
                deployment.update_status(DeploymentStatus.IN_PROGRESS)

        dependencies = version.dependencies
        logger.info("deploy.dependencies_started", deployment_id=deployment.id, count=len(dependencies))

        completed: list[DeploymentResult] = []
        for dependency in dependencies:
            result = call_provider(
                lambda: self.provider.deploy_dependency(
                    dependency=dependency,
                    environment=request.environment,
                    tags=tags.to_dict(),
                )
            )
            match result:
                case Err(cause):
                    logger.error(
                        "deploy.dependency_failed",
                        dependency_type=dependency.type,
                        dependency_name=dependency.name,
                        error=str(cause),
                        deployed=len(completed),
                    )
                    rollback_failures = self._rollback(completed)
                    deployment.update_status(DeploymentStatus.FAILED, failure_reason=str(cause))
                    error = deployment_failed(
                        f"Deployment of {dependency.type}/{dependency.name} failed: {cause}", cause, request
                    )
                    if rollback_failures:
                        error.with_context(rollback_failures=rollback_failures)
                    return Err(error)
                case Ok(deployed):
                    completed.append(deployed)
                    deployment.add_deployed_resource(
                        DeployedResource(type=dependency.type, id=deployed.deployment_id, reference=dependency.name)
                    )
                    logger.info(
                        "deploy.dependency_completed",
                        dependency_name=dependency.name,
                        deployment_id=deployed.deployment_id,
                        duration_ms=deployed.duration_ms,
                    )

        deployment.update_status(DeploymentStatus.COMPLETED)
        logger.info("deploy.dependencies_completed", deployment_id=deployment.id, count=len(completed))
        return Ok(DependencyDeploymentOutcome(deployments=completed, deployment=deployment))

    def _rollback(self, completed: list[DeploymentResult]) -> list[dict[str, Any]]:
        """Undo every successful deployment; return the ones that could not be undone."""
        ordered = list(reversed(completed)) if self.rollback_order is RollbackOrder.REVERSE else list(completed)
        failures: list[dict[str, Any]] = []
        for deployed in ordered:
            rolled_back = call_provider(lambda: self.provider.rollback_deployment(deployed.deployment_id))
            if rolled_back.is_err():
                logger.error(
                    "deploy.rollback_failed",
                    deployment_id=deployed.deployment_id,
                    error=str(rolled_back.error),
                )
                failures.append({"deployment_id": deployed.deployment_id, "error": str(rolled_back.error)})
            else:
                logger.info("deploy.rolled_back", deployment_id=deployed.deployment_id)
        return failures


__all__ = ["DeployDependencies", "DependencyDeploymentOutcome"]
