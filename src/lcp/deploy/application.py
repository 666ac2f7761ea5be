"""
Application deployment.

Reads the version, derives its runtime policy from the declared
dependencies, builds the resource tags and makes exactly one call to the
deployment provider. Every failure after the version is loaded is reported
as ``VALIDATION_FAILED``.

There is no rollback: the provider is expected to fail a single application
deployment atomically. A provider that leaves resources behind on failure
is not compensated for here.
"""

from __future__ import annotations

from lcp.configure.requests import DeployRequest
from lcp.configure.versions import ReadVersion
from lcp.core.logging import get_logger
from lcp.core.result import Err, Ok, Result
from lcp.deploy.support import call_provider, deployment_failed, deployment_tags, log_context
from lcp.domain.models import DeploymentResult
from lcp.protocols import DeploymentProvider, PolicyProvider, StorageProvider

logger = get_logger(__name__)


class DeployApplication:
    """Deploy a version's cached artifact under its generated runtime policy."""

    def __init__(self, storage: StorageProvider, policy: PolicyProvider, deployment: DeploymentProvider):
        self.policy = policy
        self.provider = deployment
        self._read = ReadVersion(storage)

    def execute(self, request: DeployRequest) -> Result[DeploymentResult]:
        with log_context(request):
            return self._execute(request)

    def _execute(self, request: DeployRequest) -> Result[DeploymentResult]:
        match self._read.execute(request.identifier):
            case Err(error):
                return Err(error)
            case Ok(version):
                pass

        match call_provider(lambda: self.policy.generate_app_policy(version.dependencies)):
            case Err(cause):
                return Err(deployment_failed(f"Could not generate application policy: {cause}", cause, request))
            case Ok(policy_document):
                pass

        match deployment_tags(request):
            case Err(error):
                return Err(error)
            case Ok(tags):
                pass

        reference = version.artifact_reference
        artifact_path = reference.path if reference is not None else ""
        if not artifact_path:
            logger.warning("deploy.no_cached_artifact", version_id=version.id)

        result = call_provider(
            lambda: self.provider.deploy_application(
                artifact_path=artifact_path,
                policy_document=policy_document,
                environment=request.environment,
                tags=tags.to_dict(),
            )
        )
        match result:
            case Err(cause):
                logger.error("deploy.application_failed", error=str(cause))
                return Err(deployment_failed(f"Application deployment failed: {cause}", cause, request))
            case Ok(deployed):
                logger.info(
                    "deploy.application_completed",
                    deployment_id=deployed.deployment_id,
                    duration_ms=deployed.duration_ms,
                )
                return Ok(deployed)


__all__ = ["DeployApplication"]
