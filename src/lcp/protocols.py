"""
Collaborator contracts for ``lcp``.

The library owns validation, serialization shape and orchestration. It does
not own physical storage, IAM policy backends or deployment execution;
those are reached through the three protocols below. Any object with the
right shape satisfies them; reference implementations live in
:mod:`lcp.adapters`.

Architecture:
    ::

        protocols.py
        ├── StorageProvider     records + artifacts, keyed by derived path
        ├── PolicyProvider      dependency list → PolicyDocument
        └── DeploymentProvider  deploy dependency / application, rollback

Guardrails:
    ❌ DON'T: Raise for expected failures (missing record, failed upload)
    ✅ DO: Return ``Err(StorageError(...))`` / ``Err(DeploymentError(...))``

    ❌ DON'T: Add async methods here
    ✅ DO: Keep the contract synchronous; callers wrap it with their own
       timeouts and cancellation

    ❌ DON'T: Put implementation logic in protocol classes
    ✅ DO: Implement in :mod:`lcp.adapters` or your own package

Context:
    Orchestration wraps every call with :func:`~lcp.core.result.try_result`,
    so a provider that does raise is treated as having returned ``Err``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, BinaryIO, Protocol, runtime_checkable

from lcp.core.result import Result
from lcp.domain.models import (
    ArtifactReference,
    ArtifactUploadMetadata,
    DependencyConfiguration,
    DeploymentResult,
    PolicyDocument,
)


@runtime_checkable
class StorageProvider(Protocol):
    """Path-addressed record and artifact storage.

    ``read`` on a missing path must return ``Err`` with
    ``StorageCode.NOT_FOUND`` so use cases can tell "absent" from "broken".
    Records are JSON-compatible dicts; the provider must not interpret them.
    """

    def exists(self, path: str) -> bool: ...

    def read(self, path: str) -> Result[dict[str, Any]]: ...

    def write(self, path: str, record: Mapping[str, Any]) -> Result[None]: ...

    def delete(self, path: str) -> Result[None]: ...

    def upload_artifact(
        self, path: str, stream: BinaryIO, metadata: ArtifactUploadMetadata
    ) -> Result[ArtifactReference]: ...

    def delete_artifact(self, path: str) -> Result[None]: ...


@runtime_checkable
class PolicyProvider(Protocol):
    """Generates least-privilege policy documents from declared dependencies."""

    def generate_app_policy(
        self, dependencies: Sequence[DependencyConfiguration]
    ) -> Result[PolicyDocument]: ...

    def generate_cicd_policy(
        self, dependencies: Sequence[DependencyConfiguration]
    ) -> Result[PolicyDocument]: ...

    def serialize_policy(self, policy: PolicyDocument) -> str: ...


@runtime_checkable
class DeploymentProvider(Protocol):
    """Executes deployments. Each call blocks until the deployment finishes."""

    def deploy_application(
        self,
        *,
        artifact_path: str,
        policy_document: PolicyDocument,
        environment: str,
        tags: Mapping[str, str],
    ) -> Result[DeploymentResult]: ...

    def deploy_dependency(
        self,
        *,
        dependency: DependencyConfiguration,
        environment: str,
        tags: Mapping[str, str],
    ) -> Result[DeploymentResult]: ...

    def rollback_deployment(self, deployment_id: str) -> Result[None]: ...


__all__ = ["StorageProvider", "PolicyProvider", "DeploymentProvider"]
