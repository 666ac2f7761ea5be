"""
Value records exchanged with collaborators and persisted by storage.

These are plain pydantic models. They carry no lifecycle rules of their own
(those live on the entities in :mod:`lcp.domain.application`,
:mod:`lcp.domain.version` and :mod:`lcp.domain.deployment`), only shape
and type validation.

Wire format:
    Field names are snake_case in Python and camelCase on the wire
    (``artifact_reference`` ↔ ``artifactReference``). Timestamps serialize as
    ISO-8601 strings. :meth:`LcpModel.to_storage` produces the
    JSON-compatible dict a storage provider persists; ``model_validate``
    accepts either naming.

Examples:
    >>> dep = DependencyConfiguration(type="database", name="postgres")
    >>> dep.to_storage()
    {'type': 'database', 'name': 'postgres', 'configuration': {}}
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from lcp.core.timestamps import ensure_utc

# stored timestamps without an offset are UTC
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class LcpModel(BaseModel):
    """Base model: camelCase aliases, immutable instances."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_storage(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase keys and unset optionals dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Declared configuration ───────────────────────────────────────────────


class DependencyConfiguration(LcpModel):
    """An infrastructure resource a version needs at runtime."""

    type: str = Field(description="Resource kind, e.g. 'database' or 'queue'")
    name: str
    configuration: dict[str, Any] = Field(default_factory=dict)


class ApplicationMetadata(LcpModel):
    display_name: str | None = None
    description: str | None = None
    owner: str | None = None
    tags: dict[str, str] | None = None


class VersionMetadata(LcpModel):
    release_notes: str | None = None
    build_number: str | None = None
    commit_sha: str | None = None
    tags: dict[str, str] | None = None


# ── Artifacts and policies ───────────────────────────────────────────────


class ArtifactUploadMetadata(LcpModel):
    size: int = Field(ge=0)
    content_type: str = "application/octet-stream"


class ArtifactReference(LcpModel):
    """Where a cached artifact lives and how to verify it."""

    path: str
    size: int
    checksum: str = Field(description="SHA-256 hex digest computed by the storage provider")
    uploaded_at: UtcDatetime


class PolicyReferences(LcpModel):
    app_policy_path: str | None = None
    cicd_policy_path: str | None = None
    generated_at: UtcDatetime | None = None


class PolicyStatement(LcpModel):
    effect: Literal["Allow", "Deny"]
    actions: list[str]
    resources: list[str]
    conditions: dict[str, Any] | None = None


class PolicyDocument(LcpModel):
    version: str
    statements: list[PolicyStatement] = Field(default_factory=list)


# ── Deployment ───────────────────────────────────────────────────────────


class DeploymentResult(LcpModel):
    """Outcome reported by a deployment provider for one deploy call."""

    deployment_id: str
    status: Literal["completed", "failed"]
    started_at: UtcDatetime
    completed_at: UtcDatetime
    duration_ms: int
    applied_tags: dict[str, str] = Field(default_factory=dict)


class DeployedResource(LcpModel):
    """A provisioned resource recorded for rollback bookkeeping."""

    type: str
    id: str
    reference: str = Field(description="Provider-specific address, e.g. an ARN")


# ── Persisted records ────────────────────────────────────────────────────


class ApplicationRecord(LcpModel):
    id: str
    account: str
    team: str
    moniker: str
    metadata: ApplicationMetadata | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class VersionRecord(LcpModel):
    id: str
    application_id: str
    version_number: str
    dependencies: list[DependencyConfiguration] = Field(default_factory=list)
    artifact_reference: ArtifactReference | None = None
    policy_references: PolicyReferences | None = None
    metadata: VersionMetadata | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class DeploymentRecord(LcpModel):
    id: str
    version_id: str
    environment: str
    status: str
    tags: dict[str, str]
    deployed_resources: list[DeployedResource] = Field(default_factory=list)
    created_at: UtcDatetime
    started_at: UtcDatetime | None = None
    completed_at: UtcDatetime | None = None
    failure_reason: str | None = None


# ── Reports ──────────────────────────────────────────────────────────────


class ValidationFailure(LcpModel):
    field: str
    message: str
    code: str


class ValidationReport(LcpModel):
    """Field-level outcome of a validation pass; ``valid`` iff no failures."""

    failures: list[ValidationFailure] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return not self.failures


__all__ = [
    "LcpModel",
    "DependencyConfiguration",
    "ApplicationMetadata",
    "VersionMetadata",
    "ArtifactUploadMetadata",
    "ArtifactReference",
    "PolicyReferences",
    "PolicyStatement",
    "PolicyDocument",
    "DeploymentResult",
    "DeployedResource",
    "ApplicationRecord",
    "VersionRecord",
    "DeploymentRecord",
    "ValidationFailure",
    "ValidationReport",
]
