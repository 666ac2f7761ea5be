"""
Deployment tracking and its status state machine.

::

    pending ──► in-progress ──► completed
                     │
                     └────────► failed

``completed`` and ``failed`` are terminal. Any other transition (skipping
``in-progress``, leaving a terminal state, standing still) is rejected with
``VALIDATION_INVALID_VALUE`` and the deployment is left exactly as it was.

Deployed resources are appended in order while the deployment is still
running; rollback walks that list.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result
from lcp.core.timestamps import utc_now
from lcp.domain.models import DeployedResource, DeploymentRecord
from lcp.domain.tags import ResourceTags


class DeploymentStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (DeploymentStatus.COMPLETED, DeploymentStatus.FAILED)

    def can_transition_to(self, new: DeploymentStatus) -> bool:
        return new in _TRANSITIONS[self]


_TRANSITIONS: dict[DeploymentStatus, frozenset[DeploymentStatus]] = {
    DeploymentStatus.PENDING: frozenset({DeploymentStatus.IN_PROGRESS}),
    DeploymentStatus.IN_PROGRESS: frozenset({DeploymentStatus.COMPLETED, DeploymentStatus.FAILED}),
    DeploymentStatus.COMPLETED: frozenset(),
    DeploymentStatus.FAILED: frozenset(),
}

_CONSTRUCT = object()


class Deployment:
    __slots__ = (
        "id",
        "version_id",
        "environment",
        "tags",
        "created_at",
        "_status",
        "_resources",
        "_started_at",
        "_completed_at",
        "_failure_reason",
    )

    def __init__(
        self,
        *,
        id: str,
        version_id: str,
        environment: str,
        tags: ResourceTags,
        status: DeploymentStatus,
        resources: list[DeployedResource],
        created_at: datetime,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
        failure_reason: str | None = None,
        _token: object = None,
    ):
        if _token is not _CONSTRUCT:
            raise TypeError("Use Deployment.create() or Deployment.from_record()")
        self.id = id
        self.version_id = version_id
        self.environment = environment
        self.tags = tags
        self.created_at = created_at
        self._status = status
        self._resources = resources
        self._started_at = started_at
        self._completed_at = completed_at
        self._failure_reason = failure_reason

    @classmethod
    def create(cls, version_id: str, environment: str, tags: ResourceTags) -> Result[Deployment]:
        for name, value in (("version_id", version_id), ("environment", environment)):
            if not value:
                return Err(ValidationError(ValidationCode.MISSING_REQUIRED, f"{name} is required", field=name))
        return Ok(
            cls(
                id=str(uuid.uuid4()),
                version_id=version_id,
                environment=environment,
                tags=tags,
                status=DeploymentStatus.PENDING,
                resources=[],
                created_at=utc_now(),
                _token=_CONSTRUCT,
            )
        )

    @classmethod
    def from_record(cls, record: DeploymentRecord) -> Result[Deployment]:
        try:
            status = DeploymentStatus(record.status)
        except ValueError:
            return Err(
                ValidationError(
                    ValidationCode.INVALID_VALUE,
                    f"Unknown deployment status {record.status!r}",
                    field="status",
                )
            )
        if record.tags.get("lc:environment") != record.environment:
            return Err(
                ValidationError(
                    ValidationCode.INVALID_VALUE,
                    "lc:environment tag does not match the deployment environment",
                    field="tags",
                )
            )

        return ResourceTags.from_dict(record.tags).map(
            lambda tags: cls(
                id=record.id,
                version_id=record.version_id,
                environment=record.environment,
                tags=tags,
                status=status,
                resources=list(record.deployed_resources),
                created_at=record.created_at,
                started_at=record.started_at,
                completed_at=record.completed_at,
                failure_reason=record.failure_reason,
                _token=_CONSTRUCT,
            )
        )

    @property
    def status(self) -> DeploymentStatus:
        return self._status

    @property
    def deployed_resources(self) -> list[DeployedResource]:
        return list(self._resources)

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def completed_at(self) -> datetime | None:
        return self._completed_at

    @property
    def failure_reason(self) -> str | None:
        return self._failure_reason

    def update_status(self, new: DeploymentStatus, failure_reason: str | None = None) -> Result[None]:
        if not self._status.can_transition_to(new):
            return Err(
                ValidationError(
                    ValidationCode.INVALID_VALUE,
                    f"Illegal deployment transition {self._status.value} -> {new.value}",
                    field="status",
                )
            )

        now = utc_now()
        self._status = new
        if new is DeploymentStatus.IN_PROGRESS:
            self._started_at = now
        elif new is DeploymentStatus.COMPLETED:
            self._completed_at = now
        elif new is DeploymentStatus.FAILED:
            self._completed_at = now
            self._failure_reason = failure_reason
        return Ok(None)

    def add_deployed_resource(self, resource: DeployedResource) -> Result[None]:
        if self._status.is_terminal:
            return Err(
                ValidationError(
                    ValidationCode.INVALID_VALUE,
                    f"Deployment {self.id} is {self._status.value}; no more resources can be recorded",
                    field="deployed_resources",
                )
            )
        self._resources.append(resource)
        return Ok(None)

    def to_record(self) -> DeploymentRecord:
        return DeploymentRecord(
            id=self.id,
            version_id=self.version_id,
            environment=self.environment,
            status=self._status.value,
            tags=self.tags.to_dict(),
            deployed_resources=list(self._resources),
            created_at=self.created_at,
            started_at=self._started_at,
            completed_at=self._completed_at,
            failure_reason=self._failure_reason,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Deployment):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Deployment(id={self.id!r}, environment={self.environment!r}, status={self._status.value!r})"


__all__ = ["DeploymentStatus", "Deployment"]
