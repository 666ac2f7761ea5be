"""
Version aggregate root.

A Version is an immutable release record of one Application: its semantic
version number, the infrastructure dependencies it declares, and, once
cached, a reference to its build artifact. It points back at its
Application by id only, never by object.

Mutable state:
    - ``dependencies`` and ``metadata``: replaceable via :meth:`Version.update`
    - ``artifact_reference``: set at most once via :meth:`Version.cache_artifact`
    - ``policy_references``: replaced whenever policies are regenerated

Every mutation refreshes ``updated_at`` (never moving it backwards).
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result, collect_results
from lcp.core.timestamps import advance, utc_now
from lcp.domain.identifiers import ApplicationId
from lcp.domain.models import (
    ArtifactReference,
    DependencyConfiguration,
    PolicyReferences,
    VersionMetadata,
    VersionRecord,
)
from lcp.domain.paths import StoragePath
from lcp.domain.rules import check_dependencies, check_present_strings
from lcp.domain.versioning import SemanticVersion

_CONSTRUCT = object()


class Version:
    __slots__ = (
        "id",
        "application_id",
        "version_number",
        "storage_path",
        "_dependencies",
        "_artifact_reference",
        "_policy_references",
        "_metadata",
        "created_at",
        "_updated_at",
    )

    def __init__(
        self,
        *,
        id: str,
        application_id: ApplicationId,
        version_number: SemanticVersion,
        storage_path: StoragePath,
        dependencies: Sequence[DependencyConfiguration],
        artifact_reference: ArtifactReference | None,
        policy_references: PolicyReferences | None,
        metadata: VersionMetadata | None,
        created_at: datetime,
        updated_at: datetime,
        _token: object = None,
    ):
        if _token is not _CONSTRUCT:
            raise TypeError("Use Version.create() or Version.from_record()")
        self.id = id
        self.application_id = application_id
        self.version_number = version_number
        self.storage_path = storage_path
        self._dependencies = tuple(dependencies)
        self._artifact_reference = artifact_reference
        self._policy_references = policy_references
        self._metadata = metadata
        self.created_at = created_at
        self._updated_at = updated_at

    @classmethod
    def create(
        cls,
        application_id: ApplicationId,
        version_number: SemanticVersion,
        storage_path: StoragePath,
        dependencies: Sequence[DependencyConfiguration] | None = None,
        metadata: VersionMetadata | None = None,
    ) -> Result[Version]:
        dependencies = list(dependencies or [])
        checked = collect_results([check_dependencies(dependencies), check_present_strings(metadata)])
        if checked.is_err():
            return checked  # type: ignore[return-value]

        now = utc_now()
        return Ok(
            cls(
                id=str(uuid.uuid4()),
                application_id=application_id,
                version_number=version_number,
                storage_path=storage_path,
                dependencies=dependencies,
                artifact_reference=None,
                policy_references=None,
                metadata=metadata,
                created_at=now,
                updated_at=now,
                _token=_CONSTRUCT,
            )
        )

    @classmethod
    def from_record(cls, record: VersionRecord, storage_path: StoragePath) -> Result[Version]:
        """Rebuild a Version from storage.

        The storage path is not part of the record; callers pass the path
        they derived to locate it.
        """
        parts = collect_results(
            [
                ApplicationId.parse(record.application_id),
                SemanticVersion.parse(record.version_number),
                check_dependencies(record.dependencies),
                check_present_strings(record.metadata),
            ]
        )
        if parts.is_err():
            return parts  # type: ignore[return-value]
        application_id, version_number, _, _ = parts.unwrap()

        if not record.id:
            return Err(ValidationError(ValidationCode.MISSING_REQUIRED, "version id is required", field="id"))

        return Ok(
            cls(
                id=record.id,
                application_id=application_id,
                version_number=version_number,
                storage_path=storage_path,
                dependencies=record.dependencies,
                artifact_reference=record.artifact_reference,
                policy_references=record.policy_references,
                metadata=record.metadata,
                created_at=record.created_at,
                updated_at=record.updated_at,
                _token=_CONSTRUCT,
            )
        )

    @property
    def dependencies(self) -> list[DependencyConfiguration]:
        return list(self._dependencies)

    @property
    def artifact_reference(self) -> ArtifactReference | None:
        return self._artifact_reference

    @property
    def policy_references(self) -> PolicyReferences | None:
        return self._policy_references

    @property
    def metadata(self) -> VersionMetadata | None:
        return self._metadata

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def update(
        self,
        dependencies: Sequence[DependencyConfiguration] | None = None,
        metadata: VersionMetadata | None = None,
    ) -> Result[None]:
        """Replace whatever is given; ``updated_at`` is refreshed even when nothing is."""
        checks: list[Result[None]] = [check_present_strings(metadata)]
        if dependencies is not None:
            checks.append(check_dependencies(dependencies))
        checked = collect_results(checks)
        if checked.is_err():
            return checked  # type: ignore[return-value]

        if dependencies is not None:
            self._dependencies = tuple(dependencies)
        if metadata is not None:
            self._metadata = metadata
        self._touch()
        return Ok(None)

    def cache_artifact(self, reference: ArtifactReference) -> Result[None]:
        if self._artifact_reference is not None:
            return Err(
                ValidationError(
                    ValidationCode.INVALID_VALUE,
                    f"Version {self.version_number} already has a cached artifact",
                    field="artifact_reference",
                )
            )
        self._artifact_reference = reference
        self._touch()
        return Ok(None)

    def set_policy_references(self, references: PolicyReferences) -> None:
        self._policy_references = references
        self._touch()

    def _touch(self) -> None:
        self._updated_at = advance(self._updated_at)

    def to_record(self) -> VersionRecord:
        return VersionRecord(
            id=self.id,
            application_id=str(self.application_id),
            version_number=str(self.version_number),
            dependencies=list(self._dependencies),
            artifact_reference=self._artifact_reference,
            policy_references=self._policy_references,
            metadata=self._metadata,
            created_at=self.created_at,
            updated_at=self._updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Version(id={self.id!r}, version={str(self.version_number)!r})"


__all__ = ["Version"]
