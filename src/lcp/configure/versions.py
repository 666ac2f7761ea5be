"""
Version configuration use cases.

Covers the version lifecycle (init, read, update, delete), artifact caching
and policy generation. A version lives under its application's bucket at
``versions/{version}/appversion.config``; its artifact and published
policies sit beside it.

Artifact caching:
    :class:`CacheArtifact` keeps the version record and the artifact object
    consistent. An upload failure, or a failure to persist the version after
    a successful upload, triggers a best-effort ``delete_artifact`` at the
    artifact path. The cleanup result is logged and never replaces the
    error returned to the caller.

Guardrails:
    ❌ DON'T: Return the storage provider's error kinds from a use case
    ✅ DO: Translate through :mod:`lcp.configure.support`

    ❌ DON'T: Overwrite a cached artifact
    ✅ DO: Publish a new version; artifacts are set once per version

Tags:
    versions, artifacts, policies, use-case, lcp-configure
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

import pydantic

from lcp.configure.applications import ReadApplication
from lcp.configure.requests import (
    CacheArtifactRequest,
    InitVersionRequest,
    UpdateVersionRequest,
    VersionIdentifier,
)
from lcp.configure.support import read_error, rebuild, version_path, write_error
from lcp.core.errors import ConfigurationCode, ValidationCode, configuration_error
from lcp.core.logging import get_logger
from lcp.core.result import Err, Ok, Result, try_result
from lcp.core.timestamps import utc_now
from lcp.domain.models import (
    ArtifactReference,
    DependencyConfiguration,
    PolicyDocument,
    PolicyReferences,
    ValidationFailure,
    ValidationReport,
    VersionRecord,
)
from lcp.domain.paths import StoragePath
from lcp.domain.version import Version
from lcp.domain.versioning import SemanticVersion
from lcp.protocols import PolicyProvider, StorageProvider

logger = get_logger(__name__)

_SAFE_NAME = re.compile(r"^[a-zA-Z0-9_-]+$")


class InitVersion:
    """Register a new version of an existing application."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage
        self._read_application = ReadApplication(storage)

    def execute(self, request: InitVersionRequest) -> Result[Version]:
        ident = request.identifier

        match SemanticVersion.parse(ident.version):
            case Err(error):
                return Err(
                    configuration_error(ConfigurationCode.VALIDATION_FAILED, f"Invalid version: {error}", cause=error)
                )
            case Ok(version_number):
                pass

        match version_path(ident):
            case Err(error):
                return Err(error)
            case Ok(storage_path):
                pass

        match self._read_application.execute(ident.application):
            case Err(error):
                return Err(error)
            case Ok(app):
                pass

        path = storage_path.version_config_path
        if self.storage.exists(path):
            return Err(
                configuration_error(
                    ConfigurationCode.ALREADY_EXISTS, f"Version {ident.version} already exists", path=path
                )
            )

        match Version.create(app.id, version_number, storage_path, request.dependencies, request.metadata):
            case Err(error):
                return Err(
                    configuration_error(ConfigurationCode.VALIDATION_FAILED, f"Invalid version: {error}", cause=error)
                )
            case Ok(version):
                pass

        written = self.storage.write(path, version.to_record().to_storage())
        if written.is_err():
            return written.map_err(lambda e: write_error(e, path))  # type: ignore[return-value]

        logger.info(
            "version.initialized",
            version_id=version.id,
            version=str(version_number),
            dependencies=len(version.dependencies),
        )
        return Ok(version)


class ReadVersion:
    """Load a version from storage."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def execute(self, identifier: VersionIdentifier) -> Result[Version]:
        return version_path(identifier).flat_map(self._load)

    def _load(self, storage_path: StoragePath) -> Result[Version]:
        path = storage_path.version_config_path
        return (
            self.storage.read(path)
            .map_err(lambda e: read_error(e, path))
            .flat_map(
                lambda raw: rebuild(
                    raw, VersionRecord, lambda record: Version.from_record(record, storage_path), path
                )
            )
        )


def _persist(storage: StorageProvider, version: Version) -> Result[None]:
    path = version.storage_path.version_config_path
    return storage.write(path, version.to_record().to_storage()).map_err(lambda e: write_error(e, path))


class UpdateVersion:
    """Replace a version's dependencies and/or metadata."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage
        self._read = ReadVersion(storage)

    def execute(self, request: UpdateVersionRequest) -> Result[Version]:
        match self._read.execute(request.identifier):
            case Err(error):
                return Err(error)
            case Ok(version):
                pass

        updated = version.update(
            dependencies=request.dependencies,
            metadata=request.metadata,
        )
        if updated.is_err():
            return updated.map_err(
                lambda e: configuration_error(ConfigurationCode.VALIDATION_FAILED, f"Invalid update: {e}", cause=e)
            )  # type: ignore[return-value]

        return _persist(self.storage, version).map(lambda _: version).inspect(
            lambda v: logger.info("version.updated", version_id=v.id)
        )


class DeleteVersion:
    """Delete a version's configuration record."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def execute(self, identifier: VersionIdentifier) -> Result[None]:
        match version_path(identifier):
            case Err(error):
                return Err(error)
            case Ok(storage_path):
                path = storage_path.version_config_path

        if not self.storage.exists(path):
            return Err(
                configuration_error(ConfigurationCode.NOT_FOUND, f"Version {identifier.version} not found", path=path)
            )

        deleted = self.storage.delete(path).map_err(
            lambda e: configuration_error(
                ConfigurationCode.STORAGE_ERROR, f"Could not delete {path}: {e}", cause=e, path=path
            )
        )
        if deleted.is_ok():
            logger.info("version.deleted", path=path)
        return deleted


class CacheArtifact:
    """Upload a version's build artifact and record its reference."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage
        self._read = ReadVersion(storage)

    def execute(self, request: CacheArtifactRequest) -> Result[ArtifactReference]:
        match self._read.execute(request.identifier):
            case Err(error):
                return Err(error)
            case Ok(version):
                pass

        if version.artifact_reference is not None:
            return Err(
                configuration_error(
                    ConfigurationCode.ALREADY_EXISTS,
                    f"Version {version.version_number} already has a cached artifact",
                    path=version.artifact_reference.path,
                )
            )

        artifact_path = version.storage_path.artifact_path
        uploaded = try_result(
            lambda: self.storage.upload_artifact(artifact_path, request.stream, request.metadata)
        ).flat_map(lambda result: result)
        match uploaded:
            case Err(error):
                logger.warning("artifact.upload_failed", path=artifact_path, error=str(error))
                self._cleanup(artifact_path)
                return Err(error)
            case Ok(reference):
                pass

        # the reference was checked above, so attaching cannot fail here
        version.cache_artifact(reference)
        persisted = _persist(self.storage, version)
        if persisted.is_err():
            self._cleanup(artifact_path)
            return persisted  # type: ignore[return-value]

        logger.info(
            "artifact.cached",
            version_id=version.id,
            path=reference.path,
            size=reference.size,
            checksum=reference.checksum,
        )
        return Ok(reference)

    def _cleanup(self, artifact_path: str) -> None:
        cleaned = try_result(lambda: self.storage.delete_artifact(artifact_path)).flat_map(lambda result: result)
        if cleaned.is_err():
            logger.warning("artifact.cleanup_failed", path=artifact_path, error=str(cleaned.error))


def _duplicates(dependencies: Sequence[DependencyConfiguration]) -> list[ValidationFailure]:
    seen: dict[tuple[str, str], int] = {}
    failures = []
    for index, dep in enumerate(dependencies):
        key = (dep.type, dep.name)
        if key in seen:
            failures.append(
                ValidationFailure(
                    field=f"dependencies[{index}]",
                    message=f"{dep.type}/{dep.name} is already declared at dependencies[{seen[key]}]",
                    code=ValidationCode.DEPENDENCY_INVALID.value,
                )
            )
        else:
            seen[key] = index
    return failures


def dependency_failures(dependencies: Sequence[DependencyConfiguration]) -> list[ValidationFailure]:
    """Every problem with a dependency list, in declaration order."""
    failures: list[ValidationFailure] = []
    for index, dep in enumerate(dependencies):
        field = f"dependencies[{index}]"
        for attr in ("type", "name"):
            value = getattr(dep, attr)
            if not value or not value.strip():
                failures.append(
                    ValidationFailure(
                        field=f"{field}.{attr}",
                        message=f"dependency {attr} is required",
                        code=ValidationCode.DEPENDENCY_INVALID.value,
                    )
                )
            elif not _SAFE_NAME.match(value):
                failures.append(
                    ValidationFailure(
                        field=f"{field}.{attr}",
                        message=f"dependency {attr} {value!r} may only contain letters, digits, '_' and '-'",
                        code=ValidationCode.DEPENDENCY_INVALID.value,
                    )
                )
    failures.extend(_duplicates(dependencies))
    return failures


class VersionConfigurator:
    """
    Facade over the version use cases plus policy generation.

    Examples:
        >>> from lcp.adapters import DefaultPolicyProvider, InMemoryStorageProvider
        >>> versions = VersionConfigurator(InMemoryStorageProvider(), DefaultPolicyProvider())
        >>> versions.read(VersionIdentifier("acme", "core", "billing", "1.0.0")).is_err()
        True
    """

    def __init__(self, storage: StorageProvider, policy: PolicyProvider):
        self.storage = storage
        self.policy = policy
        self._init = InitVersion(storage)
        self._read = ReadVersion(storage)
        self._update = UpdateVersion(storage)
        self._delete = DeleteVersion(storage)
        self._cache = CacheArtifact(storage)

    def init(self, request: InitVersionRequest) -> Result[Version]:
        return self._init.execute(request)

    def read(self, identifier: VersionIdentifier) -> Result[Version]:
        return self._read.execute(identifier)

    def update(self, request: UpdateVersionRequest) -> Result[Version]:
        return self._update.execute(request)

    def delete(self, identifier: VersionIdentifier) -> Result[None]:
        return self._delete.execute(identifier)

    def cache(self, request: CacheArtifactRequest) -> Result[ArtifactReference]:
        return self._cache.execute(request)

    # ── Policies ─────────────────────────────────────────────────────────

    def _policy(self, version: Version, generate: Any, kind: str) -> Result[PolicyDocument]:
        return (
            try_result(lambda: generate(version.dependencies))
            .flat_map(lambda result: result)
            .map_err(
                lambda e: configuration_error(
                    ConfigurationCode.VALIDATION_FAILED, f"Could not generate {kind} policy: {e}", cause=e
                )
            )
        )

    def generate_app_policy(self, identifier: VersionIdentifier) -> Result[PolicyDocument]:
        """Runtime policy granting access to exactly the declared dependencies."""
        return self.read(identifier).flat_map(
            lambda version: self._policy(version, self.policy.generate_app_policy, "app")
        )

    def generate_cicd_policy(self, identifier: VersionIdentifier) -> Result[PolicyDocument]:
        """Pipeline policy allowing the declared dependency types to be provisioned."""
        return self.read(identifier).flat_map(
            lambda version: self._policy(version, self.policy.generate_cicd_policy, "cicd")
        )

    def publish_policies(self, identifier: VersionIdentifier) -> Result[PolicyReferences]:
        """Generate both policies, store them beside the version and record where.

        Each policy is stored as ``{"document": <serialized text>}`` at
        ``policies/{kind}-policy.json``.
        """
        match self.read(identifier):
            case Err(error):
                return Err(error)
            case Ok(version):
                pass

        storage_path = version.storage_path
        written: dict[str, str] = {}
        for kind, generate in (
            ("app", self.policy.generate_app_policy),
            ("cicd", self.policy.generate_cicd_policy),
        ):
            match self._policy(version, generate, kind):
                case Err(error):
                    return Err(error)
                case Ok(document):
                    pass
            path = storage_path.policy_path(kind)
            stored = self.storage.write(path, {"document": self.policy.serialize_policy(document)})
            if stored.is_err():
                return stored.map_err(lambda e: write_error(e, path))  # type: ignore[return-value]
            written[kind] = path

        references = PolicyReferences(
            app_policy_path=written["app"],
            cicd_policy_path=written["cicd"],
            generated_at=utc_now(),
        )
        version.set_policy_references(references)
        persisted = _persist(self.storage, version)
        if persisted.is_err():
            return persisted  # type: ignore[return-value]

        logger.info("policies.published", version_id=version.id, **written)
        return Ok(references)

    # ── Validation ───────────────────────────────────────────────────────

    def validate_dependencies(self, identifier: VersionIdentifier) -> Result[ValidationReport]:
        """Report problems in the stored dependency list.

        Works from the raw record so that dependencies which would stop the
        version from loading are still reported field by field.
        """
        match version_path(identifier):
            case Err(error):
                return Err(error)
            case Ok(storage_path):
                path = storage_path.version_config_path

        match self.storage.read(path).map_err(lambda e: read_error(e, path)):
            case Err(error):
                return Err(error)
            case Ok(raw):
                pass

        try:
            record = VersionRecord.model_validate(raw)
        except pydantic.ValidationError as e:
            return Err(
                configuration_error(ConfigurationCode.INVALID_FORMAT, f"Malformed record at {path}", cause=e, path=path)
            )
        return Ok(ValidationReport(failures=dependency_failures(record.dependencies)))


__all__ = [
    "InitVersion",
    "ReadVersion",
    "UpdateVersion",
    "DeleteVersion",
    "CacheArtifact",
    "VersionConfigurator",
    "dependency_failures",
]
