"""
Application configuration use cases.

Thin orchestration over the :class:`~lcp.domain.application.Application`
entity and a :class:`~lcp.protocols.StorageProvider`. Each use case is a
small class holding its collaborators and exposing ``execute``;
:class:`ApplicationConfigurator` bundles them behind one object.

Uniqueness:
    There is no index. ``(account, team, moniker)`` derives one storage
    path, and :class:`InitApplication` refuses to write when something
    already exists there.

Concurrency:
    Update is read-modify-write with last-write-wins semantics. No version
    token is checked.
"""

from __future__ import annotations

from datetime import UTC, datetime

from lcp.configure.requests import (
    ApplicationIdentifier,
    InitApplicationRequest,
    UpdateApplicationRequest,
)
from lcp.configure.support import (
    application_path,
    inspect_record,
    read_error,
    rebuild,
    write_error,
)
from lcp.core.errors import ConfigurationCode, configuration_error
from lcp.core.logging import get_logger
from lcp.core.result import Err, Ok, Result
from lcp.domain.application import Application
from lcp.domain.identifiers import TeamMoniker
from lcp.domain.models import ApplicationRecord, ValidationReport
from lcp.protocols import StorageProvider

logger = get_logger(__name__)


class InitApplication:
    """Register a new application."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def execute(self, request: InitApplicationRequest) -> Result[Application]:
        ident = request.identifier

        match TeamMoniker.create(ident.team, ident.moniker):
            case Err(error):
                return Err(
                    configuration_error(ConfigurationCode.VALIDATION_FAILED, f"Invalid team/moniker: {error}", cause=error)
                )
            case Ok(team_moniker):
                pass

        match application_path(ident):
            case Err(error):
                return Err(error)
            case Ok(storage_path):
                pass

        path = storage_path.app_config_path
        if self.storage.exists(path):
            return Err(
                configuration_error(
                    ConfigurationCode.ALREADY_EXISTS,
                    f"Application {ident.account}/{team_moniker} already exists",
                    path=path,
                )
            )

        match Application.create(ident.account, team_moniker, storage_path, request.metadata):
            case Err(error):
                return Err(
                    configuration_error(ConfigurationCode.VALIDATION_FAILED, f"Invalid application: {error}", cause=error)
                )
            case Ok(app):
                pass

        written = self.storage.write(path, app.to_record().to_storage())
        if written.is_err():
            return written.map_err(lambda e: write_error(e, path))  # type: ignore[return-value]

        logger.info("application.initialized", application_id=str(app.id), path=path)
        return Ok(app)


class ReadApplication:
    """Load an application from storage."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def execute(self, identifier: ApplicationIdentifier) -> Result[Application]:
        return application_path(identifier).flat_map(self._load)

    def _load(self, storage_path) -> Result[Application]:
        path = storage_path.app_config_path
        return (
            self.storage.read(path)
            .map_err(lambda e: read_error(e, path))
            .flat_map(lambda raw: rebuild(raw, ApplicationRecord, Application.from_record, path))
        )


class UpdateApplication:
    """Replace an application's metadata (read-modify-write, last write wins)."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage
        self._read = ReadApplication(storage)

    def execute(self, request: UpdateApplicationRequest) -> Result[Application]:
        match self._read.execute(request.identifier):
            case Err(error):
                return Err(error)
            case Ok(app):
                pass

        updated = app.update(request.metadata)
        if updated.is_err():
            return updated.map_err(
                lambda e: configuration_error(ConfigurationCode.VALIDATION_FAILED, f"Invalid metadata: {e}", cause=e)
            )  # type: ignore[return-value]

        path = app.storage_path.app_config_path
        written = self.storage.write(path, app.to_record().to_storage())
        if written.is_err():
            return written.map_err(lambda e: write_error(e, path))  # type: ignore[return-value]

        logger.info("application.updated", application_id=str(app.id))
        return Ok(app)


class DeleteApplication:
    """Delete an application's configuration record."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage

    def execute(self, identifier: ApplicationIdentifier) -> Result[None]:
        match application_path(identifier):
            case Err(error):
                return Err(error)
            case Ok(storage_path):
                path = storage_path.app_config_path

        deleted = self.storage.delete(path).map_err(
            lambda e: configuration_error(
                ConfigurationCode.STORAGE_ERROR, f"Could not delete {path}: {e}", cause=e, path=path
            )
        )
        if deleted.is_ok():
            logger.info("application.deleted", path=path)
        return deleted


class ValidateApplication:
    """Existence, staleness and integrity checks for a stored application."""

    def __init__(self, storage: StorageProvider):
        self.storage = storage
        self._read = ReadApplication(storage)

    def exists(self, identifier: ApplicationIdentifier) -> bool:
        return (
            application_path(identifier)
            .map(lambda storage_path: self.storage.exists(storage_path.app_config_path))
            .unwrap_or(False)
        )

    def needs_update(self, identifier: ApplicationIdentifier, local_updated_at: datetime) -> Result[bool]:
        """True iff the stored copy changed after ``local_updated_at``.

        Naive ``local_updated_at`` values are taken as UTC.
        """
        if local_updated_at.tzinfo is None:
            local_updated_at = local_updated_at.replace(tzinfo=UTC)
        return self._read.execute(identifier).map(lambda app: app.updated_at > local_updated_at)

    def validate(self, identifier: ApplicationIdentifier) -> Result[ValidationReport]:
        """Report every field-level problem with the stored record.

        A record that cannot be found or read is an ``Err``; a record that
        exists but does not rebuild is an ``Ok`` report with failures.
        """
        match application_path(identifier):
            case Err(error):
                return Err(error)
            case Ok(storage_path):
                path = storage_path.app_config_path

        return (
            self.storage.read(path)
            .map_err(lambda e: read_error(e, path))
            .map(
                lambda raw: ValidationReport(
                    failures=inspect_record(raw, ApplicationRecord, Application.from_record)
                )
            )
        )


class ApplicationConfigurator:
    """Facade over the application use cases sharing one storage provider."""

    def __init__(self, storage: StorageProvider):
        self._init = InitApplication(storage)
        self._read = ReadApplication(storage)
        self._update = UpdateApplication(storage)
        self._delete = DeleteApplication(storage)
        self._validate = ValidateApplication(storage)

    def init(self, request: InitApplicationRequest) -> Result[Application]:
        return self._init.execute(request)

    def read(self, identifier: ApplicationIdentifier) -> Result[Application]:
        return self._read.execute(identifier)

    def update(self, request: UpdateApplicationRequest) -> Result[Application]:
        return self._update.execute(request)

    def delete(self, identifier: ApplicationIdentifier) -> Result[None]:
        return self._delete.execute(identifier)

    def exists(self, identifier: ApplicationIdentifier) -> bool:
        return self._validate.exists(identifier)

    def needs_update(self, identifier: ApplicationIdentifier, local_updated_at: datetime) -> Result[bool]:
        return self._validate.needs_update(identifier, local_updated_at)

    def validate(self, identifier: ApplicationIdentifier) -> Result[ValidationReport]:
        return self._validate.validate(identifier)


__all__ = [
    "InitApplication",
    "ReadApplication",
    "UpdateApplication",
    "DeleteApplication",
    "ValidateApplication",
    "ApplicationConfigurator",
]
