"""
Error translation shared by the configuration use cases.

Use cases never leak lower-layer error kinds. Path derivation problems
become ``VALIDATION_FAILED``, a storage miss becomes ``NOT_FOUND``, other
storage failures become ``STORAGE_ERROR``, and anything that goes wrong
while turning a stored record back into an entity becomes ``INVALID_FORMAT``.
The original error is always kept as ``cause``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import pydantic

from lcp.configure.requests import ApplicationIdentifier, VersionIdentifier
from lcp.core.errors import (
    ConfigurationCode,
    StorageCode,
    StorageError,
    ValidationError,
    configuration_error,
)
from lcp.core.result import Err, Result
from lcp.domain.models import ValidationFailure
from lcp.domain.paths import StoragePath

M = TypeVar("M", bound=pydantic.BaseModel)
E = TypeVar("E")


def application_path(identifier: ApplicationIdentifier) -> Result[StoragePath]:
    return StoragePath.for_application(identifier.account, identifier.team, identifier.moniker).map_err(
        lambda e: configuration_error(
            ConfigurationCode.VALIDATION_FAILED, f"Invalid application identifier: {e}", cause=e
        )
    )


def version_path(identifier: VersionIdentifier) -> Result[StoragePath]:
    return StoragePath.for_version(
        identifier.account, identifier.team, identifier.moniker, identifier.version
    ).map_err(
        lambda e: configuration_error(
            ConfigurationCode.VALIDATION_FAILED, f"Invalid version identifier: {e}", cause=e
        )
    )


def read_error(error: Exception, path: str) -> Exception:
    """Translate a failed storage read."""
    if isinstance(error, StorageError) and error.code is StorageCode.NOT_FOUND:
        return configuration_error(ConfigurationCode.NOT_FOUND, f"Nothing stored at {path}", cause=error, path=path)
    return configuration_error(ConfigurationCode.STORAGE_ERROR, f"Could not read {path}: {error}", cause=error, path=path)


def write_error(error: Exception, path: str) -> Exception:
    return configuration_error(ConfigurationCode.STORAGE_ERROR, f"Could not write {path}: {error}", cause=error, path=path)


def rebuild(
    raw: dict[str, Any],
    record_type: type[M],
    build: Callable[[M], Result[E]],
    path: str,
) -> Result[E]:
    """Validate a raw stored record and rebuild the entity from it."""
    try:
        record = record_type.model_validate(raw)
    except pydantic.ValidationError as e:
        return Err(
            configuration_error(
                ConfigurationCode.INVALID_FORMAT, f"Malformed record at {path}", cause=e, path=path
            )
        )
    return build(record).map_err(
        lambda e: configuration_error(
            ConfigurationCode.INVALID_FORMAT, f"Invalid record at {path}: {e}", cause=e, path=path
        )
    )


def failures_from(error: Exception) -> list[ValidationFailure]:
    """Flatten a reconstruction failure into field-level report entries."""
    if isinstance(error, pydantic.ValidationError):
        return [
            ValidationFailure(
                field=".".join(str(part) for part in detail["loc"]) or "record",
                message=detail["msg"],
                code=ConfigurationCode.INVALID_FORMAT.value,
            )
            for detail in error.errors()
        ]
    if isinstance(error, ValidationError):
        return [ValidationFailure(field=error.field or "record", message=error.message, code=error.code.value)]
    return [ValidationFailure(field="record", message=str(error), code=ConfigurationCode.INVALID_FORMAT.value)]


def inspect_record(
    raw: dict[str, Any],
    record_type: type[M],
    build: Callable[[M], Result[E]],
) -> list[ValidationFailure]:
    """Everything that keeps ``raw`` from rebuilding into an entity; empty when it is sound."""
    try:
        record = record_type.model_validate(raw)
    except pydantic.ValidationError as e:
        return failures_from(e)
    match build(record):
        case Err(error):
            return failures_from(error)
    return []


__all__ = [
    "application_path",
    "version_path",
    "read_error",
    "write_error",
    "rebuild",
    "failures_from",
    "inspect_record",
]
