"""
Canonical storage path derivation.

A :class:`StoragePath` is never stored: it is a pure function of
``(account, team, moniker[, version])``. Two applications with the same
triple always map to the same bucket, which is what makes the path itself
the uniqueness check. Create operations test for existence at the derived
path before writing; no separate index exists.

Layout::

    lcp-{account}-{team}-{moniker}/
    ├── app.config
    └── versions/
        └── {version}/
            ├── appversion.config
            ├── artifact
            └── policies/
                ├── app-policy.json
                └── cicd-policy.json

Examples:
    >>> path = StoragePath.for_version("acme", "core", "billing", "1.2.0").unwrap()
    >>> path.bucket_name
    'lcp-acme-core-billing/'
    >>> path.version_config_path
    'lcp-acme-core-billing/versions/1.2.0/appversion.config'
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result

_SAFE_SEGMENT = re.compile(r"^[a-zA-Z0-9_-]+$")


def _check_part(name: str, value: str | None) -> ValidationError | None:
    if not value:
        return ValidationError(ValidationCode.MISSING_REQUIRED, f"{name} is required", field=name)
    if not _SAFE_SEGMENT.match(value):
        return ValidationError(
            ValidationCode.INVALID_FORMAT,
            f"{name} may only contain letters, digits, '_' and '-'; got {value!r}",
            field=name,
        )
    return None


def _check_version(value: str | None) -> ValidationError | None:
    if not value:
        return ValidationError(ValidationCode.MISSING_REQUIRED, "version is required", field="version")
    # dots separate semver components; each component must still be path-safe
    if not all(_SAFE_SEGMENT.match(segment) for segment in value.split(".")):
        return ValidationError(
            ValidationCode.INVALID_FORMAT,
            f"version contains unsafe path characters: {value!r}",
            field="version",
        )
    return None


@dataclass(frozen=True, slots=True)
class StoragePath:
    """Storage locations for one application, optionally scoped to one version."""

    account: str
    team: str
    moniker: str
    version: str | None = None

    @classmethod
    def for_application(cls, account: str, team: str, moniker: str) -> Result[StoragePath]:
        for name, value in (("account", account), ("team", team), ("moniker", moniker)):
            error = _check_part(name, value)
            if error is not None:
                return Err(error)
        return Ok(cls(account, team, moniker))

    @classmethod
    def for_version(cls, account: str, team: str, moniker: str, version: str) -> Result[StoragePath]:
        error = _check_version(version)
        return cls.for_application(account, team, moniker).flat_map(
            lambda app_path: Err(error) if error else Ok(cls(account, team, moniker, version))
        )

    @property
    def bucket_name(self) -> str:
        return f"lcp-{self.account}-{self.team}-{self.moniker}/"

    @property
    def app_config_path(self) -> str:
        return f"{self.bucket_name}app.config"

    @property
    def version_path(self) -> str:
        if not self.version:
            raise ValueError("Version not set; build the path with StoragePath.for_version()")
        return f"{self.bucket_name}versions/{self.version}/"

    @property
    def version_config_path(self) -> str:
        return f"{self.version_path}appversion.config"

    @property
    def artifact_path(self) -> str:
        return f"{self.version_path}artifact"

    def policy_path(self, kind: str) -> str:
        """Location of a persisted policy document, e.g. ``policy_path("app")``."""
        return f"{self.version_path}policies/{kind}-policy.json"

    def __str__(self) -> str:
        return self.version_path if self.version else self.bucket_name


__all__ = ["StoragePath"]
