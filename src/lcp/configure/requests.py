"""
Typed request objects for the configuration and deployment use cases.

Each dataclass is the *input* contract of one use case. Requests carry
caller-supplied data only; nothing here is validated until the use case
derives identities and paths from it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import BinaryIO

from lcp.domain.models import (
    ApplicationMetadata,
    ArtifactUploadMetadata,
    DependencyConfiguration,
    VersionMetadata,
)

# ------------------------------------------------------------------ #
# Identifiers
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class ApplicationIdentifier:
    account: str
    team: str
    moniker: str


@dataclass(frozen=True, slots=True)
class VersionIdentifier:
    account: str
    team: str
    moniker: str
    version: str

    @property
    def application(self) -> ApplicationIdentifier:
        return ApplicationIdentifier(self.account, self.team, self.moniker)


# ------------------------------------------------------------------ #
# Applications
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class InitApplicationRequest:
    """Request for :class:`lcp.configure.applications.InitApplication`."""

    identifier: ApplicationIdentifier
    metadata: ApplicationMetadata | None = None


@dataclass(frozen=True, slots=True)
class UpdateApplicationRequest:
    """Request for :class:`lcp.configure.applications.UpdateApplication`."""

    identifier: ApplicationIdentifier
    metadata: ApplicationMetadata


# ------------------------------------------------------------------ #
# Versions
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class InitVersionRequest:
    """Request for :class:`lcp.configure.versions.InitVersion`.

    Attributes:
        identifier: Version to register; ``identifier.version`` is the
            semantic version string.
        dependencies: Declared infrastructure, deployed in this order.
        metadata: Optional release notes, build number, commit.
    """

    identifier: VersionIdentifier
    dependencies: Sequence[DependencyConfiguration] = ()
    metadata: VersionMetadata | None = None


@dataclass(frozen=True, slots=True)
class UpdateVersionRequest:
    """Request for :class:`lcp.configure.versions.UpdateVersion`.

    ``None`` leaves the field as stored; an empty list clears dependencies.
    """

    identifier: VersionIdentifier
    dependencies: Sequence[DependencyConfiguration] | None = None
    metadata: VersionMetadata | None = None


@dataclass(frozen=True, slots=True)
class CacheArtifactRequest:
    """Request for :class:`lcp.configure.versions.CacheArtifact`."""

    identifier: VersionIdentifier
    stream: BinaryIO
    metadata: ArtifactUploadMetadata


# ------------------------------------------------------------------ #
# Deployment
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class DeployRequest:
    """Request for :mod:`lcp.deploy` orchestrations.

    Attributes:
        identifier: Version to deploy.
        environment: Target environment name, e.g. ``"dev"``.
        custom_tags: Extra resource tags; may not use the ``lc:`` prefix.
    """

    identifier: VersionIdentifier
    environment: str
    custom_tags: Mapping[str, str] = field(default_factory=dict)


__all__ = [
    "ApplicationIdentifier",
    "VersionIdentifier",
    "InitApplicationRequest",
    "UpdateApplicationRequest",
    "InitVersionRequest",
    "UpdateVersionRequest",
    "CacheArtifactRequest",
    "DeployRequest",
]
