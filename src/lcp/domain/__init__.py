"""
Domain layer: identifiers, storage paths, tags, value records and entities.

Nothing here talks to a collaborator. Every fallible constructor returns a
:class:`~lcp.core.result.Result`.
"""

from lcp.domain.application import Application
from lcp.domain.deployment import Deployment, DeploymentStatus
from lcp.domain.identifiers import ApplicationId, TeamMoniker
from lcp.domain.models import (
    ApplicationMetadata,
    ApplicationRecord,
    ArtifactReference,
    ArtifactUploadMetadata,
    DependencyConfiguration,
    DeployedResource,
    DeploymentRecord,
    DeploymentResult,
    PolicyDocument,
    PolicyReferences,
    PolicyStatement,
    ValidationFailure,
    ValidationReport,
    VersionMetadata,
    VersionRecord,
)
from lcp.domain.paths import StoragePath
from lcp.domain.tags import ResourceTags
from lcp.domain.version import Version
from lcp.domain.versioning import SemanticVersion

__all__ = [
    "Application",
    "ApplicationId",
    "ApplicationMetadata",
    "ApplicationRecord",
    "ArtifactReference",
    "ArtifactUploadMetadata",
    "DependencyConfiguration",
    "DeployedResource",
    "Deployment",
    "DeploymentRecord",
    "DeploymentResult",
    "DeploymentStatus",
    "PolicyDocument",
    "PolicyReferences",
    "PolicyStatement",
    "ResourceTags",
    "SemanticVersion",
    "StoragePath",
    "TeamMoniker",
    "ValidationFailure",
    "ValidationReport",
    "Version",
    "VersionMetadata",
    "VersionRecord",
]
