"""
Configuration use cases.

Applications and versions are managed through the two facades
:class:`ApplicationConfigurator` and :class:`VersionConfigurator`; the
individual use-case classes are exported for callers that only need one.
"""

from lcp.configure.applications import (
    ApplicationConfigurator,
    DeleteApplication,
    InitApplication,
    ReadApplication,
    UpdateApplication,
    ValidateApplication,
)
from lcp.configure.requests import (
    ApplicationIdentifier,
    CacheArtifactRequest,
    DeployRequest,
    InitApplicationRequest,
    InitVersionRequest,
    UpdateApplicationRequest,
    UpdateVersionRequest,
    VersionIdentifier,
)
from lcp.configure.versions import (
    CacheArtifact,
    DeleteVersion,
    InitVersion,
    ReadVersion,
    UpdateVersion,
    VersionConfigurator,
    dependency_failures,
)

__all__ = [
    # Facades
    "ApplicationConfigurator",
    "VersionConfigurator",
    # Application use cases
    "InitApplication",
    "ReadApplication",
    "UpdateApplication",
    "DeleteApplication",
    "ValidateApplication",
    # Version use cases
    "InitVersion",
    "ReadVersion",
    "UpdateVersion",
    "DeleteVersion",
    "CacheArtifact",
    "dependency_failures",
    # Requests
    "ApplicationIdentifier",
    "VersionIdentifier",
    "InitApplicationRequest",
    "UpdateApplicationRequest",
    "InitVersionRequest",
    "UpdateVersionRequest",
    "CacheArtifactRequest",
    "DeployRequest",
]
