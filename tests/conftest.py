"""
Shared pytest fixtures for lcp tests.

This module provides:
- Collaborators: in-memory storage, default policy provider, simulated
  deployment provider
- Identifiers for a sample application and version
- Seeded application/version records for use-case tests
- Isolation: cached settings and structlog configuration are reset per test
"""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest
import structlog

from lcp.adapters import DefaultPolicyProvider, InMemoryStorageProvider, SimulatedDeploymentProvider
from lcp.configure import (
    ApplicationConfigurator,
    ApplicationIdentifier,
    InitApplicationRequest,
    InitVersionRequest,
    VersionConfigurator,
    VersionIdentifier,
)
from lcp.core.settings import get_settings
from lcp.domain.models import ApplicationMetadata, DependencyConfiguration

ACCOUNT = "acme"
TEAM = "core"
MONIKER = "billing"
VERSION = "1.0.0"


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_ambient_state(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None, None, None]:
    """Keep settings and logging from leaking between tests."""
    monkeypatch.setenv("LCP_DATA_DIR", str(tmp_path / "lcp-data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
    # drop handlers basicConfig bound to streams a CliRunner has since closed
    root = logging.getLogger()
    for handler in [h for h in root.handlers if type(h) is logging.StreamHandler]:
        root.removeHandler(handler)


# =============================================================================
# Collaborators
# =============================================================================


@pytest.fixture
def storage() -> InMemoryStorageProvider:
    return InMemoryStorageProvider()


@pytest.fixture
def policy() -> DefaultPolicyProvider:
    return DefaultPolicyProvider()


@pytest.fixture
def deployer() -> SimulatedDeploymentProvider:
    return SimulatedDeploymentProvider()


# =============================================================================
# Identifiers and seeded records
# =============================================================================


@pytest.fixture
def app_identifier() -> ApplicationIdentifier:
    return ApplicationIdentifier(ACCOUNT, TEAM, MONIKER)


@pytest.fixture
def version_identifier() -> VersionIdentifier:
    return VersionIdentifier(ACCOUNT, TEAM, MONIKER, VERSION)


@pytest.fixture
def dependencies() -> list[DependencyConfiguration]:
    return [
        DependencyConfiguration(type="database", name="postgres"),
        DependencyConfiguration(type="queue", name="rabbitmq"),
    ]


@pytest.fixture
def applications(storage: InMemoryStorageProvider) -> ApplicationConfigurator:
    return ApplicationConfigurator(storage)


@pytest.fixture
def versions(storage: InMemoryStorageProvider, policy: DefaultPolicyProvider) -> VersionConfigurator:
    return VersionConfigurator(storage, policy)


@pytest.fixture
def seeded_application(applications: ApplicationConfigurator, app_identifier: ApplicationIdentifier):
    """An application stored under acme/core/billing."""
    request = InitApplicationRequest(app_identifier, ApplicationMetadata(display_name="Billing"))
    return applications.init(request).unwrap()


@pytest.fixture
def seeded_version(
    seeded_application,
    versions: VersionConfigurator,
    version_identifier: VersionIdentifier,
    dependencies: list[DependencyConfiguration],
):
    """Version 1.0.0 of the seeded application, declaring postgres then rabbitmq."""
    return versions.init(InitVersionRequest(version_identifier, dependencies=dependencies)).unwrap()
