"""Reference implementations of the collaborator protocols in :mod:`lcp.protocols`."""

from lcp.adapters.deployment import ProviderCall, SimulatedDeploymentProvider
from lcp.adapters.filesystem import LocalFileStorageProvider
from lcp.adapters.memory import InMemoryStorageProvider
from lcp.adapters.policy import DefaultPolicyProvider

__all__ = [
    "DefaultPolicyProvider",
    "InMemoryStorageProvider",
    "LocalFileStorageProvider",
    "ProviderCall",
    "SimulatedDeploymentProvider",
]
