"""
LC platform configuration library.

Registers applications and their versions, caches build artifacts,
generates least-privilege policies and orchestrates dependency and
application deployments with rollback. Storage, policy and deployment
backends are reached through the protocols in :mod:`lcp.protocols`.

- lcp.core: Result type, errors, logging, settings
- lcp.domain: Entities and value objects
- lcp.configure: Application and version use cases
- lcp.deploy: Deployment orchestration
- lcp.adapters: Reference collaborators
"""

__version__ = "0.1.0"
