"""
Default policy provider.

Turns a version's dependency list into two least-privilege documents:

- **Runtime (app) policy:** one ``Allow`` statement per dependency granting
  ``{type}:*`` on exactly that resource, ``arn:*:{type}:*:*:{name}``.
- **CI/CD policy:** one ``Allow`` statement per dependency granting
  ``{type}:Create``, ``{type}:Update`` and ``{type}:Delete`` on every resource
  of that type, ``arn:*:{type}:*:*:*``, so pipelines can provision it.

Examples:
    >>> from lcp.domain.models import DependencyConfiguration
    >>> provider = DefaultPolicyProvider()
    >>> doc = provider.generate_app_policy([DependencyConfiguration(type="queue", name="jobs")]).unwrap()
    >>> doc.statements[0].resources
    ['arn:*:queue:*:*:jobs']
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from lcp.core.result import Ok, Result
from lcp.domain.models import DependencyConfiguration, PolicyDocument, PolicyStatement

POLICY_VERSION = "2012-10-17"


class DefaultPolicyProvider:
    """:class:`~lcp.protocols.PolicyProvider` producing IAM-style documents."""

    def __init__(self, policy_version: str = POLICY_VERSION):
        self.policy_version = policy_version

    def generate_app_policy(self, dependencies: Sequence[DependencyConfiguration]) -> Result[PolicyDocument]:
        statements = [
            PolicyStatement(
                effect="Allow",
                actions=[f"{dep.type}:*"],
                resources=[f"arn:*:{dep.type}:*:*:{dep.name}"],
            )
            for dep in dependencies
        ]
        return Ok(PolicyDocument(version=self.policy_version, statements=statements))

    def generate_cicd_policy(self, dependencies: Sequence[DependencyConfiguration]) -> Result[PolicyDocument]:
        statements = [
            PolicyStatement(
                effect="Allow",
                actions=[f"{dep.type}:Create", f"{dep.type}:Update", f"{dep.type}:Delete"],
                resources=[f"arn:*:{dep.type}:*:*:*"],
            )
            for dep in dependencies
        ]
        return Ok(PolicyDocument(version=self.policy_version, statements=statements))

    def serialize_policy(self, policy: PolicyDocument) -> str:
        return json.dumps(policy.to_storage(), indent=2)


__all__ = ["DefaultPolicyProvider", "POLICY_VERSION"]
