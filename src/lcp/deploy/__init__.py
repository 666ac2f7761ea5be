"""Deployment orchestration: dependencies first, then the application."""

from lcp.deploy.application import DeployApplication
from lcp.deploy.dependencies import DependencyDeploymentOutcome, DeployDependencies

__all__ = ["DeployApplication", "DeployDependencies", "DependencyDeploymentOutcome"]
