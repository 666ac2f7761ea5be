"""Helpers shared by the deployment orchestrations."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from lcp.configure.requests import DeployRequest
from lcp.core.errors import ConfigurationCode, ConfigurationError, configuration_error
from lcp.core.logging import LogContext
from lcp.core.result import Result, try_result
from lcp.domain.tags import ResourceTags

T = TypeVar("T")


def call_provider(f: Callable[[], Result[T]]) -> Result[T]:
    """Invoke a collaborator; a raised exception counts as an ``Err``."""
    return try_result(f).flat_map(lambda result: result)


def deployment_failed(message: str, cause: Exception, request: DeployRequest) -> ConfigurationError:
    """Provider failures are reported to callers as ``VALIDATION_FAILED``."""
    return configuration_error(
        ConfigurationCode.VALIDATION_FAILED,
        message,
        cause=cause,
        account=request.identifier.account,
        team=request.identifier.team,
        moniker=request.identifier.moniker,
        version=request.identifier.version,
        environment=request.environment,
    )


def deployment_tags(request: DeployRequest) -> Result[ResourceTags]:
    """Mandatory ``lc:`` tags for the target, merged with the caller's custom tags."""
    ident = request.identifier
    tags = ResourceTags.create(ident.account, ident.team, ident.moniker, ident.version, request.environment)
    if request.custom_tags:
        tags = tags.flat_map(lambda base: base.with_custom_tags(request.custom_tags))
    return tags.map_err(lambda e: deployment_failed(f"Invalid resource tags: {e}", e, request))


def log_context(request: DeployRequest) -> LogContext:
    ident = request.identifier
    return LogContext(
        account=ident.account,
        team=ident.team,
        moniker=ident.moniker,
        version=ident.version,
        environment=request.environment,
    )


__all__ = ["call_provider", "deployment_failed", "deployment_tags", "log_context"]
