"""
Core primitives shared by every layer of ``lcp``.

- :mod:`lcp.core.result`: ``Ok``/``Err`` outcome type
- :mod:`lcp.core.errors`: error codes and exception hierarchy
- :mod:`lcp.core.timestamps`: UTC and ISO-8601 helpers
- :mod:`lcp.core.logging`: structlog configuration
- :mod:`lcp.core.settings`: pydantic-settings configuration
"""

from lcp.core.errors import (
    ConfigurationCode,
    ConfigurationError,
    DeploymentCode,
    DeploymentError,
    ErrorCategory,
    ErrorContext,
    LcpError,
    StorageCode,
    StorageError,
    ValidationCode,
    ValidationError,
)
from lcp.core.result import Err, Ok, Result, collect_results, try_result

__all__ = [
    "ConfigurationCode",
    "ConfigurationError",
    "DeploymentCode",
    "DeploymentError",
    "ErrorCategory",
    "ErrorContext",
    "LcpError",
    "StorageCode",
    "StorageError",
    "ValidationCode",
    "ValidationError",
    "Err",
    "Ok",
    "Result",
    "collect_results",
    "try_result",
]
