"""
Structured error types for the LC platform configuration library.

Every fallible operation in ``lcp`` returns a :class:`~lcp.core.result.Result`
instead of raising. The ``Err`` side of that result always carries one of the
exceptions defined here, so callers can branch on a stable, closed set of
error codes rather than on free-form messages.

Manifesto:
    - **Closed code sets:** Each layer owns one ``str`` enum of error codes
      with stable string values that survive serialization.
    - **Layer translation:** Use cases translate lower-layer errors into a
      :class:`ConfigurationError`, keeping the original as ``cause``.
    - **Rich context:** Errors carry account/team/moniker/version and a free
      ``metadata`` dict for logging and side-channel reporting.

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────────┐
        │                         LcpError                               │
        │           (code, category, context, cause)                     │
        ├───────────────────────────────────────────────────────────────┤
        │  ValidationError      ConfigurationError                       │
        │  (ValidationCode)     (ConfigurationCode)                      │
        │                                                                │
        │  StorageError         DeploymentError                          │
        │  (StorageCode)        (DeploymentCode)                         │
        └───────────────────────────────────────────────────────────────┘

Examples:
    >>> err = ValidationError(ValidationCode.MISSING_REQUIRED, "team is required")
    >>> err.code.value
    'VALIDATION_MISSING_REQUIRED'
    >>> err.category.value
    'VALIDATION'

Guardrails:
    ❌ DON'T: Raise these for expected failures
    ✅ DO: Return ``Err(ValidationError(...))`` from fallible operations

    ❌ DON'T: Compare messages to decide what went wrong
    ✅ DO: Compare ``error.code`` against the enum members

Tags:
    errors, error-codes, error-context, lcp-core
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """High-level classification used for logging and reporting."""

    VALIDATION = "VALIDATION"
    CONFIGURATION = "CONFIGURATION"
    STORAGE = "STORAGE"
    DEPLOYMENT = "DEPLOYMENT"
    POLICY = "POLICY"
    INTERNAL = "INTERNAL"


class ValidationCode(str, Enum):
    """Failures while constructing values and entities."""

    MISSING_REQUIRED = "VALIDATION_MISSING_REQUIRED"
    INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"
    INVALID_VALUE = "VALIDATION_INVALID_VALUE"
    TAG_COLLISION = "VALIDATION_TAG_COLLISION"
    DEPENDENCY_INVALID = "VALIDATION_DEPENDENCY_INVALID"


class ConfigurationCode(str, Enum):
    """Outcomes of the configuration and deployment use cases."""

    ALREADY_EXISTS = "CONFIGURATION_ALREADY_EXISTS"
    NOT_FOUND = "CONFIGURATION_NOT_FOUND"
    VALIDATION_FAILED = "CONFIGURATION_VALIDATION_FAILED"
    STORAGE_ERROR = "CONFIGURATION_STORAGE_ERROR"
    INVALID_FORMAT = "CONFIGURATION_INVALID_FORMAT"


class StorageCode(str, Enum):
    """Failures reported by a storage provider."""

    READ_FAILED = "STORAGE_READ_FAILED"
    WRITE_FAILED = "STORAGE_WRITE_FAILED"
    DELETE_FAILED = "STORAGE_DELETE_FAILED"
    NOT_FOUND = "STORAGE_NOT_FOUND"
    PERMISSION_DENIED = "STORAGE_PERMISSION_DENIED"
    UPLOAD_FAILED = "STORAGE_UPLOAD_FAILED"
    PARTIAL_UPLOAD = "STORAGE_PARTIAL_UPLOAD"


class DeploymentCode(str, Enum):
    """Failures reported by a deployment provider."""

    ARTIFACT_NOT_CACHED = "DEPLOYMENT_ARTIFACT_NOT_CACHED"
    DEPENDENCIES_NOT_DEPLOYED = "DEPLOYMENT_DEPENDENCIES_NOT_DEPLOYED"
    DEPLOYMENT_FAILED = "DEPLOYMENT_FAILED"
    ROLLBACK_FAILED = "DEPLOYMENT_ROLLBACK_FAILED"
    INVALID_ENVIRONMENT = "DEPLOYMENT_INVALID_ENVIRONMENT"
    POLICY_NOT_GENERATED = "DEPLOYMENT_POLICY_NOT_GENERATED"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Typed fields cover the identifiers every operation in this library works
    with; anything else goes into ``metadata``. ``to_dict()`` drops unset
    fields so the result can be passed straight to a structlog call.

    Examples:
        >>> ctx = ErrorContext(account="acme", team="core", moniker="billing")
        >>> ctx.to_dict()
        {'account': 'acme', 'team': 'core', 'moniker': 'billing'}
        >>> ctx.metadata["attempt"] = 2
        >>> ctx.to_dict()["attempt"]
        2
    """

    account: str | None = None
    team: str | None = None
    moniker: str | None = None
    version: str | None = None
    environment: str | None = None
    path: str | None = None
    field_name: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["account", "team", "moniker", "version", "environment", "path", "field_name"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class LcpError(Exception):
    """
    Base exception for all LC platform errors.

    Subclasses pin ``default_category`` and narrow ``code`` to their own enum.
    The error is a value: it is normally returned inside ``Err`` and only
    raised by :meth:`~lcp.core.result.Err.unwrap`.

    Args:
        code: Layer-specific error code.
        message: Human-readable description.
        category: Override for ``default_category``.
        context: Structured metadata; a fresh one is created when omitted.
        cause: Lower-layer error this one was translated from.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        code: Enum,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> LcpError:
        """
        Add context to this error (fluent API).

        Known fields are set on the context directly, anything else lands in
        ``context.metadata``.
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.code.value}, {self.message!r})"


class ValidationError(LcpError):
    """Value or entity construction failed. Never retryable, the input must change."""

    default_category = ErrorCategory.VALIDATION
    code: ValidationCode

    def __init__(self, code: ValidationCode, message: str, *, field: str | None = None, **kwargs: Any):
        super().__init__(code, message, **kwargs)
        if field is not None:
            self.context.field_name = field

    @property
    def field(self) -> str | None:
        return self.context.field_name


class ConfigurationError(LcpError):
    """Use-case level outcome surfaced to callers."""

    default_category = ErrorCategory.CONFIGURATION
    code: ConfigurationCode

    def __init__(self, code: ConfigurationCode, message: str, **kwargs: Any):
        super().__init__(code, message, **kwargs)


class StorageError(LcpError):
    """Failure reported by a storage provider."""

    default_category = ErrorCategory.STORAGE
    code: StorageCode

    def __init__(self, code: StorageCode, message: str, **kwargs: Any):
        super().__init__(code, message, **kwargs)


class DeploymentError(LcpError):
    """Failure reported by a deployment or policy provider."""

    default_category = ErrorCategory.DEPLOYMENT
    code: DeploymentCode

    def __init__(self, code: DeploymentCode, message: str, **kwargs: Any):
        super().__init__(code, message, **kwargs)


def configuration_error(
    code: ConfigurationCode,
    message: str,
    cause: Exception | None = None,
    **context: Any,
) -> ConfigurationError:
    """Build a :class:`ConfigurationError`, copying context from ``cause`` when it has any."""
    ctx = ErrorContext()
    if isinstance(cause, LcpError):
        ctx = replace(cause.context, metadata=dict(cause.context.metadata))
    error = ConfigurationError(code, message, context=ctx, cause=cause)
    return error.with_context(**context)  # type: ignore[return-value]


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ValidationCode",
    "ConfigurationCode",
    "StorageCode",
    "DeploymentCode",
    "LcpError",
    "ValidationError",
    "ConfigurationError",
    "StorageError",
    "DeploymentError",
    "configuration_error",
]
