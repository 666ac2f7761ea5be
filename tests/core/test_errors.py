"""Tests for lcp.core.errors module."""

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
    configuration_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_to_dict_drops_unset(self):
        ctx = ErrorContext(account="acme", moniker="billing")
        assert ctx.to_dict() == {"account": "acme", "moniker": "billing"}

    def test_metadata_is_flattened(self):
        ctx = ErrorContext(path="a/b", metadata={"attempt": 2})
        assert ctx.to_dict() == {"path": "a/b", "attempt": 2}


class TestCategories:
    """Each subclass pins its category."""

    def test_default_categories(self):
        assert ValidationError(ValidationCode.MISSING_REQUIRED, "x").category is ErrorCategory.VALIDATION
        assert ConfigurationError(ConfigurationCode.NOT_FOUND, "x").category is ErrorCategory.CONFIGURATION
        assert StorageError(StorageCode.WRITE_FAILED, "x").category is ErrorCategory.STORAGE
        assert DeploymentError(DeploymentCode.DEPLOYMENT_FAILED, "x").category is ErrorCategory.DEPLOYMENT

    def test_all_are_lcp_errors(self):
        assert isinstance(StorageError(StorageCode.NOT_FOUND, "x"), LcpError)
        assert isinstance(ValidationError(ValidationCode.INVALID_FORMAT, "x"), Exception)

    def test_codes_carry_layer_prefix(self):
        assert ConfigurationCode.ALREADY_EXISTS.value == "CONFIGURATION_ALREADY_EXISTS"
        assert StorageCode.PARTIAL_UPLOAD.value == "STORAGE_PARTIAL_UPLOAD"
        assert DeploymentCode.ROLLBACK_FAILED.value == "DEPLOYMENT_ROLLBACK_FAILED"


class TestLcpError:
    """Test base error behaviour."""

    def test_str_is_message(self):
        assert str(StorageError(StorageCode.NOT_FOUND, "No record at x")) == "No record at x"

    def test_with_context_known_and_extra_fields(self):
        error = StorageError(StorageCode.READ_FAILED, "boom").with_context(path="p", attempt=3)
        assert error.context.path == "p"
        assert error.context.metadata == {"attempt": 3}

    def test_cause_is_chained(self):
        cause = OSError("disk")
        error = StorageError(StorageCode.WRITE_FAILED, "boom", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "disk"

    def test_validation_error_field(self):
        error = ValidationError(ValidationCode.INVALID_VALUE, "bad", field="owner")
        assert error.field == "owner"
        assert error.context.field_name == "owner"

    def test_repr(self):
        assert repr(StorageError(StorageCode.NOT_FOUND, "gone")) == "StorageError(STORAGE_NOT_FOUND, 'gone')"


class TestConfigurationErrorHelper:
    """Test configuration_error translation helper."""

    def test_copies_cause_context(self):
        cause = StorageError(StorageCode.NOT_FOUND, "missing").with_context(path="x", attempt=1)
        error = configuration_error(ConfigurationCode.NOT_FOUND, "not found", cause=cause, environment="dev")
        assert error.code is ConfigurationCode.NOT_FOUND
        assert error.cause is cause
        assert error.context.path == "x"
        assert error.context.environment == "dev"
        assert error.context.metadata == {"attempt": 1}

    def test_does_not_mutate_cause(self):
        cause = StorageError(StorageCode.NOT_FOUND, "missing")
        configuration_error(ConfigurationCode.NOT_FOUND, "not found", cause=cause, rollback_failures=[])
        assert cause.context.metadata == {}

    def test_without_cause(self):
        error = configuration_error(ConfigurationCode.ALREADY_EXISTS, "exists", path="p")
        assert error.cause is None
        assert error.context.to_dict() == {"path": "p"}
