"""Validation rules shared by the Application and Version entities."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result
from lcp.domain.models import DependencyConfiguration


def check_present_strings(model: BaseModel | None) -> Result[None]:
    """Reject optional string fields that are set but empty.

    ``None`` means "absent" and is always accepted; ``""`` is an explicit,
    invalid value. Whitespace is kept as given.
    """
    if model is None:
        return Ok(None)
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, str) and value == "":
            return Err(
                ValidationError(
                    ValidationCode.INVALID_VALUE,
                    f"{name} must not be empty when provided",
                    field=name,
                )
            )
    return Ok(None)


def check_dependencies(dependencies: Iterable[DependencyConfiguration]) -> Result[None]:
    for index, dependency in enumerate(dependencies):
        if not dependency.type.strip() or not dependency.name.strip():
            return Err(
                ValidationError(
                    ValidationCode.DEPENDENCY_INVALID,
                    f"Dependency #{index} needs both a type and a name",
                    field=f"dependencies[{index}]",
                )
            )
    return Ok(None)


__all__ = ["check_present_strings", "check_dependencies"]
