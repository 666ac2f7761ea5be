"""
Result envelope for consistent success/failure handling.

Every fallible operation in ``lcp`` returns ``Ok[T]`` on success or
``Err[T]`` on failure instead of raising. Callers are forced to branch on
both cases, usually with structural pattern matching.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions that callers might miss
    - **Functional composition:** Chain steps with ``map``/``flat_map``
      without nested try/except blocks
    - **Exceptions at the edge:** Collaborators that raise are bridged into
      the Result world with :func:`try_result`

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     Result[T]                                │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │     Ok[T]       │     Err[T]      │     Utilities           │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result()          │
        │ • map()         │ • map_err()     │ • collect_results()     │
        │ • flat_map()    │ • or_else()     │                         │
        │ • unwrap()      │ • unwrap_or()   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> from lcp.core.result import Ok, Err, Result
    >>> def divide(a: int, b: int) -> Result[float]:
    ...     if b == 0:
    ...         return Err(ValueError("Division by zero"))
    ...     return Ok(a / b)
    >>> match divide(10, 2):
    ...     case Ok(value):
    ...         print(f"Result: {value}")
    ...     case Err(error):
    ...         print(f"Error: {error}")
    Result: 5.0

Guardrails:
    ❌ DON'T: Use unwrap() without checking is_ok() first
    ✅ DO: Use unwrap_or() or pattern matching for safe extraction

    ❌ DON'T: Raise exceptions inside map/flat_map functions
    ✅ DO: Return Err from flat_map if the operation can fail

Tags:
    result-pattern, error-handling, functional-programming, lcp-core
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from lcp.core.errors import LcpError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Examples:
        >>> Ok(10).map(lambda x: x * 2).unwrap()
        20
        >>> Ok(5).flat_map(lambda x: Ok(x + 1) if x > 0 else Err(ValueError())).unwrap()
        6
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        """Get value or call f with error (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Alias for flat_map."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform error if Err (no-op for Ok)."""
        return self

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Return self if Ok, otherwise call f with error."""
        return self

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """Call f with value for side effects, return self."""
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects (no-op for Ok)."""
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``map`` and ``flat_map`` pass an Err through unchanged, so a chain of
    steps stops at the first failure. ``unwrap`` raises the carried error.

    Examples:
        >>> Err(ValueError("x")).map(lambda x: x * 2).is_err()
        True
        >>> Err(ValueError("x")).unwrap_or("default")
        'default'
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def unwrap_or_else(self, f: Callable[[Exception], T]) -> T:
        """Call f with error to get value."""
        return f(self.error)

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def or_else(self, f: Callable[[Exception], Result[T]]) -> Result[T]:
        """Call f with error to try recovery."""
        return f(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T]:
        """No-op for Err."""
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, LcpError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a function and wrap its outcome in a Result.

    The bridge between exception-raising collaborators and Result-based code:
    a normal return becomes ``Ok``, any ``Exception`` becomes ``Err``.

    Examples:
        >>> import json
        >>> try_result(lambda: json.loads('{"a": 1}')).unwrap()
        {'a': 1}
        >>> try_result(lambda: json.loads('invalid')).is_err()
        True
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


def collect_results(results: Iterable[Result[T]]) -> Result[list[T]]:
    """
    Collect an iterable of Results into a Result of a list.

    Returns the first Err encountered, otherwise Ok with all values in order.

    Examples:
        >>> collect_results([Ok(1), Ok(2)]).unwrap()
        [1, 2]
        >>> collect_results([Ok(1), Err(ValueError("bad"))]).is_err()
        True
    """
    values: list[T] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


__all__ = ["Ok", "Err", "Result", "try_result", "collect_results"]
