"""
Application identity: ``ApplicationId`` and ``TeamMoniker``.

An application is identified twice. ``ApplicationId`` is an opaque UUID
minted once at creation and carried by every child record. The
``(account, team, moniker)`` triple is the human-facing identity and is what
storage paths are derived from (see :mod:`lcp.domain.paths`).

Both are immutable value objects compared by value. Build them through the
validated classmethods (``generate``/``parse``/``create``), which return a
:class:`~lcp.core.result.Result`.

Examples:
    >>> str(TeamMoniker.create("ab", "cd-e").unwrap())
    'ab/cd-e'
    >>> TeamMoniker.create("a", "x").is_err()
    True
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_MONIKER_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")


@dataclass(frozen=True, slots=True)
class ApplicationId:
    """Opaque, UUID-shaped application identifier."""

    value: str

    @classmethod
    def generate(cls) -> Result[ApplicationId]:
        """Mint a fresh random identifier.

        Cannot fail in practice; returns a Result so callers treat it like
        every other validated constructor.
        """
        return Ok(cls(str(uuid.uuid4())))

    @classmethod
    def parse(cls, value: str | None) -> Result[ApplicationId]:
        if not value or not _UUID_PATTERN.match(value):
            return Err(
                ValidationError(
                    ValidationCode.INVALID_FORMAT,
                    f"Application id must be a UUID, got {value!r}",
                    field="id",
                )
            )
        return Ok(cls(value))

    def __str__(self) -> str:
        return self.value


def _check_token(name: str, value: str | None) -> ValidationError | None:
    if not value:
        return ValidationError(ValidationCode.MISSING_REQUIRED, f"{name} is required", field=name)
    if len(value) < 2 or not _MONIKER_PATTERN.match(value):
        return ValidationError(
            ValidationCode.INVALID_FORMAT,
            f"{name} must be at least 2 lowercase alphanumeric characters or hyphens, "
            f"starting and ending alphanumeric; got {value!r}",
            field=name,
        )
    return None


@dataclass(frozen=True, slots=True)
class TeamMoniker:
    """The (team, moniker) pair naming an application within an account."""

    team: str
    moniker: str

    @classmethod
    def create(cls, team: str | None, moniker: str | None) -> Result[TeamMoniker]:
        for name, value in (("team", team), ("moniker", moniker)):
            error = _check_token(name, value)
            if error is not None:
                return Err(error)
        return Ok(cls(team, moniker))  # type: ignore[arg-type]

    def __str__(self) -> str:
        return f"{self.team}/{self.moniker}"


__all__ = ["ApplicationId", "TeamMoniker"]
