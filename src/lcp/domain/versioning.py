"""
Semantic version numbers.

Ordering compares major, minor and patch numerically. A release always
sorts above any prerelease of the same ``major.minor.patch``; two
prereleases compare as plain strings.

Compatibility follows the usual caret rule: for ``0.x`` versions major and
minor must both match (unstable API), from ``1.0.0`` on only major must
match.

Examples:
    >>> SemanticVersion.parse("1.0.0").unwrap() > SemanticVersion.parse("1.0.0-beta").unwrap()
    True
    >>> v = SemanticVersion.parse("0.3.0").unwrap()
    >>> v.is_compatible_with(SemanticVersion.parse("0.4.0").unwrap())
    False
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result

_VERSION_PATTERN = re.compile(
    r"^(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
_PRERELEASE_PATTERN = re.compile(r"^[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*$")


@functools.total_ordering
@dataclass(frozen=True, slots=True, eq=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    @classmethod
    def parse(cls, value: str | None) -> Result[SemanticVersion]:
        match = _VERSION_PATTERN.match(value or "")
        if match is None:
            return Err(
                ValidationError(
                    ValidationCode.INVALID_FORMAT,
                    f"Not a semantic version: {value!r}",
                    field="version",
                )
            )
        major, minor, patch, prerelease = match.groups()
        return Ok(cls(int(major), int(minor), int(patch), prerelease))

    @classmethod
    def create(
        cls,
        major: int,
        minor: int,
        patch: int,
        prerelease: str | None = None,
    ) -> Result[SemanticVersion]:
        if major < 0 or minor < 0 or patch < 0:
            return Err(
                ValidationError(
                    ValidationCode.INVALID_VALUE,
                    f"Version components must be non-negative: {major}.{minor}.{patch}",
                    field="version",
                )
            )
        if prerelease is not None and not _PRERELEASE_PATTERN.match(prerelease):
            return Err(
                ValidationError(
                    ValidationCode.INVALID_FORMAT,
                    f"Illegal prerelease identifier: {prerelease!r}",
                    field="prerelease",
                )
            )
        return Ok(cls(major, minor, patch, prerelease))

    def compare_to(self, other: SemanticVersion) -> int:
        """Negative, zero or positive as ``self`` sorts before, equal to or after ``other``."""
        for mine, theirs in (
            (self.major, other.major),
            (self.minor, other.minor),
            (self.patch, other.patch),
        ):
            if mine != theirs:
                return mine - theirs

        if self.prerelease == other.prerelease:
            return 0
        if not self.prerelease:
            return 1
        if not other.prerelease:
            return -1
        return -1 if self.prerelease < other.prerelease else 1

    def is_greater_than(self, other: SemanticVersion) -> bool:
        return self.compare_to(other) > 0

    def is_compatible_with(self, other: SemanticVersion) -> bool:
        if self.major == 0 or other.major == 0:
            return self.major == other.major and self.minor == other.minor
        return self.major == other.major

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare_to(other) < 0

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += f"-{self.prerelease}"
        return version


__all__ = ["SemanticVersion"]
