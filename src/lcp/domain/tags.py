"""
Resource tagging with a reserved ``lc:`` namespace.

Every resource the platform provisions carries six mandatory tags::

    lc:account        lc:team           lc:application
    lc:version        lc:environment    lc:managed-by = lc-platform

Callers may add their own tags on top, but never inside the reserved
namespace and never over a key that is already present. A violation is a
validation failure, not a silent overwrite. Merging is atomic: either every
custom tag is accepted and a new :class:`ResourceTags` is returned, or the
whole merge fails and the receiver is unchanged.

Examples:
    >>> tags = ResourceTags.create("acme", "core", "billing", "1.0.0", "dev").unwrap()
    >>> tags.with_custom_tags({"lc:x": "y"}).is_err()
    True
    >>> merged = tags.with_custom_tags({"team-owner": "x"}).unwrap()
    >>> merged["team-owner"], merged["lc:managed-by"]
    ('x', 'lc-platform')
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from lcp.core.errors import ValidationCode, ValidationError
from lcp.core.result import Err, Ok, Result

RESERVED_PREFIX = "lc:"
MANAGED_BY = "lc-platform"

MAX_TOTAL_TAGS = 50
MAX_KEY_LENGTH = 128
MAX_VALUE_LENGTH = 256

_MANDATORY_KEYS = (
    "lc:account",
    "lc:team",
    "lc:application",
    "lc:version",
    "lc:environment",
    "lc:managed-by",
)


def _invalid(message: str, key: str | None = None) -> Err:
    return Err(ValidationError(ValidationCode.INVALID_VALUE, message, field=key))


class ResourceTags(Mapping[str, str]):
    """Immutable tag map: the mandatory ``lc:`` tags plus any accepted custom tags."""

    __slots__ = ("_tags",)

    def __init__(self, tags: Mapping[str, str]):
        self._tags = MappingProxyType(dict(tags))

    @classmethod
    def create(
        cls,
        account: str,
        team: str,
        moniker: str,
        version: str,
        environment: str,
    ) -> Result[ResourceTags]:
        fields = {
            "account": account,
            "team": team,
            "moniker": moniker,
            "version": version,
            "environment": environment,
        }
        for name, value in fields.items():
            if not value:
                return Err(
                    ValidationError(
                        ValidationCode.MISSING_REQUIRED,
                        f"{name} is required for resource tags",
                        field=name,
                    )
                )
        return Ok(
            cls(
                {
                    "lc:account": account,
                    "lc:team": team,
                    "lc:application": moniker,
                    "lc:version": version,
                    "lc:environment": environment,
                    "lc:managed-by": MANAGED_BY,
                }
            )
        )

    @classmethod
    def from_dict(cls, tags: Mapping[str, str]) -> Result[ResourceTags]:
        """Rebuild a tag set from a persisted mapping.

        The mandatory keys must all be present; everything else is merged
        through :meth:`with_custom_tags` so the same rules apply.
        """
        missing = [key for key in _MANDATORY_KEYS if not tags.get(key)]
        if missing:
            return Err(
                ValidationError(
                    ValidationCode.MISSING_REQUIRED,
                    f"Missing mandatory tags: {', '.join(missing)}",
                    field="tags",
                )
            )
        base = cls({key: tags[key] for key in _MANDATORY_KEYS})
        custom = {k: v for k, v in tags.items() if k not in _MANDATORY_KEYS}
        return base.with_custom_tags(custom)

    def with_custom_tags(self, custom: Mapping[str, str]) -> Result[ResourceTags]:
        merged = dict(self._tags)
        for key, value in custom.items():
            if not key:
                return _invalid("Tag keys must not be empty")
            if key.startswith(RESERVED_PREFIX):
                return _invalid(f"Tag key {key!r} uses the reserved {RESERVED_PREFIX!r} prefix", key)
            if key in merged:
                return _invalid(f"Tag key {key!r} collides with an existing tag", key)
            if len(key) > MAX_KEY_LENGTH:
                return _invalid(f"Tag key {key!r} exceeds {MAX_KEY_LENGTH} characters", key)
            if len(value) > MAX_VALUE_LENGTH:
                return _invalid(f"Value of tag {key!r} exceeds {MAX_VALUE_LENGTH} characters", key)
            merged[key] = value

        if len(merged) > MAX_TOTAL_TAGS:
            return _invalid(f"At most {MAX_TOTAL_TAGS} tags are allowed, got {len(merged)}")
        return Ok(ResourceTags(merged))

    def custom_tags(self) -> dict[str, str]:
        return {k: v for k, v in self._tags.items() if not k.startswith(RESERVED_PREFIX)}

    def to_dict(self) -> dict[str, str]:
        return dict(self._tags)

    def __getitem__(self, key: str) -> str:
        return self._tags[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"ResourceTags({dict(self._tags)!r})"


__all__ = [
    "ResourceTags",
    "RESERVED_PREFIX",
    "MANAGED_BY",
    "MAX_TOTAL_TAGS",
    "MAX_KEY_LENGTH",
    "MAX_VALUE_LENGTH",
]
