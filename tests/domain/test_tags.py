"""Tests for lcp.domain.tags module."""

import pytest

from lcp.core.errors import ValidationCode
from lcp.domain.tags import MANAGED_BY, MAX_KEY_LENGTH, MAX_TOTAL_TAGS, MAX_VALUE_LENGTH, ResourceTags


@pytest.fixture
def tags() -> ResourceTags:
    return ResourceTags.create("acme", "core", "billing", "1.0.0", "dev").unwrap()


class TestCreate:
    def test_mandatory_tags(self, tags):
        assert tags.to_dict() == {
            "lc:account": "acme",
            "lc:team": "core",
            "lc:application": "billing",
            "lc:version": "1.0.0",
            "lc:environment": "dev",
            "lc:managed-by": MANAGED_BY,
        }
        assert tags.custom_tags() == {}

    def test_missing_value(self):
        result = ResourceTags.create("acme", "core", "billing", "1.0.0", "")
        assert result.error.code is ValidationCode.MISSING_REQUIRED
        assert result.error.field == "environment"

    def test_is_read_only_mapping(self, tags):
        with pytest.raises(TypeError):
            tags["lc:team"] = "other"  # type: ignore[index]


class TestWithCustomTags:
    def test_merge(self, tags):
        merged = tags.with_custom_tags({"team-owner": "x"}).unwrap()
        assert merged["team-owner"] == "x"
        assert merged["lc:managed-by"] == "lc-platform"
        assert merged.custom_tags() == {"team-owner": "x"}

    def test_receiver_is_unchanged(self, tags):
        tags.with_custom_tags({"team-owner": "x"})
        assert "team-owner" not in tags

    def test_reserved_prefix_is_rejected(self, tags):
        result = tags.with_custom_tags({"lc:x": "y"})
        assert result.is_err()
        assert result.error.code is ValidationCode.INVALID_VALUE
        assert result.error.field == "lc:x"

    def test_collision_with_existing_custom_tag(self, tags):
        merged = tags.with_custom_tags({"owner": "a"}).unwrap()
        assert merged.with_custom_tags({"owner": "b"}).error.code is ValidationCode.INVALID_VALUE

    def test_merge_is_atomic(self, tags):
        merged = tags.with_custom_tags({"owner": "a"}).unwrap()
        result = merged.with_custom_tags({"cost-center": "42", "lc:team": "evil"})
        assert result.is_err()
        assert "cost-center" not in merged

    def test_empty_key(self, tags):
        assert tags.with_custom_tags({"": "x"}).is_err()

    def test_key_and_value_limits(self, tags):
        assert tags.with_custom_tags({"k" * MAX_KEY_LENGTH: "v"}).is_ok()
        assert tags.with_custom_tags({"k" * (MAX_KEY_LENGTH + 1): "v"}).is_err()
        assert tags.with_custom_tags({"k": "v" * MAX_VALUE_LENGTH}).is_ok()
        assert tags.with_custom_tags({"k": "v" * (MAX_VALUE_LENGTH + 1)}).is_err()

    def test_total_limit(self, tags):
        room = MAX_TOTAL_TAGS - len(tags)
        assert tags.with_custom_tags({f"k{i}": "v" for i in range(room)}).is_ok()
        assert tags.with_custom_tags({f"k{i}": "v" for i in range(room + 1)}).is_err()


class TestFromDict:
    def test_round_trip(self, tags):
        merged = tags.with_custom_tags({"owner": "a"}).unwrap()
        assert ResourceTags.from_dict(merged.to_dict()).unwrap() == merged

    def test_missing_mandatory(self):
        result = ResourceTags.from_dict({"lc:account": "acme"})
        assert result.error.code is ValidationCode.MISSING_REQUIRED
