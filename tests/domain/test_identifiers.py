"""Tests for lcp.domain.identifiers module."""

import pytest

from lcp.core.errors import ValidationCode
from lcp.domain.identifiers import ApplicationId, TeamMoniker


class TestApplicationId:
    def test_generate_is_uuid_shaped(self):
        app_id = ApplicationId.generate().unwrap()
        assert ApplicationId.parse(str(app_id)).unwrap() == app_id

    def test_generate_is_unique(self):
        assert ApplicationId.generate().unwrap() != ApplicationId.generate().unwrap()

    @pytest.mark.parametrize("value", ["", None, "not-a-uuid", "123e4567-e89b-12d3-a456"])
    def test_parse_rejects_non_uuid(self, value):
        result = ApplicationId.parse(value)
        assert result.is_err()
        assert result.error.code is ValidationCode.INVALID_FORMAT

    def test_equality_by_value(self):
        raw = "123e4567-e89b-12d3-a456-426614174000"
        assert ApplicationId.parse(raw).unwrap() == ApplicationId(raw)


class TestTeamMoniker:
    def test_valid_pair_round_trips(self):
        tm = TeamMoniker.create("ab", "cd-e").unwrap()
        assert str(tm) == "ab/cd-e"

    def test_too_short(self):
        result = TeamMoniker.create("a", "x")
        assert result.is_err()
        assert result.error.code is ValidationCode.INVALID_FORMAT
        assert result.error.field == "team"

    def test_team_is_checked_before_moniker(self):
        result = TeamMoniker.create("", "")
        assert result.error.field == "team"
        assert result.error.code is ValidationCode.MISSING_REQUIRED

    def test_missing_moniker(self):
        result = TeamMoniker.create("core", None)
        assert result.error.field == "moniker"
        assert result.error.code is ValidationCode.MISSING_REQUIRED

    @pytest.mark.parametrize("moniker", ["Billing", "-billing", "billing-", "bill_ing", "bill ing"])
    def test_rejects_bad_moniker_format(self, moniker):
        result = TeamMoniker.create("core", moniker)
        assert result.error.code is ValidationCode.INVALID_FORMAT

    def test_equal_by_value(self):
        assert TeamMoniker.create("core", "billing").unwrap() == TeamMoniker("core", "billing")
