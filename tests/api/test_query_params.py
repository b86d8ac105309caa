"""Tests for comma separated query parsing."""

import pytest

from member_stats.api.exceptions import BadRequestError
from member_stats.api.services.query_params import parse_comma_separated, parse_group_ids


class TestParseCommaSeparated:

    def test_not_given(self):
        assert parse_comma_separated(None) is None
        assert parse_comma_separated("") is None

    def test_keeps_order(self):
        assert parse_comma_separated("wins,userId", ["userId", "wins"]) == ["wins", "userId"]

    def test_empty_entry(self):
        with pytest.raises(BadRequestError, match="Empty value."):
            parse_comma_separated("userId,,wins")

    def test_value_outside_allow_list(self):
        with pytest.raises(BadRequestError, match="Invalid value: email"):
            parse_comma_separated("userId,email", ["userId", "wins"])

    def test_duplicate(self):
        with pytest.raises(BadRequestError, match="Duplicate values: wins") as exc:
            parse_comma_separated("wins,wins", ["wins"])
        assert exc.value.status_code == 400


class TestParseGroupIds:

    def test_integers(self):
        assert parse_group_ids("10,20") == [10, 20]

    def test_not_given(self):
        assert parse_group_ids(None) is None

    def test_non_integer(self):
        with pytest.raises(BadRequestError, match="Invalid group id: abc"):
            parse_group_ids("10,abc")
