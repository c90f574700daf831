"""Tests for the list query builder.

Property-based tests cover the sort grammar and the pagination arithmetic;
example tests cover filter, search and projection handling.
"""
import json

import pytest
from hypothesis import assume, given, strategies as st

from cities_api.application.services.city_query_builder import CityQueryBuilder
from cities_api.constants import CITY_FIELDS, MSG_INVALID_SORT
from cities_api.core.exceptions import (
    InvalidPaginationError,
    InvalidSortError,
    MalformedFilterError,
)
from cities_api.domain.value_objects.city_query import (
    FieldCondition,
    MatchOperator,
    SortDirection,
    predicate_matches,
)

builder = CityQueryBuilder(default_page=1, default_limit=10, max_limit=100)


def _is_valid_sort(raw: str) -> bool:
    parts = raw.split(":")
    return len(parts) == 2 and parts[0] in CITY_FIELDS and parts[1] in ("asc", "desc")


class TestSortParsing:
    """Sort parameter grammar: ``field:asc`` or ``field:desc``."""

    @given(st.sampled_from(CITY_FIELDS), st.sampled_from(["asc", "desc"]))
    def test_valid_sort(self, field, direction):
        """Property: valid sort strings map to the field with +1/-1."""
        query = builder.build(sort=f"{field}:{direction}")

        assert query.sort.field == field
        assert query.sort.direction == (SortDirection.ASC if direction == "asc" else SortDirection.DESC)
        assert query.sort.direction.value == (1 if direction == "asc" else -1)

    @given(st.text(min_size=1, max_size=30))
    def test_any_other_shape_rejected(self, raw):
        """Property: every non-empty string outside the grammar is rejected."""
        assume(not _is_valid_sort(raw))

        with pytest.raises(InvalidSortError) as exc_info:
            builder.build(sort=raw)

        assert exc_info.value.message == MSG_INVALID_SORT

    @pytest.mark.parametrize("raw", [
        "population",
        "population:ascending",
        "population:ASC",
        ":asc",
        "name:asc:extra",
        "mayor:asc",
    ])
    def test_known_bad_shapes(self, raw):
        with pytest.raises(InvalidSortError):
            builder.build(sort=raw)

    @pytest.mark.parametrize("raw", [None, ""])
    def test_absent_sort_means_natural_order(self, raw):
        assert builder.build(sort=raw).sort is None


class TestPagination:
    """Skip/offset pagination."""

    @given(st.integers(min_value=1, max_value=100_000), st.integers(min_value=1, max_value=100))
    def test_skip_formula(self, page, limit):
        """Property: skip = (page - 1) * limit."""
        query = builder.build(page=str(page), limit=str(limit))

        assert query.page == page
        assert query.limit == limit
        assert query.skip == (page - 1) * limit

    def test_third_page_of_ten_skips_twenty(self):
        assert builder.build(page="3", limit="10").skip == 20

    def test_defaults(self):
        query = builder.build()

        assert (query.page, query.limit, query.skip) == (1, 10, 0)

    @given(st.integers(max_value=0))
    def test_non_positive_page_rejected(self, page):
        with pytest.raises(InvalidPaginationError):
            builder.build(page=str(page))

    @pytest.mark.parametrize("limit", ["0", "-5", "abc", "2.5", "101"])
    def test_bad_limit_rejected(self, limit):
        with pytest.raises(InvalidPaginationError):
            builder.build(limit=limit)

    def test_whitespace_tolerated(self):
        assert builder.build(page=" 2 ").page == 2

    @pytest.mark.parametrize("raw", ["1_000", "+2", "٢", "²", "1e3", " - 1"])
    def test_non_plain_digits_rejected(self, raw):
        with pytest.raises(InvalidPaginationError):
            builder.build(page=raw)
        with pytest.raises(InvalidPaginationError):
            builder.build(limit=raw)

    def test_page_whose_skip_overflows_int64_rejected(self):
        with pytest.raises(InvalidPaginationError):
            builder.build(page=str(10 ** 19), limit="10")

    def test_largest_page_with_int64_skip_accepted(self):
        page = (2 ** 63 - 1) // 10 + 1

        query = builder.build(page=str(page), limit="10")

        assert query.skip <= 2 ** 63 - 1
        with pytest.raises(InvalidPaginationError):
            builder.build(page=str(page + 1), limit="10")

    def test_page_beyond_int_conversion_limit_rejected(self):
        with pytest.raises(InvalidPaginationError):
            builder.build(page="9" * 5000)


class TestFilterParsing:
    """JSON filter into allow-listed equality conditions."""

    def test_equality_conditions(self):
        query = builder.build(filter=json.dumps({"country": "US", "population": 1000}))

        assert query.predicate == (
            FieldCondition("country", MatchOperator.EQ, "US"),
            FieldCondition("population", MatchOperator.EQ, 1000),
        )

    @pytest.mark.parametrize("raw", [
        "{country: US}",
        "{'country': 'US'}",
        '{"country": "US"',
        "not json",
    ])
    def test_malformed_json(self, raw):
        with pytest.raises(MalformedFilterError):
            builder.build(filter=raw)

    @pytest.mark.parametrize("raw", ['["US"]', '"US"', "42", "null"])
    def test_non_object_rejected(self, raw):
        with pytest.raises(MalformedFilterError):
            builder.build(filter=raw)

    def test_unknown_field_rejected(self):
        with pytest.raises(MalformedFilterError) as exc_info:
            builder.build(filter='{"mayor": "Quimby"}')

        assert "mayor" in exc_info.value.message

    @pytest.mark.parametrize("raw", [
        '{"$where": "sleep(1000)"}',
        '{"population": {"$gt": 0}}',
        '{"name": {"$regex": ".*"}}',
        '{"name": ["a", "b"]}',
        '{"name": null}',
        '{"population": true}',
    ])
    def test_operators_and_non_scalars_rejected(self, raw):
        with pytest.raises(MalformedFilterError):
            builder.build(filter=raw)

    def test_empty_filter_ignored(self):
        assert builder.build(filter="").predicate == ()


class TestSearch:
    """Case-insensitive substring search on name."""

    @pytest.mark.parametrize("name,expected", [
        ("Springfield", True),
        ("SPRINGER", True),
        ("Denver", False),
    ])
    def test_search_matches_name_case_insensitively(self, name, expected):
        query = builder.build(search="spr")

        assert predicate_matches(query.predicate, {"name": name}) is expected

    def test_search_combined_with_filter(self):
        query = builder.build(filter='{"country": "US"}', search="san")

        assert predicate_matches(query.predicate, {"name": "San Jose", "country": "US"})
        assert not predicate_matches(query.predicate, {"name": "Santiago", "country": "Chile"})
        assert not predicate_matches(query.predicate, {"name": "Denver", "country": "US"})

    def test_name_filter_and_search_both_apply(self):
        query = builder.build(filter='{"name": "San Jose"}', search="jose")

        assert len(query.predicate) == 2
        assert predicate_matches(query.predicate, {"name": "San Jose"})
        assert not predicate_matches(query.predicate, {"name": "Jose"})

    def test_search_is_literal(self):
        query = builder.build(search="a.c")

        assert predicate_matches(query.predicate, {"name": "Ba.con"})
        assert not predicate_matches(query.predicate, {"name": "Abc"})

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_search_ignored(self, raw):
        assert builder.build(search=raw).predicate == ()


class TestProjection:

    def test_fields_split_and_trimmed(self):
        assert builder.build(fields="name, country").projection == ("name", "country")

    def test_unknown_and_duplicate_fields_ignored(self):
        assert builder.build(fields="name,mayor,name,,population").projection == ("name", "population")

    def test_only_unknown_fields_means_all(self):
        assert builder.build(fields="mayor").projection == ()
