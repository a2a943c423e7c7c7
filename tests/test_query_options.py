# tests/test_query_options.py
"""
Unit tests for sort/search string parsing
"""
import pytest

from shared.query_options import (
    QueryOptions,
    QueryStringError,
    SortDirection,
    ensure_allowed_fields,
    parse_search,
    parse_sort,
)


class TestParseSort:
    """Sort string -> ordered (field, direction) pairs"""

    def test_two_fields_keep_order(self):
        assert parse_sort("name:asc,age:desc") == [
            ("name", SortDirection.ASC),
            ("age", SortDirection.DESC),
        ]

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_input(self, value):
        assert parse_sort(value) == []

    def test_direction_aliases(self):
        assert parse_sort("a:ASC,b:Descending,c:1,d:-1") == [
            ("a", SortDirection.ASC),
            ("b", SortDirection.DESC),
            ("c", SortDirection.ASC),
            ("d", SortDirection.DESC),
        ]

    def test_whitespace_is_trimmed(self):
        assert parse_sort(" name : desc ") == [("name", SortDirection.DESC)]

    def test_directions_match_pymongo(self):
        assert int(SortDirection.ASC) == 1
        assert int(SortDirection.DESC) == -1

    @pytest.mark.parametrize(
        "value",
        [
            "name",  # missing colon
            "name:asc,age",  # one bad segment rejects everything
            "name:asc,,age:desc",
            ":asc",
            "name:",
            "name:up",
            "a:b:c",
            "$natural:asc",
            "name:asc,$where:desc",
        ],
    )
    def test_malformed_rejects_whole_string(self, value):
        with pytest.raises(QueryStringError):
            parse_sort(value)


class TestParseSearch:
    """Search string -> case-insensitive regex filter"""

    def test_single_field(self):
        assert parse_search("first_name:ann") == {
            "first_name": {"$regex": "ann", "$options": "i"},
        }

    def test_regex_metacharacters_are_escaped(self):
        spec = parse_search("email:a.b+c")
        assert spec["email"]["$regex"] == r"a\.b\+c"

    def test_empty_input(self):
        assert parse_search(None) == {}
        assert parse_search("") == {}

    def test_value_with_colon_is_rejected(self):
        # No escaping of delimiters is supported.
        with pytest.raises(QueryStringError):
            parse_search("url:http://x")

    @pytest.mark.parametrize("value", ["$where:x", "$or:x", "name:a, $expr:b"])
    def test_operator_fields_are_rejected(self, value):
        with pytest.raises(QueryStringError, match="Operators are not allowed"):
            parse_search(value)


class TestQueryOptions:
    def test_is_paginated_needs_both(self):
        assert QueryOptions(page=1, page_size=10).is_paginated
        assert not QueryOptions(page=1).is_paginated
        assert not QueryOptions(page_size=10).is_paginated
        assert not QueryOptions().is_paginated


class TestEnsureAllowedFields:
    """Features restrict which fields clients may sort and search on"""

    ALLOWED = {"email", "first_name"}

    def test_allowed_fields_pass(self):
        ensure_allowed_fields(QueryOptions(sort="email:asc", search="first_name:an"), self.ALLOWED)
        ensure_allowed_fields(QueryOptions(), self.ALLOWED)

    @pytest.mark.parametrize(
        "options",
        [
            QueryOptions(sort="password_hash:asc"),
            QueryOptions(search="password_hash:$2b$"),
            QueryOptions(sort="email:asc", search="secret:x"),
        ],
    )
    def test_other_fields_are_rejected(self, options):
        with pytest.raises(QueryStringError, match="Cannot"):
            ensure_allowed_fields(options, self.ALLOWED)
