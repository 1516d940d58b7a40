"""
Unit tests for response body path extraction.
"""

import pytest

from apirunner.services.api_testing.json_path import (
    MISSING,
    extract_json_path,
    format_extracted_data,
    parse_path,
)

DATA = {
    "id": 42,
    "user": {"name": "Ada", "tags": ["a", "b"]},
    "items": [{"id": 1}, {"id": 2}],
    "matrix": [[1, 2], [3, 4]],
    "flag": False,
    "next": None,
}


class TestParsePath:
    def test_properties(self):
        assert parse_path("user.name") == [("property", "user"), ("property", "name")]

    def test_index(self):
        assert parse_path("items[0]") == [("property", "items"), ("index", "0")]

    def test_multiple_indexes(self):
        assert parse_path("matrix[1][0]") == [("property", "matrix"), ("index", "1"), ("index", "0")]


class TestExtractJsonPath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("id", 42),
            (".id", 42),
            ("user.name", "Ada"),
            ("user.tags[1]", "b"),
            ("items[1].id", 2),
            ("matrix[1][0]", 3),
            ("items[*]", [{"id": 1}, {"id": 2}]),
            ("flag", False),
        ],
    )
    def test_found(self, path, expected):
        assert extract_json_path(DATA, path) == expected

    @pytest.mark.parametrize(
        "path",
        ["missing", "user.name.first", "items[5]", "items[x]", "user[0]", "id.value"],
    )
    def test_not_found(self, path):
        assert extract_json_path(DATA, path) is None

    def test_empty_path_returns_data(self):
        assert extract_json_path(DATA, "") is DATA
        assert extract_json_path(DATA, ".") is DATA

    def test_none_data(self):
        assert extract_json_path(None, "id") is None

    def test_string_body(self):
        assert extract_json_path("plain text", "id") is None

    def test_jsonpath_expression(self):
        assert extract_json_path(DATA, "$.items[1].id") == 2
        assert extract_json_path(DATA, "$.user.name") == "Ada"

    def test_jsonpath_no_match(self):
        assert extract_json_path(DATA, "$.nothing") is None


class TestMissingVersusNull:
    """Tests for telling a missing path apart from a JSON null."""

    def test_present_null(self):
        assert extract_json_path(DATA, "next", default=MISSING) is None
        assert extract_json_path(DATA, "$.next", default=MISSING) is None

    @pytest.mark.parametrize("path", ["missing", "next.page", "items[5]", "user.tags.7", "$.nothing"])
    def test_missing_returns_default(self, path):
        assert extract_json_path(DATA, path, default=MISSING) is MISSING

    def test_default_defaults_to_none(self):
        assert extract_json_path(DATA, "missing") is None


class TestFormatExtractedData:
    def test_none(self):
        assert format_extracted_data(None) == "(null)"

    def test_scalar(self):
        assert format_extracted_data(42) == "42"

    def test_compact(self):
        assert format_extracted_data({"a": 1}, pretty=False) == '{"a": 1}'
