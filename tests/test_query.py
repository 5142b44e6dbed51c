"""
Tests for query string encoding.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx
import pytest

from opencode_sdk.encoding import body_field, query_field
from opencode_sdk.exceptions import ParamValidationError
from opencode_sdk.params import DirectoryParams, FilePathParams, ToolListParams
from opencode_sdk.query import (
    ArrayFormat,
    NestedFormat,
    QuerySettings,
    encode_query,
    encode_scalar,
)


class Color(str, Enum):
    RED = "red"


@dataclass
class Window:
    start: Optional[int] = query_field()
    end: Optional[int] = query_field()


@dataclass
class Filter:
    name: str = query_field(required=True)
    window: Optional[Window] = query_field()


@dataclass
class SearchParams:
    tags: Optional[list[str]] = query_field()
    filter: Optional[Filter] = query_field()
    limit: Optional[int] = query_field()
    color: Optional[Color] = query_field()
    title: Optional[str] = body_field()


@dataclass
class MapParams:
    labels: Optional[dict[str, Any]] = query_field()


@dataclass
class Range:
    name: str
    low: Optional[int] = None


@dataclass
class RangeParams:
    range: Optional[Range] = query_field()


class TestAbsence:
    """Absent values never reach the wire."""

    def test_unset_optional_fields_are_omitted(self):
        assert encode_query(DirectoryParams()) == []

    def test_set_optional_field_is_sent(self):
        assert encode_query(DirectoryParams(directory="/repo")) == [("directory", "/repo")]

    def test_empty_optional_string_is_sent_as_empty_value(self):
        assert encode_query(DirectoryParams(directory="")) == [("directory", "")]

    def test_body_fields_are_not_in_query(self):
        assert encode_query(SearchParams(title="x")) == []

    def test_none_params_encode_to_nothing(self):
        assert encode_query(None) == []

    def test_non_dataclass_is_rejected(self):
        with pytest.raises(TypeError):
            encode_query({"directory": "/repo"})


class TestRequired:
    """Required fields fail locally with the field named."""

    def test_required_none_raises(self):
        with pytest.raises(ParamValidationError) as exc:
            encode_query(FilePathParams(path=None))
        assert exc.value.field == "path"

    def test_required_empty_string_raises(self):
        with pytest.raises(ParamValidationError) as exc:
            encode_query(ToolListParams(provider="anthropic", model=""))
        assert exc.value.field == "model"

    def test_nested_required_names_full_key(self):
        params = SearchParams(filter=Filter(name=None))
        with pytest.raises(ParamValidationError) as exc:
            encode_query(params)
        assert exc.value.field == "filter[name]"

    def test_nested_required_dots_format(self):
        params = SearchParams(filter=Filter(name=""))
        settings = QuerySettings(nested_format=NestedFormat.DOTS)
        with pytest.raises(ParamValidationError) as exc:
            encode_query(params, settings)
        assert exc.value.field == "filter.name"

    def test_unmarked_nested_field_without_default_is_required(self):
        with pytest.raises(ParamValidationError) as exc:
            encode_query(RangeParams(range=Range(name=None, low=1)))
        assert exc.value.field == "range[name]"


class TestArrayFormats:
    """Tests for list encoding."""

    def test_comma_is_default(self):
        assert encode_query(SearchParams(tags=["a", "b"])) == [("tags", "a,b")]

    def test_repeat(self):
        settings = QuerySettings(array_format=ArrayFormat.REPEAT)
        pairs = encode_query(SearchParams(tags=["a", "b"]), settings)
        assert pairs == [("tags", "a"), ("tags", "b")]

    def test_brackets(self):
        settings = QuerySettings(array_format=ArrayFormat.BRACKETS)
        pairs = encode_query(SearchParams(tags=["a", "b"]), settings)
        assert pairs == [("tags[]", "a"), ("tags[]", "b")]

    def test_empty_optional_list_is_omitted(self):
        assert encode_query(SearchParams(tags=[])) == []

    def test_comma_values_survive_url_escaping(self):
        pairs = encode_query(SearchParams(tags=["a b", "c&d"]))
        parsed = httpx.QueryParams(str(httpx.QueryParams(pairs)))
        assert parsed["tags"] == "a b,c&d"


class TestNestedObjects:
    """Tests for nested key composition."""

    def test_brackets(self):
        params = SearchParams(filter=Filter(name="x", window=Window(start=1, end=5)))
        assert encode_query(params) == [
            ("filter[name]", "x"),
            ("filter[window][start]", "1"),
            ("filter[window][end]", "5"),
        ]

    def test_dots(self):
        params = SearchParams(filter=Filter(name="x", window=Window(start=1)))
        settings = QuerySettings(nested_format=NestedFormat.DOTS)
        assert encode_query(params, settings) == [
            ("filter.name", "x"),
            ("filter.window.start", "1"),
        ]

    def test_mapping_values(self):
        pairs = encode_query(MapParams(labels={"env": "dev", "tier": 2}))
        assert pairs == [("labels[env]", "dev"), ("labels[tier]", "2")]

    def test_unmarked_nested_dataclass(self):
        pairs = encode_query(RangeParams(range=Range(name="r", low=3)))
        assert pairs == [("range[name]", "r"), ("range[low]", "3")]


class TestDeterminism:
    """Tests that output order follows declaration order."""

    def test_same_params_encode_identically(self):
        params = SearchParams(tags=["x"], limit=10, color=Color.RED)
        assert encode_query(params) == encode_query(params)

    def test_declaration_order(self):
        params = SearchParams(color=Color.RED, limit=10, tags=["x"])
        keys = [k for k, _ in encode_query(params)]
        assert keys == ["tags", "limit", "color"]

    def test_round_trip_through_url(self):
        params = ToolListParams(provider="openai", model="gpt-4o", directory="/tmp/a b")
        query = httpx.QueryParams(encode_query(params))
        parsed = httpx.QueryParams(str(query))
        assert parsed["provider"] == "openai"
        assert parsed["model"] == "gpt-4o"
        assert parsed["directory"] == "/tmp/a b"


class TestScalars:
    """Tests for encode_scalar."""

    def test_bool(self):
        assert encode_scalar(True) == "true"
        assert encode_scalar(False) == "false"

    def test_enum(self):
        assert encode_scalar(Color.RED) == "red"

    def test_integral_float(self):
        assert encode_scalar(3.0) == "3"

    def test_fractional_float(self):
        assert encode_scalar(0.5) == "0.5"

    def test_unsupported_type_in_params(self):
        @dataclass
        class Bad:
            value: Any = query_field()

        with pytest.raises(ParamValidationError) as exc:
            encode_query(Bad(value=object()))
        assert exc.value.field == "value"
