"""Tests for hurl.params -- query/form serialisation."""

from __future__ import annotations

from urllib.parse import parse_qsl

import pytest

from hurl.params import build_query_url, serialize


class TestSerialize:
    def test_empty_mapping_gives_empty_string(self) -> None:
        assert serialize({}) == ""

    def test_single_pair(self) -> None:
        assert serialize({"q": "hurl"}) == "q=hurl"

    def test_pairs_joined_in_sorted_key_order(self) -> None:
        assert serialize({"b": "2", "c": "3", "a": "1"}) == "a=1&b=2&c=3"

    def test_reserved_characters_escaped_in_keys_and_values(self) -> None:
        assert serialize({"a b": "c&d=e"}) == "a%20b=c%26d%3De"

    def test_unreserved_characters_left_alone(self) -> None:
        assert serialize({"k": "AZaz09-_.~"}) == "k=AZaz09-_.~"

    def test_slash_and_plus_are_escaped(self) -> None:
        assert serialize({"path": "/a+b"}) == "path=%2Fa%2Bb"

    def test_non_ascii_is_utf8_percent_encoded(self) -> None:
        assert serialize({"name": "café"}) == "name=caf%C3%A9"

    def test_empty_value(self) -> None:
        assert serialize({"flag": ""}) == "flag="

    @pytest.mark.parametrize(
        "params",
        [
            {"q": "a&b=c", "page": "2"},
            {"space key": "space value", "empty": ""},
            {"ümläut": "日本語", "percent": "100%"},
        ],
    )
    def test_standard_decoder_recovers_mapping(self, params: dict[str, str]) -> None:
        decoded = dict(parse_qsl(serialize(params), keep_blank_values=True))
        assert decoded == params


class TestBuildQueryUrl:
    def test_no_params_returns_base_unchanged(self) -> None:
        assert build_query_url("http://example.com/search", {}) == "http://example.com/search"

    def test_params_appended_after_question_mark(self) -> None:
        url = build_query_url("http://example.com/search", {"q": "x y", "n": "5"})
        assert url == "http://example.com/search?n=5&q=x%20y"
