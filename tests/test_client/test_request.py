"""Tests for hurl.request -- the prepare/execute/inspect pipeline.

Covers:
- POST body encoding (raw bytes, text, form params)
- gzip compression above the threshold, and only above it
- Expect and Content-Encoding header handling
- Settings-driven defaults (threshold, User-Agent, redirects)
"""

from __future__ import annotations

import gzip
from typing import Any

import httpx
import pytest

import hurl
from hurl.config import set_settings
from hurl.handle import TransferHandle
from hurl.models import Settings
from hurl.request import (
    COMPRESS_THRESHOLD,
    encode_post_data,
    perform_get,
    perform_post,
)


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=request.content)


class TestEncodePostData:
    def test_bytes_untouched(self) -> None:
        assert encode_post_data(b"\x00\xff") == b"\x00\xff"

    def test_text_utf8(self) -> None:
        assert encode_post_data("café") == "café".encode("utf-8")

    def test_mapping_form_encoded(self) -> None:
        assert encode_post_data({"b": "2", "a": "x y"}) == b"a=x%20y&b=2"

    def test_other_types_rejected(self) -> None:
        with pytest.raises(TypeError):
            encode_post_data(42)  # type: ignore[arg-type]


class TestCompression:
    def test_threshold_is_ten_kib(self) -> None:
        assert COMPRESS_THRESHOLD == 10240

    def test_body_at_threshold_sent_uncompressed(self, serve: Any) -> None:
        recorder = serve(_echo)
        payload = b"a" * 10240
        hurl.post("http://example.com/upload", payload)
        sent = recorder.last
        assert sent.content == payload
        assert "content-encoding" not in sent.headers

    def test_body_above_threshold_gzipped(self, serve: Any) -> None:
        recorder = serve(_echo)
        payload = b"a" * 10241
        hurl.post("http://example.com/upload", payload)
        sent = recorder.last
        assert sent.headers["content-encoding"] == "gzip"
        assert gzip.decompress(sent.content) == payload
        assert int(sent.headers["content-length"]) == len(sent.content)

    def test_no_expect_header(self, serve: Any) -> None:
        recorder = serve(_echo)
        hurl.post("http://example.com/upload", b"x" * 50000)
        assert "expect" not in recorder.last.headers

    def test_threshold_from_settings(self, serve: Any) -> None:
        set_settings(Settings(compress_threshold=4))
        recorder = serve(_echo)
        hurl.post("http://example.com/upload", "hello")
        assert recorder.last.headers["content-encoding"] == "gzip"

    def test_explicit_threshold_overrides_settings(self, record: Any) -> None:
        recorder = record(_echo)
        with TransferHandle(transport=httpx.MockTransport(recorder)) as handle:
            perform_post(handle, "http://example.com/", b"tiny", compress_threshold=0)
        assert gzip.decompress(recorder.last.content) == b"tiny"


class TestPipeline:
    def test_get_builds_query_string(self, record: Any) -> None:
        recorder = record(_echo)
        with TransferHandle(transport=httpx.MockTransport(recorder)) as handle:
            perform_get(handle, "http://example.com/search", {"q": "a b", "n": "1"})
        assert str(recorder.last.url) == "http://example.com/search?n=1&q=a%20b"

    def test_form_post_content_type(self, serve: Any) -> None:
        recorder = serve(_echo)
        response = hurl.post("http://example.com/form", {"name": "me"})
        assert recorder.last.headers["content-type"] == "application/x-www-form-urlencoded"
        assert response.body == b"name=me"

    def test_user_agent_from_settings(self, serve: Any) -> None:
        set_settings(Settings(user_agent="hurl-test/2"))
        recorder = serve(_echo)
        hurl.get("http://example.com/")
        assert recorder.last.headers["user-agent"] == "hurl-test/2"

    def test_handle_reusable_for_many_requests(self, record: Any) -> None:
        recorder = record(_echo)
        with TransferHandle(transport=httpx.MockTransport(recorder)) as handle:
            perform_post(handle, "http://example.com/", b"one")
            response = perform_get(handle, "http://example.com/")
        assert recorder.last.method == "GET"
        assert response.body == b""

    def test_redirects_followed_when_configured(self, serve: Any) -> None:
        def redirect(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "/new"})
            return httpx.Response(200, content=b"moved here")

        serve(redirect)
        assert hurl.get("http://example.com/old").status == 301
        set_settings(Settings(follow_redirects=True))
        response = hurl.get("http://example.com/old")
        assert response.status == 200
        assert response.body == b"moved here"
