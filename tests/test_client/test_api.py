"""Tests for the free functions: hurl.get, post, download, downloadtarball.

Covers:
- Response values (status, headers, body) and HTTP errors as plain responses
- Download truncation before network activity, error pages included
- Tarball extraction only on HTTP 200, redirects never followed
- Extraction failures after a successful download
- No cookie carry-over between independent calls
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest
from pydantic import ValidationError

import hurl
from hurl import runtime
from hurl.codes import ResultCode
from hurl.config import set_settings
from hurl.exceptions import ArchiveError, ConnectError, TimeoutError_, TransferError
from hurl.models import HttpResponse, Settings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _respond(status: int, body: bytes = b"", **headers: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, headers=headers, content=body)

    return handler


def _refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 111] Connection refused")


# ---------------------------------------------------------------------------
# get / post
# ---------------------------------------------------------------------------


class TestGet:
    def test_response_fields(self, serve: Any) -> None:
        serve(_respond(200, b"hello", **{"X-Thing": "1"}))
        response = hurl.get("http://example.com/")
        assert isinstance(response, HttpResponse)
        assert response.status == 200
        assert response.body == b"hello"
        assert response.text == "hello"
        assert response.headers["X-Thing"] == "1"

    def test_http_error_is_a_response(self, serve: Any) -> None:
        serve(_respond(500, b"boom"))
        response = hurl.get("http://example.com/")
        assert response.status == 500
        assert response.body == b"boom"

    def test_params_sent_as_query(self, serve: Any) -> None:
        recorder = serve(_respond(200))
        hurl.get("http://example.com/find", {"q": "x&y"})
        assert recorder.last.url.query == b"q=x%26y"

    def test_response_is_frozen(self, serve: Any) -> None:
        serve(_respond(200, b"x"))
        response = hurl.get("http://example.com/")
        with pytest.raises(ValidationError):
            response.status = 404  # type: ignore[misc]

    def test_connect_failure_raises(self, serve: Any) -> None:
        serve(_refused)
        with pytest.raises(ConnectError):
            hurl.get("http://example.com/")

    def test_timeout_from_settings(self, serve: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        ticks = iter(range(0, 1000, 100))
        monkeypatch.setattr("hurl.handle._clock", lambda: next(ticks))
        set_settings(Settings(timeout=1))
        serve(_respond(200, b"slow"))
        with pytest.raises(TimeoutError_):
            hurl.get("http://example.com/")

    def test_handle_released_after_failure(self, serve: Any) -> None:
        serve(_refused)
        with pytest.raises(ConnectError):
            hurl.get("http://example.com/")
        assert runtime.live_handles() == 0

    def test_no_cookies_between_calls(self, serve: Any, cookie_handler: Any) -> None:
        serve(cookie_handler)
        hurl.get("http://example.com/login")
        assert hurl.get("http://example.com/whoami").body == b""


class TestPost:
    def test_raw_body(self, serve: Any) -> None:
        recorder = serve(_respond(201, b"created"))
        response = hurl.post("http://example.com/items", b'{"id": 1}')
        assert response.status == 201
        assert recorder.last.method == "POST"
        assert recorder.last.content == b'{"id": 1}'

    def test_form_params(self, serve: Any) -> None:
        recorder = serve(_respond(200))
        hurl.post("http://example.com/form", {"user": "me", "lang": "en"})
        assert recorder.last.content == b"lang=en&user=me"


# ---------------------------------------------------------------------------
# download
# ---------------------------------------------------------------------------


class TestDownload:
    def test_file_matches_body(self, serve: Any, tmp_path: Path) -> None:
        serve(_respond(200, b"file contents", **{"Content-Type": "text/plain"}))
        target = tmp_path / "out.txt"
        response = hurl.download("http://example.com/f", target)
        assert response.status == 200
        assert response.body == b""
        assert response.headers["Content-Type"] == "text/plain"
        assert target.read_bytes() == b"file contents"

    def test_existing_file_truncated(self, serve: Any, tmp_path: Path) -> None:
        serve(_respond(200, b"new"))
        target = tmp_path / "out.txt"
        target.write_bytes(b"old and much longer contents")
        hurl.download("http://example.com/f", target)
        assert target.read_bytes() == b"new"

    def test_error_page_written(self, serve: Any, tmp_path: Path) -> None:
        serve(_respond(404, b"not here"))
        target = tmp_path / "out.txt"
        target.write_bytes(b"previous")
        response = hurl.download("http://example.com/missing", target)
        assert response.status == 404
        assert target.read_bytes() == b"not here"

    def test_failed_transfer_leaves_empty_file(self, serve: Any, tmp_path: Path) -> None:
        serve(_refused)
        target = tmp_path / "out.txt"
        target.write_bytes(b"previous")
        with pytest.raises(ConnectError):
            hurl.download("http://example.com/f", target)
        assert target.exists()
        assert target.read_bytes() == b""

    def test_unwritable_path(self, serve: Any, tmp_path: Path) -> None:
        recorder = serve(_respond(200, b"x"))
        with pytest.raises(TransferError) as exc_info:
            hurl.download("http://example.com/f", tmp_path / "missing-dir" / "out.txt")
        assert exc_info.value.code == ResultCode.WRITE_ERROR
        assert recorder.requests == []


# ---------------------------------------------------------------------------
# downloadtarball
# ---------------------------------------------------------------------------


class TestDownloadTarball:
    def test_extracts_on_200(
        self, serve: Any, tmp_path: Path, tarball_bytes: bytes
    ) -> None:
        serve(_respond(200, tarball_bytes))
        archive = tmp_path / "src.tar.gz"
        extract = tmp_path / "src"
        response = hurl.downloadtarball("http://example.com/src.tar.gz", archive, extract)
        assert response.status == 200
        assert archive.read_bytes() == tarball_bytes
        assert (extract / "pkg" / "README").read_bytes() == b"hello\n"
        assert (extract / "pkg" / "src" / "main.txt").read_bytes() == b"main body\n"

    def test_uncompressed_tar(
        self, serve: Any, tmp_path: Path, build_tarball: Any
    ) -> None:
        serve(_respond(200, build_tarball({"a.txt": b"A"}, mode="w")))
        hurl.downloadtarball("http://example.com/a.tar", tmp_path / "a.tar", tmp_path / "x")
        assert (tmp_path / "x" / "a.txt").read_bytes() == b"A"

    def test_not_found_extracts_nothing(self, serve: Any, tmp_path: Path) -> None:
        serve(_respond(404, b"not found"))
        archive = tmp_path / "src.tar.gz"
        extract = tmp_path / "src"
        response = hurl.downloadtarball("http://example.com/src.tar.gz", archive, extract)
        assert response.status == 404
        assert archive.read_bytes() == b"not found"
        assert not extract.exists()

    def test_redirect_never_followed(
        self, serve: Any, tmp_path: Path, tarball_bytes: bytes
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/latest.tar.gz":
                return httpx.Response(302, headers={"Location": "/v2.tar.gz"})
            return httpx.Response(200, content=tarball_bytes)

        set_settings(Settings(follow_redirects=True))
        recorder = serve(handler)
        extract = tmp_path / "src"
        response = hurl.downloadtarball(
            "http://example.com/latest.tar.gz", tmp_path / "latest.tar.gz", extract
        )
        assert response.status == 302
        assert len(recorder.requests) == 1
        assert not extract.exists()

    def test_corrupt_archive(self, serve: Any, tmp_path: Path) -> None:
        serve(_respond(200, b"this is not a tarball"))
        archive = tmp_path / "bad.tar.gz"
        with pytest.raises(ArchiveError):
            hurl.downloadtarball("http://example.com/bad.tar.gz", archive, tmp_path / "out")
        assert archive.read_bytes() == b"this is not a tarball"
