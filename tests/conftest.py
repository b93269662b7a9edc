"""Shared test fixtures for hurl.

Every test runs against isolated global state: a fresh output manager,
settings reloaded from an empty temporary config directory, and a reset
transport runtime. HTTP traffic never leaves the process -- tests install
an :class:`httpx.MockTransport` either through the runtime's transport
factory (for free functions and the CLI) or directly on a ``Client``.
"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Callable, Iterator

import httpx
import pytest

from hurl import runtime
from hurl.config import reset_settings
from hurl.output import OutputManager, reset_output, set_output


Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Global state isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_hurl_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Reset output, settings and runtime around every test.

    Points ``XDG_CONFIG_HOME`` at an empty directory and clears ``HURL_*``
    variables so the developer's own configuration never leaks in.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setattr("hurl.config._is_xdg_platform", lambda: True)
    for var in [
        "HURL_TIMEOUT",
        "HURL_COMPRESS_THRESHOLD",
        "HURL_FOLLOW_REDIRECTS",
        "HURL_VERIFY_SSL",
        "HURL_USER_AGENT",
    ]:
        monkeypatch.delenv(var, raising=False)

    reset_settings()
    runtime.reset_runtime()
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()
    reset_settings()
    runtime.reset_runtime()


# ---------------------------------------------------------------------------
# Mock HTTP
# ---------------------------------------------------------------------------


class Recorder:
    """MockTransport handler that remembers every request it answered."""

    def __init__(self, responder: Handler) -> None:
        self._responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self._responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def record() -> type[Recorder]:
    """The Recorder class, for tests that hand a transport to a handle or client."""
    return Recorder


@pytest.fixture
def serve() -> Callable[[Handler], Recorder]:
    """Route every transfer handle created afterwards to *handler*.

    Returns a function taking a handler and returning the :class:`Recorder`
    wrapped around it.
    """

    def _install(handler: Handler) -> Recorder:
        recorder = Recorder(handler)
        runtime.set_transport_factory(lambda: httpx.MockTransport(recorder))
        return recorder

    return _install


def cookie_app(request: httpx.Request) -> httpx.Response:
    """Tiny cookie-aware service.

    ``/login`` sets ``session=abc123``; every other path echoes the Cookie
    header it received as the response body.
    """
    if request.url.path == "/login":
        return httpx.Response(
            200,
            headers={"Set-Cookie": "session=abc123; Path=/"},
            content=b"logged in",
        )
    return httpx.Response(200, content=request.headers.get("cookie", "").encode())


@pytest.fixture
def cookie_handler() -> Handler:
    return cookie_app


# ---------------------------------------------------------------------------
# Archives
# ---------------------------------------------------------------------------


def make_tarball(files: dict[str, bytes], mode: str = "w:gz") -> bytes:
    """Build an in-memory tar archive from a name -> content mapping."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as archive:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def build_tarball() -> Callable[..., bytes]:
    return make_tarball


@pytest.fixture
def tarball_bytes() -> bytes:
    return make_tarball(
        {
            "pkg/README": b"hello\n",
            "pkg/src/main.txt": b"main body\n",
        }
    )
