"""Client session -- several requests against one base URL on one handle.

Because every request of a :class:`Client` runs on the same
:class:`~hurl.handle.TransferHandle`:

1. Cookies set by any response are sent with every later request.
2. Requests on the same client are NOT thread-safe. Use one client per
   thread, or serialise access yourself.

The methods take the same arguments as the free functions in
:mod:`hurl.api`, except that the first one is a path appended to the base
URL::

    hurl.get("http://example.com/foo")

is equivalent to::

    with Client("http://example.com") as example:
        example.get("/foo")

but later requests on ``example`` may see different results because of
the shared session.
"""

from __future__ import annotations

from typing import Optional

import httpx

from hurl.config import get_settings
from hurl.handle import Info, Option, TransferHandle
from hurl.models import HttpResponse
from hurl.params import HttpParams
from hurl.request import (
    PathLike,
    PostData,
    perform_download,
    perform_downloadtarball,
    perform_get,
    perform_post,
)


class Client:
    """Cookie-preserving session bound to a base URL.

    Args:
        base_url: Prefix for every request path (``base_url + path``).
        timeout: Per-request timeout in seconds, ``0`` for unbounded.
            ``None`` uses the configured default.
        transport: Optional :class:`httpx.BaseTransport` for the session's
            handle.
        compress_threshold: POST bodies longer than this are gzip-compressed.
            ``None`` uses the configured default (10 KiB).

    Example::

        with Client("https://api.example.com", timeout=30) as api:
            api.post("/login", {"user": "me", "password": "secret"})
            resp = api.get("/profile")
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        compress_threshold: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self._base_url = base_url
        self._timeout = settings.timeout if timeout is None else timeout
        self._compress_threshold = compress_threshold
        self._handle = TransferHandle(transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Release the session's handle and its cookies."""
        self._handle.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __copy__(self) -> Client:
        raise TypeError("Client cannot be copied; its cookies and handle belong to one owner")

    def __deepcopy__(self, memo: dict) -> Client:
        raise TypeError("Client cannot be copied; its cookies and handle belong to one owner")

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def _url(self, path: str) -> str:
        return self._base_url + path

    def get(self, path: str, params: Optional[HttpParams] = None) -> HttpResponse:
        """GET ``base_url + path`` with optional query *params*."""
        return perform_get(self._handle, self._url(path), params, self._timeout)

    def post(self, path: str, data: PostData) -> HttpResponse:
        """POST raw *data* or form params to ``base_url + path``."""
        return perform_post(
            self._handle,
            self._url(path),
            data,
            self._timeout,
            compress_threshold=self._compress_threshold,
        )

    def download(self, path: str, localpath: PathLike) -> HttpResponse:
        """Download ``base_url + path`` into *localpath*."""
        return perform_download(self._handle, self._url(path), localpath, self._timeout)

    def downloadtarball(
        self, path: str, localpath: PathLike, extractdir: PathLike
    ) -> HttpResponse:
        """Download a tarball from ``base_url + path`` and extract it on HTTP 200."""
        return perform_downloadtarball(
            self._handle, self._url(path), localpath, extractdir, self._timeout
        )

    # ------------------------------------------------------------------ #
    # Cookies
    # ------------------------------------------------------------------ #

    def cookie(self) -> str:
        """Return the session's cookies, one Netscape cookie-file line each.

        The text can be handed back to :meth:`setcookie`, on this or another
        client, to restore the same cookies.
        """
        return "\n".join(self._handle.inspect(Info.COOKIE_LIST))

    def setcookie(self, data: str) -> None:
        """Replace the session's cookies with those in *data*.

        All current cookies are dropped, then each line of *data* is added
        in order. Lines that are not valid cookie lines are ignored.
        """
        self._handle.configure(Option.COOKIE_LIST, "ALL")
        for line in data.splitlines():
            self._handle.configure(Option.COOKIE_LIST, line)
