"""hurl -- a small synchronous HTTP client.

Free functions for one-off requests and a cookie-preserving
:class:`~hurl.client.Client` for sessions against one service::

    import hurl

    resp = hurl.get("https://example.com/search", {"q": "hurl"})
    print(resp.status, resp.headers.get("Content-Type"))

    hurl.download("https://example.com/data.csv", "data.csv")
    hurl.downloadtarball("https://example.com/src.tar.gz", "src.tar.gz", "src/")

    with hurl.Client("https://api.example.com", timeout=30) as api:
        api.post("/login", {"user": "me", "password": "secret"})
        profile = api.get("/me")

HTTP error statuses come back as ordinary responses; transport failures
raise the exceptions in :mod:`hurl.exceptions`.

Modules:
    api: Free request functions.
    client: Session bound to a base URL.
    handle: Transfer handle wrapping one httpx client.
    request: Request pipeline shared by functions and sessions.
    params: URL/form encoding of parameters.
    archive: Tarball extraction.
    runtime: Process-wide transport subsystem.
    config: Settings from config file and environment.
    exceptions: Exception hierarchy with exit-code mapping.
"""

__version__ = "0.3.0"

from hurl.api import download, downloadtarball, get, post  # noqa: E402
from hurl.client import Client  # noqa: E402
from hurl.exceptions import (  # noqa: E402
    ArchiveError,
    ConfigError,
    ConnectError,
    HurlError,
    ResolveError,
    TimeoutError_,
    TransferError,
    TransportError,
)
from hurl.models import HttpResponse  # noqa: E402
from hurl.params import HttpParams, build_query_url, serialize  # noqa: E402

__all__ = [
    "ArchiveError",
    "Client",
    "ConfigError",
    "ConnectError",
    "HttpParams",
    "HttpResponse",
    "HurlError",
    "ResolveError",
    "TimeoutError_",
    "TransferError",
    "TransportError",
    "build_query_url",
    "download",
    "downloadtarball",
    "get",
    "post",
    "serialize",
]
