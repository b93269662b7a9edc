"""Free request functions.

Each call creates its own :class:`~hurl.handle.TransferHandle`, runs one
request on it and closes it again, so no state (cookies in particular) is
shared between calls. Use :class:`hurl.client.Client` to keep cookies
across requests.

A ``timeout`` of ``None`` uses the configured default
(:attr:`hurl.models.Settings.timeout`, normally ``0`` = unbounded).
"""

from __future__ import annotations

from typing import Optional

from hurl.config import get_settings
from hurl.handle import TransferHandle
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


def _timeout(timeout: Optional[float]) -> float:
    return get_settings().timeout if timeout is None else timeout


def get(
    url: str, params: Optional[HttpParams] = None, timeout: Optional[float] = None
) -> HttpResponse:
    """Submit an HTTP GET request.

    Args:
        url: The URL to retrieve, without a query component when *params*
            is given.
        params: Query parameters, URL-encoded and appended after ``?``.
        timeout: Whole-request timeout in seconds; ``0`` is unbounded.

    Returns:
        The :class:`~hurl.models.HttpResponse`, whatever its status.

    Raises:
        TransportError: On any transport failure (see :mod:`hurl.exceptions`).
    """
    with TransferHandle() as handle:
        return perform_get(handle, url, params, _timeout(timeout))


def post(url: str, data: PostData, timeout: Optional[float] = None) -> HttpResponse:
    """Submit an HTTP POST request.

    Args:
        url: The URL to POST to.
        data: Raw body (``str`` or ``bytes``, sent unmodified) or a mapping
            of form fields (URL-encoded as a form body).
        timeout: Whole-request timeout in seconds; ``0`` is unbounded.

    Returns:
        The :class:`~hurl.models.HttpResponse`, whatever its status.
    """
    with TransferHandle() as handle:
        return perform_post(handle, url, data, _timeout(timeout))


def download(url: str, localpath: PathLike, timeout: Optional[float] = None) -> HttpResponse:
    """Download *url* into *localpath*, truncating any existing file first.

    Returns:
        The response; its body is empty because the data went to the file.
    """
    with TransferHandle() as handle:
        return perform_download(handle, url, localpath, _timeout(timeout))


def downloadtarball(
    url: str,
    localpath: PathLike,
    extractdir: PathLike,
    timeout: Optional[float] = None,
) -> HttpResponse:
    """Download a tarball to *localpath* and extract it into *extractdir*.

    Extraction only happens for HTTP 200; redirects are not followed.

    Raises:
        ArchiveError: The archive was downloaded but could not be extracted.
    """
    with TransferHandle() as handle:
        return perform_downloadtarball(handle, url, localpath, extractdir, _timeout(timeout))
