"""Request pipeline -- prepares a transfer handle, runs it, builds the response.

Each operation walks the same linear path on a
:class:`~hurl.handle.TransferHandle`::

    prepare (reset + options) -> execute -> inspect status -> HttpResponse

:func:`prepare_basic` installs what every request needs (URL, body sink,
header parser, cookie engine, timeout); :func:`prepare_post` adds the
request body, gzip-compressing it when it is larger than the compression
threshold. The ``perform_*`` functions compose these steps on a handle the
caller owns, which is how both the free functions in :mod:`hurl.api` and
the session in :mod:`hurl.client` issue requests.
"""

from __future__ import annotations

import gzip
import os
from typing import Callable, Mapping, Optional, Union

from hurl.archive import extract_tarball
from hurl.codes import ResultCode
from hurl.config import get_settings
from hurl.exceptions import TransferError
from hurl.handle import Info, Option, TransferHandle
from hurl.models import HttpResponse
from hurl.output import debug
from hurl.params import HttpParams, build_query_url, serialize
from hurl.sinks import BufferSink, HeaderParser

COMPRESS_THRESHOLD = 10 * 1024
"""POST bodies longer than this many bytes are sent gzip-compressed."""

PostData = Union[str, bytes, HttpParams]
PathLike = Union[str, os.PathLike]


def encode_post_data(data: PostData) -> bytes:
    """Turn POST data into the exact bytes to send.

    Raw ``bytes`` go out untouched, ``str`` is UTF-8 encoded, and a mapping
    is form-encoded with :func:`~hurl.params.serialize`.
    """
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, Mapping):
        return serialize(data).encode("ascii")
    raise TypeError(f"POST data must be str, bytes or a mapping, not {type(data).__name__}")


def prepare_basic(
    handle: TransferHandle,
    sink: Callable[[bytes], object],
    headers: HeaderParser,
    url: str,
    timeout: float,
    user_agent: Optional[str] = None,
) -> None:
    """Reset *handle* and configure the options shared by every request.

    Args:
        handle: The handle to configure.
        sink: Function receiving each body chunk.
        headers: Parser receiving each response header line.
        url: Target URL.
        timeout: Whole-operation timeout in seconds; ``0`` is unbounded.
        user_agent: Optional ``User-Agent`` value.
    """
    handle.reset()
    handle.configure(Option.URL, url)
    handle.configure(Option.NO_PROGRESS, True)
    handle.configure(Option.WRITE_FUNCTION, sink)
    handle.configure(Option.HEADER_FUNCTION, headers.feed)
    handle.configure(Option.COOKIE_ENGINE, True)
    handle.configure(Option.TIMEOUT, timeout)
    if user_agent:
        handle.configure(Option.USER_AGENT, user_agent)


def prepare_post(
    handle: TransferHandle,
    data: bytes,
    compress_threshold: int = COMPRESS_THRESHOLD,
) -> None:
    """Turn the prepared transfer into a POST carrying *data*.

    The body is always sent immediately (``Expect:`` is suppressed). A body
    longer than *compress_threshold* bytes is gzip-compressed and marked
    with ``Content-Encoding: gzip``; a shorter one explicitly clears that
    header.
    """
    header_lines = ["Expect:"]
    if len(data) > compress_threshold:
        compressed = gzip.compress(data)
        debug(
            f"compressing POST body: {len(data)} -> {len(compressed)} bytes "
            f"(threshold {compress_threshold})"
        )
        data = compressed
        header_lines.append("Content-Encoding: gzip")
    else:
        header_lines.append("Content-Encoding:")
    handle.configure(Option.POST, True)
    handle.configure(Option.POST_FIELDS, data)
    handle.configure(Option.HTTP_HEADER, header_lines)


def _finish(
    handle: TransferHandle, headers: HeaderParser, body: Optional[BufferSink] = None
) -> HttpResponse:
    handle.execute()
    status = handle.inspect(Info.RESPONSE_CODE)
    return HttpResponse(
        status=status,
        headers=headers.headers,
        body=body.getvalue() if body is not None else b"",
    )


def _follow(follow_redirects: Optional[bool]) -> bool:
    if follow_redirects is None:
        return get_settings().follow_redirects
    return follow_redirects


def perform_get(
    handle: TransferHandle,
    url: str,
    params: Optional[HttpParams] = None,
    timeout: float = 0,
    follow_redirects: Optional[bool] = None,
) -> HttpResponse:
    """GET *url* (with *params* as query string) on *handle*."""
    body = BufferSink()
    headers = HeaderParser()
    prepare_basic(
        handle, body.write, headers, build_query_url(url, params or {}), timeout,
        get_settings().user_agent,
    )
    handle.configure(Option.FOLLOW_LOCATION, _follow(follow_redirects))
    return _finish(handle, headers, body)


def perform_post(
    handle: TransferHandle,
    url: str,
    data: PostData,
    timeout: float = 0,
    compress_threshold: Optional[int] = None,
    follow_redirects: Optional[bool] = None,
) -> HttpResponse:
    """POST *data* (raw or form-encoded params) to *url* on *handle*."""
    settings = get_settings()
    if compress_threshold is None:
        compress_threshold = settings.compress_threshold
    payload = encode_post_data(data)
    body = BufferSink()
    headers = HeaderParser()
    prepare_basic(handle, body.write, headers, url, timeout, settings.user_agent)
    prepare_post(handle, payload, compress_threshold)
    handle.configure(Option.FOLLOW_LOCATION, _follow(follow_redirects))
    return _finish(handle, headers, body)


def perform_download(
    handle: TransferHandle,
    url: str,
    localpath: PathLike,
    timeout: float = 0,
    follow_redirects: Optional[bool] = None,
) -> HttpResponse:
    """GET *url* and stream the body into *localpath*.

    The file is truncated before any network activity, so a failed request
    still leaves an empty file behind. Whatever body the server sends is
    written, error pages included. The returned response has an empty body.
    """
    headers = HeaderParser()
    try:
        out = open(localpath, "wb")
    except OSError as exc:
        raise TransferError(ResultCode.WRITE_ERROR, f"cannot open {localpath}: {exc}") from exc
    with out:
        prepare_basic(handle, out.write, headers, url, timeout, get_settings().user_agent)
        handle.configure(Option.FOLLOW_LOCATION, _follow(follow_redirects))
        response = _finish(handle, headers)
    debug(f"downloaded {url} -> {localpath} (HTTP {response.status})")
    return response


def perform_downloadtarball(
    handle: TransferHandle,
    url: str,
    localpath: PathLike,
    extractdir: PathLike,
    timeout: float = 0,
) -> HttpResponse:
    """Download a tarball and extract it when the server answers 200.

    Redirects are never followed here, whatever the configured default, so
    a 3xx answer is returned as-is and nothing is extracted. Any status
    other than 200 leaves *extractdir* untouched.

    Raises:
        ArchiveError: The download succeeded but extraction failed.
    """
    response = perform_download(handle, url, localpath, timeout, follow_redirects=False)
    if response.status == 200:
        extract_tarball(localpath, extractdir)
    else:
        debug(f"not extracting {localpath}: HTTP {response.status}")
    return response
