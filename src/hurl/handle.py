"""Transfer handle -- one owned HTTP transfer context.

A :class:`TransferHandle` wraps exactly one :class:`httpx.Client` and
exposes four operations: :meth:`~TransferHandle.reset`,
:meth:`~TransferHandle.configure`, :meth:`~TransferHandle.execute` and
:meth:`~TransferHandle.inspect`. Options are plain values set one at a
time; :meth:`~TransferHandle.execute` turns them into a single blocking
request and streams the result into the installed header and body
functions.

Every failure is reduced to a :class:`~hurl.codes.ResultCode` and raised
through :func:`~hurl.exceptions.raise_for_code`, so callers only ever see
the :mod:`hurl.exceptions` taxonomy, never raw :mod:`httpx` errors.

A handle is owned by exactly one session or one free-function call. It is
not copyable and must not be used from two threads at once.
"""

from __future__ import annotations

import enum
import socket
import time
from typing import Any, Callable, Optional

import httpx

from hurl import runtime
from hurl.codes import ResultCode, strerror
from hurl.cookies import format_cookie, parse_cookie_line
from hurl.exceptions import TransferError, raise_for_code
from hurl.output import debug

_clock = time.monotonic

# Messages produced by getaddrinfo() failures across platforms.
_RESOLVE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "getaddrinfo failed",
    "name resolution",
)


class Option(enum.Enum):
    """Transfer options accepted by :meth:`TransferHandle.configure`."""

    URL = "url"
    NO_PROGRESS = "no_progress"
    WRITE_FUNCTION = "write_function"
    HEADER_FUNCTION = "header_function"
    COOKIE_ENGINE = "cookie_engine"
    COOKIE_LIST = "cookie_list"
    TIMEOUT = "timeout"
    POST = "post"
    POST_FIELDS = "post_fields"
    HTTP_HEADER = "http_header"
    FOLLOW_LOCATION = "follow_location"
    USER_AGENT = "user_agent"


class Info(enum.Enum):
    """Post-transfer metadata readable through :meth:`TransferHandle.inspect`."""

    RESPONSE_CODE = "response_code"
    COOKIE_LIST = "cookie_list"
    EFFECTIVE_URL = "effective_url"


_DEFAULTS: dict[Option, Any] = {
    Option.URL: None,
    Option.NO_PROGRESS: True,
    Option.WRITE_FUNCTION: None,
    Option.HEADER_FUNCTION: None,
    Option.TIMEOUT: 0,
    Option.POST: False,
    Option.POST_FIELDS: None,
    Option.HTTP_HEADER: [],
    Option.FOLLOW_LOCATION: False,
    Option.USER_AGENT: None,
}


def _valid(option: Option, value: Any) -> bool:
    if option in (Option.URL, Option.USER_AGENT):
        return value is None or isinstance(value, str)
    if option in (Option.WRITE_FUNCTION, Option.HEADER_FUNCTION):
        return value is None or callable(value)
    if option in (Option.NO_PROGRESS, Option.COOKIE_ENGINE, Option.POST, Option.FOLLOW_LOCATION):
        return isinstance(value, bool)
    if option == Option.TIMEOUT:
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
    if option == Option.POST_FIELDS:
        return value is None or isinstance(value, bytes)
    if option == Option.HTTP_HEADER:
        return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
    if option == Option.COOKIE_LIST:
        return isinstance(value, str)
    return False


def _is_resolve_failure(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        message = str(current).lower()
        if any(marker in message for marker in _RESOLVE_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


def classify(exc: Exception) -> ResultCode:
    """Map an exception raised during a transfer to a :class:`ResultCode`."""
    if isinstance(exc, httpx.TimeoutException):
        return ResultCode.OPERATION_TIMEDOUT
    if isinstance(exc, httpx.ProxyError):
        return ResultCode.PROXY
    if isinstance(exc, httpx.ConnectError):
        if _is_resolve_failure(exc):
            return ResultCode.COULDNT_RESOLVE_HOST
        return ResultCode.COULDNT_CONNECT
    if isinstance(exc, httpx.UnsupportedProtocol):
        return ResultCode.UNSUPPORTED_PROTOCOL
    if isinstance(exc, (httpx.InvalidURL, httpx.LocalProtocolError)):
        return ResultCode.URL_MALFORMAT
    if isinstance(exc, httpx.TooManyRedirects):
        return ResultCode.TOO_MANY_REDIRECTS
    if isinstance(exc, httpx.DecodingError):
        return ResultCode.BAD_CONTENT_ENCODING
    if isinstance(exc, httpx.RemoteProtocolError):
        return ResultCode.GOT_NOTHING
    if isinstance(exc, httpx.WriteError):
        return ResultCode.SEND_ERROR
    if isinstance(exc, OSError):
        return ResultCode.WRITE_ERROR
    return ResultCode.RECV_ERROR


class _DeadlineExceeded(Exception):
    pass


def _time_left(deadline: Optional[float], timeout: float) -> Optional[float]:
    """Seconds until *deadline*; ``None`` when the transfer is unbounded.

    Raises:
        _DeadlineExceeded: The deadline has already passed.
    """
    if deadline is None:
        return None
    left = deadline - _clock()
    if left <= 0:
        raise _DeadlineExceeded(f"operation exceeded {timeout} seconds")
    return left


class TransferHandle:
    """Exclusively owned HTTP transfer context.

    Args:
        transport: Optional :class:`httpx.BaseTransport` to use instead of
            the one supplied by :mod:`hurl.runtime`.

    Raises:
        TransferError: With :attr:`ResultCode.FAILED_INIT` if the
            underlying client cannot be created.

    Example::

        with TransferHandle() as handle:
            body = BufferSink()
            handle.configure(Option.URL, "https://example.com/")
            handle.configure(Option.WRITE_FUNCTION, body.write)
            handle.execute()
            status = handle.inspect(Info.RESPONSE_CODE)
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._client: Optional[httpx.Client] = None
        self._registered = False
        shared = runtime.acquire()
        self._registered = True
        try:
            self._client = httpx.Client(transport=transport or shared.make_transport())
        except (OSError, ValueError, TypeError) as exc:
            self._release()
            raise TransferError(ResultCode.FAILED_INIT, str(exc)) from exc
        self._options: dict[Option, Any] = {}
        self.reset()
        self._cookie_engine = False
        self._status = 0
        self._effective_url = ""

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Release the underlying client. Safe to call more than once."""
        if self._client is not None:
            self._client.close()
            self._client = None
        self._release()

    def _release(self) -> None:
        if self._registered:
            self._registered = False
            runtime.release()

    @property
    def closed(self) -> bool:
        return self._client is None

    def __enter__(self) -> TransferHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_client", None) is not None or getattr(self, "_registered", False):
            self.close()

    def __copy__(self) -> TransferHandle:
        raise TypeError("TransferHandle cannot be copied")

    def __deepcopy__(self, memo: dict) -> TransferHandle:
        raise TypeError("TransferHandle cannot be copied")

    def _require_client(self) -> httpx.Client:
        if self._client is None:
            raise TransferError(ResultCode.BAD_FUNCTION_ARGUMENT, "handle is closed")
        return self._client

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def reset(self) -> None:
        """Restore every option to its default.

        The cookie jar is kept, and so is the cookie engine once it has
        been switched on.
        """
        self._options = dict(_DEFAULTS)
        self._options[Option.HTTP_HEADER] = []

    def configure(self, option: Option, value: Any) -> None:
        """Set one transfer option.

        Args:
            option: The option to set.
            value: Its new value.

        Raises:
            TransferError: :attr:`ResultCode.UNKNOWN_OPTION` for anything
                that is not an :class:`Option`,
                :attr:`ResultCode.BAD_FUNCTION_ARGUMENT` for a value of the
                wrong type.
        """
        if not isinstance(option, Option):
            raise TransferError(ResultCode.UNKNOWN_OPTION, repr(option))
        if not _valid(option, value):
            raise TransferError(
                ResultCode.BAD_FUNCTION_ARGUMENT, f"{option.name}={value!r}"
            )

        if option == Option.COOKIE_ENGINE:
            # One-way switch.
            if value:
                self._cookie_engine = True
            return
        if option == Option.COOKIE_LIST:
            self._apply_cookie_list(value)
            return
        if option == Option.HTTP_HEADER:
            value = list(value)
        self._options[option] = value

    def _apply_cookie_list(self, line: str) -> None:
        jar = self._require_client().cookies.jar
        self._cookie_engine = True
        command = line.strip()
        if command == "ALL":
            jar.clear()
            return
        if command == "SESS":
            jar.clear_session_cookies()
            return
        if command in ("FLUSH", "RELOAD"):
            return
        cookie = parse_cookie_line(line)
        if cookie is None:
            debug(f"ignoring malformed cookie line: {line!r}")
            return
        jar.set_cookie(cookie)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def _request_headers(self) -> tuple[dict[str, str], list[str]]:
        headers: dict[str, str] = {}
        removed: list[str] = []
        if self._options[Option.USER_AGENT]:
            headers["User-Agent"] = self._options[Option.USER_AGENT]
        if self._options[Option.POST]:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
        for line in self._options[Option.HTTP_HEADER]:
            if ":" not in line:
                continue
            name, value = line.split(":", 1)
            name, value = name.strip(), value.strip()
            for existing in [k for k in headers if k.lower() == name.lower()]:
                del headers[existing]
            if value:
                headers[name] = value
            else:
                # "Name:" with nothing after it removes the header entirely.
                removed.append(name)
        return headers, removed

    def execute(self) -> None:
        """Perform the configured transfer, blocking until it completes.

        The status line and each response header are passed to the header
        function, body chunks to the write function. The timeout bounds the
        whole operation, body included.

        Raises:
            TimeoutError_: The timeout was reached.
            ResolveError: The host name could not be resolved.
            ConnectError: The connection could not be established.
            TransferError: Any other transport failure.
        """
        client = self._require_client()
        opts = self._options
        url = opts[Option.URL]
        if not url:
            raise TransferError(ResultCode.URL_MALFORMAT, "no URL set")

        self._status = 0
        self._effective_url = url
        if not self._cookie_engine:
            client.cookies.clear()

        code, cause = self._perform(client, url)

        if not self._cookie_engine:
            client.cookies.clear()

        if code != ResultCode.OK:
            debug(f"transfer to {url} failed with code {int(code)}: {strerror(code)}")
        raise_for_code(code, str(cause) if cause is not None else None, cause=cause)

    def _perform(
        self, client: httpx.Client, url: str
    ) -> tuple[ResultCode, Optional[BaseException]]:
        opts = self._options
        method = "POST" if opts[Option.POST] else "GET"
        content = opts[Option.POST_FIELDS] if opts[Option.POST] else None
        headers, removed = self._request_headers()
        timeout = opts[Option.TIMEOUT]
        deadline = _clock() + timeout if timeout else None
        write: Optional[Callable[[bytes], Any]] = opts[Option.WRITE_FUNCTION]
        header_fn: Optional[Callable[[str], Any]] = opts[Option.HEADER_FUNCTION]

        debug(f"{method} {url}")
        try:
            request = client.build_request(
                method,
                url,
                headers=headers,
                content=content,
                # Each phase may wait at most what is left of the whole budget.
                timeout=httpx.Timeout(_time_left(deadline, timeout)),
            )
            for name in removed:
                request.headers.pop(name, None)
            response = client.send(
                request, stream=True, follow_redirects=opts[Option.FOLLOW_LOCATION]
            )
            try:
                _time_left(deadline, timeout)
                self._status = response.status_code
                self._effective_url = str(response.url)
                if header_fn is not None:
                    header_fn(f"{response.http_version} {response.status_code} {response.reason_phrase}")
                    for raw_name, raw_value in response.headers.raw:
                        header_fn(f"{raw_name.decode('latin-1')}: {raw_value.decode('latin-1')}")
                for chunk in response.iter_bytes():
                    _time_left(deadline, timeout)
                    if write is None or not chunk:
                        continue
                    written = write(chunk)
                    if written is not None and written != len(chunk):
                        return ResultCode.WRITE_ERROR, None
                _time_left(deadline, timeout)
            finally:
                response.close()
        except _DeadlineExceeded as exc:
            return ResultCode.OPERATION_TIMEDOUT, exc
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            return classify(exc), exc
        return ResultCode.OK, None

    # ------------------------------------------------------------------ #
    # Metadata
    # ------------------------------------------------------------------ #

    def inspect(self, info: Info) -> Any:
        """Read post-transfer metadata.

        Args:
            info: Which field to read.

        Returns:
            ``int`` for :attr:`Info.RESPONSE_CODE` (``0`` before any
            response), ``list[str]`` of Netscape cookie lines for
            :attr:`Info.COOKIE_LIST`, ``str`` for :attr:`Info.EFFECTIVE_URL`.

        Raises:
            TransferError: :attr:`ResultCode.BAD_FUNCTION_ARGUMENT` for an
                unknown field or a closed handle.
        """
        if info == Info.RESPONSE_CODE:
            return self._status
        if info == Info.EFFECTIVE_URL:
            return self._effective_url
        if info == Info.COOKIE_LIST:
            return [format_cookie(cookie) for cookie in self._require_client().cookies.jar]
        raise TransferError(ResultCode.BAD_FUNCTION_ARGUMENT, repr(info))
