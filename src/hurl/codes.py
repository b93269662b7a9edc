"""Transport result codes.

Every transfer outcome is reduced to one :class:`ResultCode`. The numbering
follows libcurl's ``CURLcode`` values, which most operators already know
from ``curl`` exit statuses, so a code printed in a diagnostic can be looked
up in familiar documentation.
"""

from __future__ import annotations

import enum


class ResultCode(enum.IntEnum):
    """Numeric outcome of a transfer or of a handle operation."""

    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    FAILED_INIT = 2
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    WRITE_ERROR = 23
    OPERATION_TIMEDOUT = 28
    BAD_FUNCTION_ARGUMENT = 43
    TOO_MANY_REDIRECTS = 47
    UNKNOWN_OPTION = 48
    GOT_NOTHING = 52
    SEND_ERROR = 55
    RECV_ERROR = 56
    BAD_CONTENT_ENCODING = 61
    PROXY = 97


_MESSAGES: dict[int, str] = {
    ResultCode.OK: "No error",
    ResultCode.UNSUPPORTED_PROTOCOL: "Unsupported protocol",
    ResultCode.FAILED_INIT: "Failed to initialise transfer handle",
    ResultCode.URL_MALFORMAT: "URL using bad/illegal format or missing URL",
    ResultCode.COULDNT_RESOLVE_HOST: "Could not resolve host name",
    ResultCode.COULDNT_CONNECT: "Could not connect to server",
    ResultCode.WRITE_ERROR: "Failed writing received data",
    ResultCode.OPERATION_TIMEDOUT: "Timeout was reached",
    ResultCode.BAD_FUNCTION_ARGUMENT: "Bad argument passed to transfer handle",
    ResultCode.TOO_MANY_REDIRECTS: "Number of redirects hit maximum amount",
    ResultCode.UNKNOWN_OPTION: "Unknown transfer option",
    ResultCode.GOT_NOTHING: "Server returned nothing (no headers, no data)",
    ResultCode.SEND_ERROR: "Failed sending data to the peer",
    ResultCode.RECV_ERROR: "Failure when receiving data from the peer",
    ResultCode.BAD_CONTENT_ENCODING: "Unrecognized or bad content encoding",
    ResultCode.PROXY: "Proxy handshake error",
}


def strerror(code: int) -> str:
    """Return a human-readable description of *code*.

    Args:
        code: A :class:`ResultCode` or any integer.

    Returns:
        The description, or ``"Unknown error (<code>)"`` for numbers this
        module does not know.
    """
    return _MESSAGES.get(int(code), f"Unknown error ({int(code)})")
