"""Exception hierarchy for hurl.

All exceptions inherit from :class:`HurlError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`hurl.exit_codes`.
The command-line entry point :func:`hurl.app.main` catches ``HurlError``
and exits with the matching code. Library callers catch the narrower
classes.

Subclass hierarchy::

    HurlError (exit 1)
    +-- TransportError          (base, carries ``code``)
    |   +-- TimeoutError_       (exit 3)
    |   +-- ResolveError        (exit 4)
    |   +-- ConnectError        (exit 5)
    |   +-- TransferError       (exit 6)
    +-- ArchiveError            (exit 7)
    +-- ConfigError             (exit 1)

An HTTP error status (404, 500, ...) is *not* an exception: it comes back
as an ordinary :class:`~hurl.models.HttpResponse`. Only failures of the
transfer itself are raised. Nothing in hurl retries; that decision is left
to the caller.
"""

from __future__ import annotations

from typing import Optional

from hurl.codes import ResultCode, strerror
from hurl.exit_codes import (
    EXIT_ARCHIVE_ERROR,
    EXIT_CONNECT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_RESOLVE_ERROR,
    EXIT_TIMEOUT,
    EXIT_TRANSFER_ERROR,
)


class HurlError(Exception):
    """Base exception for all hurl errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class TransportError(HurlError):
    """Base class for failures reported by a transfer handle.

    The underlying numeric :class:`~hurl.codes.ResultCode` is preserved in
    :attr:`code` for diagnostics.

    Args:
        code: The transport result code.
        detail: Optional extra context appended to the standard message.
    """

    exit_code = EXIT_TRANSFER_ERROR

    def __init__(self, code: int, detail: Optional[str] = None):
        message = strerror(code)
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.code = int(code)
        self.detail = detail


class TimeoutError_(TransportError):
    """The transfer exceeded its configured timeout.

    Named with a trailing underscore to avoid shadowing the built-in
    ``TimeoutError``.
    """

    exit_code = EXIT_TIMEOUT

    def __init__(self, detail: Optional[str] = None):
        super().__init__(ResultCode.OPERATION_TIMEDOUT, detail)


class ResolveError(TransportError):
    """The host name could not be resolved."""

    exit_code = EXIT_RESOLVE_ERROR

    def __init__(self, detail: Optional[str] = None):
        super().__init__(ResultCode.COULDNT_RESOLVE_HOST, detail)


class ConnectError(TransportError):
    """A TCP or TLS connection to the server could not be established."""

    exit_code = EXIT_CONNECT_ERROR

    def __init__(self, detail: Optional[str] = None):
        super().__init__(ResultCode.COULDNT_CONNECT, detail)


class TransferError(TransportError):
    """Any other transport failure, including rejected options and metadata reads."""


class ArchiveError(HurlError):
    """A downloaded tarball could not be extracted.

    The archive itself is already on disk when this is raised; the caller
    decides whether to retry the extraction or download again.
    """

    exit_code = EXIT_ARCHIVE_ERROR


class ConfigError(HurlError):
    """Raised for invalid configuration files or environment values."""

    exit_code = EXIT_GENERIC_FAILURE


def error_for_code(code: int, detail: Optional[str] = None) -> Optional[TransportError]:
    """Build the exception matching a transport result code.

    :attr:`ResultCode.OPERATION_TIMEDOUT`, :attr:`ResultCode.COULDNT_RESOLVE_HOST`
    and :attr:`ResultCode.COULDNT_CONNECT` get their dedicated classes; any
    other non-OK code becomes a :class:`TransferError` holding the code.

    Args:
        code: The result code of a transfer.
        detail: Optional context for the exception message.

    Returns:
        The exception to raise, or ``None`` for :attr:`ResultCode.OK`.
    """
    if code == ResultCode.OK:
        return None
    if code == ResultCode.OPERATION_TIMEDOUT:
        return TimeoutError_(detail)
    if code == ResultCode.COULDNT_RESOLVE_HOST:
        return ResolveError(detail)
    if code == ResultCode.COULDNT_CONNECT:
        return ConnectError(detail)
    return TransferError(code, detail)


def raise_for_code(
    code: int, detail: Optional[str] = None, cause: Optional[BaseException] = None
) -> None:
    """Raise the exception matching *code*; return quietly for OK.

    *cause*, when given, is chained as the exception's ``__cause__``.
    """
    error = error_for_code(code, detail)
    if error is not None:
        raise error from cause
