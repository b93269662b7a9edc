"""Numeric process exit codes used by the ``hurl`` command-line front-end.

Each constant maps to one error category and is referenced by the
corresponding :class:`~hurl.exceptions.HurlError` subclass. Shell scripts
can inspect the exit code to tell a DNS failure from a timeout without
parsing stderr.

Example::

    $ hurl get http://no-such-host.invalid/
    $ echo $?
    4   # EXIT_RESOLVE_ERROR -- the host name could not be resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_TIMEOUT = 3
"""The transfer exceeded its configured timeout."""

EXIT_RESOLVE_ERROR = 4
"""The host name could not be resolved."""

EXIT_CONNECT_ERROR = 5
"""A TCP or TLS connection could not be established."""

EXIT_TRANSFER_ERROR = 6
"""Any other transport-level failure."""

EXIT_ARCHIVE_ERROR = 7
"""A downloaded tarball could not be extracted."""

EXIT_HTTP_ERROR = 8
"""The server answered with HTTP status >= 400 and ``--fail`` was given."""
