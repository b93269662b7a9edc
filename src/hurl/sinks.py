"""Destinations for the body and header streams of a transfer.

A transfer handle knows nothing about where data ends up: it calls the
``write`` function installed with :attr:`~hurl.handle.Option.WRITE_FUNCTION`
for every body chunk and the ``feed`` function installed with
:attr:`~hurl.handle.Option.HEADER_FUNCTION` for every header line.
:class:`BufferSink` collects a body in memory; downloads install the
``write`` method of an open file instead.
"""

from __future__ import annotations


class BufferSink:
    """In-memory body accumulator."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write(self, chunk: bytes) -> int:
        self._buffer.extend(chunk)
        return len(chunk)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class HeaderParser:
    """Builds a header mapping from raw header lines.

    Each line of the form ``Name: value`` is stored as
    ``name.strip() -> value.strip()``; a repeated name overwrites the
    earlier value. Status lines (``HTTP/1.1 200 OK``) and lines without a
    colon are ignored, except that a status line starts a new header block
    so only the headers of the final response in a redirect chain remain.
    """

    def __init__(self) -> None:
        self._headers: dict[str, str] = {}
        self.status_line: str = ""

    def feed(self, line: str) -> None:
        line = line.rstrip("\r\n")
        if line.startswith("HTTP/"):
            self.status_line = line
            self._headers = {}
            return
        if ":" not in line:
            return
        name, value = line.split(":", 1)
        self._headers[name.strip()] = value.strip()

    @property
    def headers(self) -> dict[str, str]:
        """A copy of the headers parsed so far."""
        return dict(self._headers)
