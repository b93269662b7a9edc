"""Pydantic models shared across hurl.

:class:`HttpResponse` is what every request operation returns.
:class:`Settings` holds the configurable defaults resolved by
:mod:`hurl.config`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Response ---


class HttpResponse(BaseModel):
    """Result of one HTTP request.

    Created fresh for every request and frozen before it is handed back,
    so it never aliases state held by a transfer handle. For downloads the
    body was streamed to a file and :attr:`body` is empty.

    Example::

        resp = hurl.get("https://example.com/")
        if resp.status == 200:
            print(resp.headers.get("Content-Type"), len(resp.body))
    """

    model_config = ConfigDict(frozen=True)

    status: int = Field(description="HTTP status code (0 if no response was read)")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Response headers; the last occurrence of a name wins",
    )
    body: bytes = Field(default=b"", description="Response body")

    @property
    def text(self) -> str:
        """The body decoded as UTF-8, undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")


# --- Settings ---


class Settings(BaseModel):
    """Configurable request defaults.

    Loaded from ``config.json`` and ``HURL_*`` environment variables by
    :func:`hurl.config.load_settings`.
    """

    timeout: int = Field(
        default=0, ge=0, description="Per-request timeout in seconds (0 = unbounded)"
    )
    compress_threshold: int = Field(
        default=10 * 1024,
        ge=0,
        description="POST bodies longer than this many bytes are gzip-compressed",
    )
    follow_redirects: bool = Field(
        default=False,
        description="Follow redirects on get/post/download (never on tarball downloads)",
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    user_agent: Optional[str] = Field(
        default=None, description="User-Agent header sent with every request"
    )
