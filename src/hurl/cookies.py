"""Cookie-list lines in Netscape cookie-file format.

The cookie jar of a session is exported and imported one cookie per line,
in the tab-separated format browsers and ``curl`` use for cookie files::

    # domain  include_subdomains  path  secure  expires  name  value
    .example.com	TRUE	/	FALSE	1735689600	sessionid	abc123

HttpOnly cookies carry a ``#HttpOnly_`` prefix on the domain. Session
cookies are written with an expiry of ``0``.
"""

from __future__ import annotations

from http.cookiejar import Cookie
from typing import Optional

_HTTPONLY_PREFIX = "#HttpOnly_"


def _flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def _is_httponly(cookie: Cookie) -> bool:
    return cookie.has_nonstandard_attr("HttpOnly") or cookie.has_nonstandard_attr("httponly")


def format_cookie(cookie: Cookie) -> str:
    """Serialise *cookie* as one Netscape cookie-file line."""
    domain = cookie.domain
    if _is_httponly(cookie):
        domain = _HTTPONLY_PREFIX + domain
    expires = cookie.expires if cookie.expires is not None else 0
    return "\t".join(
        [
            domain,
            _flag(cookie.domain_specified),
            cookie.path,
            _flag(cookie.secure),
            str(expires),
            cookie.name,
            cookie.value or "",
        ]
    )


def parse_cookie_line(line: str) -> Optional[Cookie]:
    """Parse one Netscape cookie-file line.

    Args:
        line: The line, with or without a trailing newline.

    Returns:
        The :class:`~http.cookiejar.Cookie`, or ``None`` if the line is
        blank, a comment, or does not have seven tab-separated fields.
    """
    line = line.rstrip("\r\n")
    rest: dict[str, Optional[str]] = {}
    if line.startswith(_HTTPONLY_PREFIX):
        line = line[len(_HTTPONLY_PREFIX):]
        rest["HttpOnly"] = None
    elif not line.strip() or line.startswith("#"):
        return None

    parts = line.split("\t")
    if len(parts) != 7:
        return None
    domain, flag, path, secure, expiration, name, value = parts
    if not domain or not name:
        return None

    try:
        expires: Optional[int] = int(expiration)
    except ValueError:
        return None
    if expires == 0:
        expires = None

    return Cookie(
        version=0,
        name=name,
        value=value,
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=flag.upper() == "TRUE",
        domain_initial_dot=domain.startswith("."),
        path=path or "/",
        path_specified=True,
        secure=secure.upper() == "TRUE",
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest=rest,
        rfc2109=False,
    )
