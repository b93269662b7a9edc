"""Typer command-line front-end for hurl.

A thin layer over :mod:`hurl.api`: parse arguments, run one request, print
the response, and turn :class:`~hurl.exceptions.HurlError` into an error
message and a non-zero exit code (see :mod:`hurl.exit_codes`).

Example::

    hurl get https://example.com/search -p q=hurl --include
    hurl post https://example.com/form -F name=me -F lang=en
    hurl download https://example.com/data.csv data.csv
    hurl tarball https://example.com/src.tar.gz src.tar.gz src/
"""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from hurl import __version__
from hurl.exit_codes import EXIT_HTTP_ERROR


app = typer.Typer(
    name="hurl",
    help="Minimal HTTP client: GET, POST, downloads and tarballs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _show_version(requested: bool) -> None:
    if not requested:
        return
    typer.echo(f"hurl {__version__}")
    raise typer.Exit()


@app.callback()
def configure_output(
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True,
        help="Print the hurl version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print each response as one JSON document."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Never use Rich tables, even on a terminal."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="No colour on stderr."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only print response data and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace each transfer on stderr."
    ),
) -> None:
    """Minimal HTTP client: GET, POST, downloads and tarballs."""
    from hurl.output import OutputFormat, OutputManager, set_output

    if json_output:
        response_format = OutputFormat.JSON
    elif plain_output:
        response_format = OutputFormat.PLAIN
    else:
        response_format = OutputFormat.AUTO
    set_output(
        OutputManager(
            format=response_format, no_color=no_color, quiet=quiet, verbose=verbose
        )
    )


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _parse_pairs(values: Optional[list[str]], option: str) -> dict[str, str]:
    """Turn ``key=value`` arguments into a dict."""
    pairs: dict[str, str] = {}
    for item in values or []:
        if "=" not in item:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint=option)
        key, value = item.split("=", 1)
        pairs[key] = value
    return pairs


def _run(request: Callable[[], Any]) -> Any:
    """Run *request*, mapping hurl errors to a message and exit code."""
    from hurl.exceptions import HurlError
    from hurl.output import error

    try:
        return request()
    except HurlError as exc:
        error(str(exc))
        raise typer.Exit(exc.exit_code)


def _check_status(status: int, fail: bool) -> None:
    if fail and status >= 400:
        from hurl.output import error

        error(f"HTTP {status}")
        raise typer.Exit(EXIT_HTTP_ERROR)


_TIMEOUT_HELP = "Whole-request timeout in seconds (0 = none). Defaults to the configured value."


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("get")
def get_command(
    url: str = typer.Argument(..., help="URL to retrieve."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter as key=value (repeatable)."
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", min=0, help=_TIMEOUT_HELP),
    include: bool = typer.Option(False, "--include", "-i", help="Show status and headers."),
    fail: bool = typer.Option(False, "--fail", "-f", help="Exit non-zero on HTTP status >= 400."),
) -> None:
    """Send a GET request and print the response body."""
    import hurl
    from hurl.output import get_output

    params = _parse_pairs(param, "--param")
    response = _run(lambda: hurl.get(url, params, timeout))
    _check_status(response.status, fail)
    get_output().print_response(response, include_headers=include)


@app.command("post")
def post_command(
    url: str = typer.Argument(..., help="URL to POST to."),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Raw body; @FILE reads it from a file."
    ),
    field: Optional[list[str]] = typer.Option(
        None, "--field", "-F", help="Form field as key=value (repeatable)."
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", min=0, help=_TIMEOUT_HELP),
    include: bool = typer.Option(False, "--include", "-i", help="Show status and headers."),
    fail: bool = typer.Option(False, "--fail", "-f", help="Exit non-zero on HTTP status >= 400."),
) -> None:
    """Send a POST request with a raw body or form fields."""
    import hurl
    from hurl.output import get_output

    if data is not None and field:
        raise typer.BadParameter("use either --data or --field, not both", param_hint="--data")

    body: Any
    if data is not None:
        if data.startswith("@"):
            try:
                body = Path(data[1:]).read_bytes()
            except OSError as exc:
                raise typer.BadParameter(str(exc), param_hint="--data")
        else:
            body = data
    else:
        body = _parse_pairs(field, "--field")

    response = _run(lambda: hurl.post(url, body, timeout))
    _check_status(response.status, fail)
    get_output().print_response(response, include_headers=include)


@app.command("download")
def download_command(
    url: str = typer.Argument(..., help="URL to download."),
    path: Path = typer.Argument(..., help="Local file (truncated first)."),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", min=0, help=_TIMEOUT_HELP),
    fail: bool = typer.Option(False, "--fail", "-f", help="Exit non-zero on HTTP status >= 400."),
) -> None:
    """Download a URL into a local file."""
    import hurl
    from hurl.output import get_output

    response = _run(lambda: hurl.download(url, path, timeout))
    _check_status(response.status, fail)
    get_output().success(f"Saved {path} (HTTP {response.status})")


@app.command("tarball")
def tarball_command(
    url: str = typer.Argument(..., help="URL of a tar archive."),
    path: Path = typer.Argument(..., help="Local file for the archive."),
    directory: Path = typer.Argument(..., help="Directory to extract into."),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", min=0, help=_TIMEOUT_HELP),
) -> None:
    """Download a tarball and extract it (only on HTTP 200; redirects are not followed)."""
    import hurl
    from hurl.output import get_output

    response = _run(lambda: hurl.downloadtarball(url, path, directory, timeout))
    if response.status != 200:
        get_output().error(f"HTTP {response.status}; nothing extracted")
        raise typer.Exit(EXIT_HTTP_ERROR)
    get_output().success(f"Extracted {path} into {directory}")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _on_sigint(signum: int, frame: Any) -> None:
    sys.stderr.write("\nInterrupted.\n")
    sys.exit(130)


def main() -> None:
    """Entry point of the ``hurl`` console script.

    Commands turn request failures into exit codes themselves. Anything
    that escapes them as a :class:`~hurl.exceptions.HurlError` (a broken
    config file read during start-up, say) still ends with one error line
    and that error's ``exit_code``.
    """
    from hurl.exceptions import HurlError
    from hurl.output import error

    signal.signal(signal.SIGINT, _on_sigint)
    try:
        app()
    except HurlError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
