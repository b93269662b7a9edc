"""Console output for the ``hurl`` command.

Response data and diagnostics never share a stream:

* **stdout** carries the response itself -- raw body bytes, optionally
  preceded by the status and headers, or a single JSON document with
  ``--json``. Piping ``hurl get`` into a file yields exactly the body.
* **stderr** carries everything else: errors, success notes, and the
  ``[debug]`` trace of each transfer.

Rich styling is used only when stdout is a terminal and colour has not
been turned off with ``--no-color``, ``NO_COLOR`` or ``TERM=dumb``.

The library modules only ever call :func:`debug`. It stays silent until a
verbose :class:`OutputManager` is installed with :func:`set_output`, which
the CLI does for ``--verbose``.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from hurl.models import HttpResponse


class OutputFormat(str, Enum):
    """How responses are rendered. ``AUTO`` picks ``RICH`` or ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _color_disabled_by_env() -> bool:
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


class OutputManager:
    """Renders responses and diagnostics for one CLI invocation.

    Args:
        format: Response format; ``AUTO`` becomes ``RICH`` on a colour
            terminal and ``PLAIN`` otherwise.
        no_color: Never emit styling.
        quiet: Drop success notes. Errors are always shown.
        verbose: Show the ``[debug]`` transfer trace.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._plain_diagnostics = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose
        if format is OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._plain_diagnostics
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format
        self._console = Console(
            file=sys.stderr, stderr=True, no_color=self._plain_diagnostics
        )

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ---- stdout ------------------------------------------------------- #

    def print_data(self, text: str) -> None:
        """Write one line of response text to stdout."""
        sys.stdout.write(text + "\n")
        sys.stdout.flush()

    def print_bytes(self, data: bytes) -> None:
        """Write a response body to stdout exactly as received."""
        sys.stdout.flush()
        binary = getattr(sys.stdout, "buffer", None)
        if binary is None:
            # Text-only stream (some embedding hosts); decode as best we can.
            sys.stdout.write(data.decode("utf-8", errors="replace"))
            sys.stdout.flush()
            return
        binary.write(data)
        binary.flush()

    def print_response(self, response: HttpResponse, include_headers: bool = False) -> None:
        """Render *response* in the active format.

        JSON mode prints ``{"status", "headers", "body"}`` and ignores
        *include_headers*. Rich mode draws the headers as a table on
        stderr so stdout still holds only the body. Plain mode prints an
        ``HTTP <status>`` line, ``Name: value`` lines and a blank line
        before the body.
        """
        if self._format is OutputFormat.JSON:
            self.print_data(
                json.dumps(
                    {
                        "status": response.status,
                        "headers": response.headers,
                        "body": response.text,
                    },
                    indent=2,
                    ensure_ascii=False,
                )
            )
            return

        if include_headers and self._format is OutputFormat.RICH:
            self._console.print(self._header_table(response))
        elif include_headers:
            self.print_data(f"HTTP {response.status}")
            for name, value in response.headers.items():
                self.print_data(f"{name}: {value}")
            self.print_data("")
        self.print_bytes(response.body)

    @staticmethod
    def _header_table(response: HttpResponse) -> Table:
        table = Table(title=f"HTTP {response.status}", header_style="bold cyan")
        table.add_column("Header", style="cyan")
        table.add_column("Value")
        for name, value in response.headers.items():
            table.add_row(escape(name), escape(value))
        return table

    # ---- stderr ------------------------------------------------------- #

    def _emit(self, plain: str, styled: str) -> None:
        if self._plain_diagnostics:
            sys.stderr.write(plain + "\n")
            sys.stderr.flush()
        else:
            self._console.print(styled, highlight=False)

    def success(self, message: str) -> None:
        """Note a completed action. Dropped with ``--quiet``."""
        if not self._quiet:
            self._emit(message, f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        """Report a failure. Shown even with ``--quiet``."""
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Trace one step of a transfer. Shown only with ``--verbose``."""
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")


# ---- process-wide instance ---------------------------------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """The installed manager; a default one is created on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (test helper)."""
    global _output
    _output = None


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
