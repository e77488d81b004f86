"""Terminal output for the authcode CLI.

stdout carries only what a script captures: the authorization URL, tokens,
state payloads and provider listings. Status lines, errors, hints and
``--verbose`` detail go to stderr, so ``URL=$(authcode authorize-url)``
behaves the same with or without a terminal attached.

Three renderings exist for every piece of data:

* ``json`` -- machine-readable, exactly the wire field names.
* ``plain`` -- ``key<TAB>value`` lines, the default when stdout is piped.
* ``rich`` -- labelled tables, the default on an interactive terminal.

Colour is disabled by ``--no-color``, ``NO_COLOR`` (any value) and
``TERM=dumb``.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from authcode.models import TokenResponse

_TOKEN_LABELS: tuple[tuple[str, str], ...] = (
    ("access_token", "Access token"),
    ("token_type", "Token type"),
    ("expires_in", "Expires in"),
    ("refresh_token", "Refresh token"),
    ("id_token", "ID token"),
)


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes CLI data to stdout and diagnostics to stderr.

    One instance is built per invocation by the root callback and installed
    with :func:`set_output`.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """Console the ``--verbose`` log handler writes to."""
        return self._stderr

    # --- stdout ---

    def print_data(self, text: str) -> None:
        """Write *text* to stdout as-is, whatever the format."""
        print(text, file=sys.stdout, flush=True)

    def print_token(self, token: TokenResponse) -> None:
        """Render tokens from an exchange or refresh.

        JSON mode emits the wire object so it can be piped to ``jq``. Rich
        mode labels each field and marks the ones the provider left out.
        """
        data = token.model_dump()
        if self._format == OutputFormat.JSON:
            self._dump_json(data)
            return
        if self._format == OutputFormat.PLAIN:
            for key, _ in _TOKEN_LABELS:
                self.print_data(f"{key}\t{data[key]}")
            return

        table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
        table.add_column(style="bold cyan", no_wrap=True)
        table.add_column(overflow="fold")
        for key, label in _TOKEN_LABELS:
            value = data[key]
            if key == "expires_in":
                cell = f"{value} s" if value else "[dim]not reported[/dim]"
            else:
                cell = escape(value) if value else "[dim]not issued[/dim]"
            table.add_row(label, cell)
        self._stdout.print(table)

    def print_record(self, data: dict[str, Any]) -> None:
        """Render a flat settings object (provider profile, decoded state)."""
        if self._format == OutputFormat.JSON:
            self._dump_json(data)
            return
        rows = [(key, _cell_text(value)) for key, value in data.items()]
        if self._format == OutputFormat.PLAIN:
            for key, text in rows:
                self.print_data(f"{key}\t{text}")
            return

        table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
        table.add_column(style="bold cyan", no_wrap=True)
        table.add_column(overflow="fold")
        for key, text in rows:
            table.add_row(key, escape(text))
        self._stdout.print(table)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows; JSON mode emits one object per row keyed by header."""
        if self._format == OutputFormat.JSON:
            self._dump_json([dict(zip(headers, row)) for row in rows])
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    # --- stderr ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._note(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._note(message, style="green")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._note(f"→ {message}", style="dim")

    def error(self, message: str) -> None:
        """Never suppressed, not even by ``--quiet``."""
        self._note(message, prefix="Error:", style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._note(message, prefix="[debug]", style="dim")

    def _note(self, message: str, prefix: str = "", style: str = "") -> None:
        if self._no_color:
            line = f"{prefix} {message}" if prefix else message
            print(line, file=sys.stderr, flush=True)
            return
        text = escape(f"{prefix} {message}" if prefix else message)
        self._stderr.print(f"[{style}]{text}[/{style}]" if style else text)

    def _dump_json(self, data: Any) -> None:
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False))


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- process-wide instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; tests call this between runs."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_token(token: TokenResponse) -> None:
    get_output().print_token(token)


def print_record(data: dict[str, Any]) -> None:
    get_output().print_record(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
