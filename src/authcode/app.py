"""Typer application and CLI entry point for authcode.

This module wires together the top-level Typer application: the three token
commands (``authorize-url``, ``exchange``, ``refresh``), the ``state`` helper
group, and the ``provider`` management group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`authcode.config`: Provider resolution.
    :mod:`authcode.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from authcode import __version__
from authcode.client import OAuthClient
from authcode.commands.provider import provider_app
from authcode.exceptions import AuthcodeError
from authcode.exit_codes import EXIT_GENERIC_FAILURE
from authcode.models import OAuthAction, OAuthState
from authcode.output import debug, error, info, print_data, print_record, print_token

app = typer.Typer(
    name="authcode",
    help="OAuth2 Authorization Code flow helper.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
state_app = typer.Typer(no_args_is_help=True)

app.add_typer(provider_app, name="provider", help="Identity provider profiles.")
app.add_typer(state_app, name="state", help="Encode and decode state values.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"authcode {__version__}")
        raise typer.Exit()


def _configure_logging(console: Console) -> None:
    """Send ``authcode`` library logs to stderr through Rich at DEBUG level."""
    logger = logging.getLogger("authcode")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(logging.DEBUG)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", "-p", help="Provider profile to use."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~authcode.output.OutputManager` from CLI
    flags (falling back to ``output.format`` in the global config) and
    stores the provider override in ``ctx.obj``.
    """
    from authcode.config import load_global_config
    from authcode.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except (AuthcodeError, ValueError):
            fmt = OutputFormat.AUTO

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    if verbose:
        _configure_logging(output.stderr_console)

    ctx.ensure_object(dict)
    ctx.obj["provider"] = provider
    ctx.obj["verbose"] = verbose


def _client_from_context(ctx: typer.Context) -> OAuthClient:
    """Build the client for the active provider.

    Raises:
        ConfigError: If no provider can be resolved or its secret cannot be read.
    """
    from authcode.config import build_client, resolve_provider

    cli_provider = ctx.obj.get("provider") if ctx.obj else None
    provider = resolve_provider(cli_provider)
    debug(f"Using provider: {provider.name}")
    return build_client(provider)


def _exit_with(exc: AuthcodeError) -> typer.Exit:
    """Report *exc* on stderr and return the matching ``typer.Exit``."""
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


# ------------------------------------------------------------------ #
# Token commands
# ------------------------------------------------------------------ #


@app.command("authorize-url")
def authorize_url_command(
    ctx: typer.Context,
    state: Optional[str] = typer.Option(
        None, "--state", "-s", help="Opaque state value, passed through verbatim."
    ),
    action: OAuthAction = typer.Option(
        OAuthAction.SIGNIN,
        "--action",
        "-a",
        help="Action encoded into a generated state (ignored with --state).",
    ),
) -> None:
    """Print the authorization URL to send the user to.

    Without ``--state`` a fresh :class:`~authcode.models.OAuthState` is
    generated for ``--action``; its encoded value is echoed to stderr so the
    caller can keep it for the callback.

    Example::

        authcode authorize-url --state "$(uuidgen)"
        authcode -p google authorize-url --action CREATE_ACCOUNT
    """
    if state is None:
        state = OAuthState.new(action).encode()
        info(f"State: {state}")

    try:
        url = _client_from_context(ctx).build_authorize_url(state)
    except AuthcodeError as exc:
        raise _exit_with(exc) from None
    print_data(url)


@app.command("exchange")
def exchange_command(
    ctx: typer.Context,
    code: str = typer.Argument(help="Authorization code from the provider callback."),
) -> None:
    """Exchange an authorization code for tokens.

    Example::

        authcode exchange 4/0AX4XfWh... --json
    """
    try:
        tokens = _client_from_context(ctx).exchange_code_for_token(code)
    except AuthcodeError as exc:
        raise _exit_with(exc) from None
    print_token(tokens)


@app.command("refresh")
def refresh_command(
    ctx: typer.Context,
    refresh_token: str = typer.Argument(help="Refresh token issued earlier."),
) -> None:
    """Request a new access token with a refresh token."""
    try:
        tokens = _client_from_context(ctx).refresh_access_token(refresh_token)
    except AuthcodeError as exc:
        raise _exit_with(exc) from None
    print_token(tokens)


# ------------------------------------------------------------------ #
# State helpers
# ------------------------------------------------------------------ #


@state_app.command("new")
def state_new(
    action: OAuthAction = typer.Option(
        OAuthAction.SIGNIN, "--action", "-a", help="Action to encode."
    ),
) -> None:
    """Print a freshly generated, encoded state value."""
    print_data(OAuthState.new(action).encode())


@state_app.command("decode")
def state_decode(
    value: str = typer.Argument(help="Encoded state from the callback."),
) -> None:
    """Decode a state value produced by ``state new`` or ``authorize-url``."""
    try:
        decoded = OAuthState.decode(value)
    except AuthcodeError as exc:
        raise _exit_with(exc) from None
    print_record(decoded.model_dump(mode="json"))


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from authcode.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``authcode`` console script.

    Unhandled :class:`~authcode.exceptions.AuthcodeError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except AuthcodeError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
