"""Provider commands -- manage saved identity provider profiles.

Provides the ``authcode provider`` sub-command group. Each provider is a
:class:`~authcode.models.ProviderConfig` stored as JSON in the authcode
config directory; the token commands read the active one so that URLs and
client ids do not have to be repeated on every call.
"""

from __future__ import annotations

from typing import Optional

import typer

from authcode.exceptions import AuthcodeError
from authcode.output import error, info, print_record, print_table, success, suggest

provider_app = typer.Typer(no_args_is_help=True)


@provider_app.command("add")
def provider_add(
    name: str = typer.Argument(help="Provider name, e.g. 'google'."),
    client_id: str = typer.Option(..., "--client-id", help="OAuth client id."),
    authorize_url: str = typer.Option(
        ..., "--authorize-url", help="Provider authorization endpoint."
    ),
    token_url: str = typer.Option(..., "--token-url", help="Provider token endpoint."),
    redirect_url: str = typer.Option(
        ..., "--redirect-url", help="Callback URL registered with the provider."
    ),
    client_secret_source: str = typer.Option(
        "none",
        "--client-secret-source",
        help="Where to read the client secret: env:VAR, file:/path, prompt, none.",
    ),
    scopes: Optional[list[str]] = typer.Option(
        None,
        "--scope",
        help="Scope to request (repeatable). Defaults to 'profile email'.",
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing provider."
    ),
) -> None:
    """Save a provider profile.

    Example::

        authcode provider add google \\
            --client-id 123.apps.googleusercontent.com \\
            --authorize-url https://accounts.google.com/o/oauth2/v2/auth \\
            --token-url https://oauth2.googleapis.com/token \\
            --redirect-url http://localhost:8080/callback \\
            --client-secret-source env:GOOGLE_CLIENT_SECRET
    """
    from authcode.config import provider_exists, save_provider
    from authcode.models import ProviderConfig

    if provider_exists(name) and not force:
        error(f'Provider "{name}" already exists. Use --force to overwrite.')
        raise typer.Exit(code=2)

    fields: dict[str, object] = {
        "name": name,
        "client_id": client_id,
        "authorize_url": authorize_url,
        "token_url": token_url,
        "redirect_url": redirect_url,
        "client_secret_source": client_secret_source,
    }
    if scopes:
        fields["scopes"] = scopes

    save_provider(ProviderConfig.model_validate(fields))
    success(f'Provider "{name}" saved.')
    suggest(f"Make it the default: authcode provider use {name}")


@provider_app.command("list")
def provider_list() -> None:
    """List saved providers, marking the default one."""
    from authcode.config import list_providers, load_global_config

    names = list_providers()
    if not names:
        info("No providers configured.")
        suggest("Add one: authcode provider add NAME --client-id ...")
        return

    default = load_global_config().default_provider
    rows = [[name, "*" if name == default else ""] for name in names]
    print_table(["name", "default"], rows, title="Providers")


@provider_app.command("show")
def provider_show(
    name: str = typer.Argument(help="Provider name."),
) -> None:
    """Show a provider's settings."""
    from authcode.config import load_provider

    try:
        provider = load_provider(name)
    except AuthcodeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    print_record(provider.model_dump(mode="json"))


@provider_app.command("remove")
def provider_remove(
    name: str = typer.Argument(help="Provider name."),
) -> None:
    """Delete a provider, clearing it as default if needed."""
    from authcode.config import delete_provider, load_global_config, save_global_config

    try:
        delete_provider(name)
    except AuthcodeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    config = load_global_config()
    if config.default_provider == name:
        config.default_provider = None
        save_global_config(config)
        info(f'"{name}" was the default provider; no default is set now.')
    success(f'Provider "{name}" removed.')


@provider_app.command("use")
def provider_use(
    name: str = typer.Argument(help="Provider name."),
) -> None:
    """Make a provider the default for token commands."""
    from authcode.config import load_global_config, provider_exists, save_global_config
    from authcode.exit_codes import EXIT_CONFIG_ERROR

    if not provider_exists(name):
        error(f'Provider "{name}" not found.')
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    config = load_global_config()
    config.default_provider = name
    save_global_config(config)
    success(f'Default provider set to "{name}".')
