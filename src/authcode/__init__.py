"""authcode -- a small OAuth2 Authorization Code flow helper.

Builds the provider authorization URL, exchanges the callback code for
tokens, and refreshes tokens. Token storage, session handling and ``state``
verification are left to the caller.

Typical use::

    from authcode import OAuthClient, OAuthState

    client = OAuthClient(client_id, authorize_url, token_url, redirect_url, secret)
    state = OAuthState.new().encode()
    redirect_to(client.build_authorize_url(state))
    ...
    tokens = client.exchange_code_for_token(code)

The same operations are available from the ``authcode`` command line tool,
which reads provider settings from saved profiles.

Modules:
    client: :class:`OAuthClient` and the shared token request.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and provider profile management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting for the CLI.
    app: Typer application and CLI entry point.
"""

from authcode.client import OAuthClient, fetch_token
from authcode.exceptions import (
    AuthcodeError,
    DecodeError,
    EndpointNotFoundError,
    InvalidURLError,
    ProviderError,
    TransportError,
)
from authcode.models import DEFAULT_SCOPES, OAuthAction, OAuthState, TokenResponse

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SCOPES",
    "AuthcodeError",
    "DecodeError",
    "EndpointNotFoundError",
    "InvalidURLError",
    "OAuthAction",
    "OAuthClient",
    "OAuthState",
    "ProviderError",
    "TokenResponse",
    "TransportError",
    "fetch_token",
]
