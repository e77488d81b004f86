"""Token endpoint client for authcode.

Provides the Authorization Code client and the shared form POST it uses.

Classes:
    :class:`OAuthClient` -- builds authorize URLs and requests tokens.

Functions:
    :func:`fetch_token` -- one form-encoded POST decoded into a
    :class:`~authcode.models.TokenResponse`.

Example::

    from authcode.client import OAuthClient

    client = OAuthClient(client_id, authorize_url, token_url, redirect_url, secret)
    tokens = client.refresh_access_token(refresh_token)
"""

from authcode.client.fetcher import fetch_token
from authcode.client.oauth_client import OAuthClient

__all__ = ["OAuthClient", "fetch_token"]
