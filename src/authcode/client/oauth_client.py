"""OAuth2 Authorization Code client.

This module provides :class:`OAuthClient`, which covers the three requests
an application makes against an identity provider during the Authorization
Code grant (:rfc:`6749` section 4.1):

1. Build the authorization URL the user is redirected to.
2. Exchange the authorization code from the callback for tokens.
3. Refresh the access token with the refresh token.

The client holds configuration only. It never stores tokens and never
checks ``state``; both are the caller's job.

See Also:
    :func:`authcode.client.fetcher.fetch_token` for the shared POST.
    :func:`authcode.config.build_client` to build a client from a saved
    provider profile.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional
from urllib.parse import urlencode

import httpx

from authcode.client.fetcher import fetch_token
from authcode.exceptions import InvalidURLError
from authcode.models import DEFAULT_SCOPES, TokenResponse

logger = logging.getLogger(__name__)


class OAuthClient:
    """Authorization Code grant against a single identity provider.

    Configuration is fixed at construction time and exposed read-only, so
    one instance can serve any number of concurrent requests. URLs are not
    validated up front; a malformed authorize URL surfaces from
    :meth:`build_authorize_url` and a malformed token URL from the token
    calls.

    Args:
        client_id: Client identifier issued by the provider.
        authorize_url: The provider's authorization endpoint.
        token_url: The provider's token endpoint.
        redirect_url: Callback URL registered with the provider.
        client_secret: Client secret issued by the provider.
        scopes: Scopes to request, in order. Defaults to
            :data:`~authcode.models.DEFAULT_SCOPES`.
        http_client: Optional :class:`httpx.Client` used for every token
            request. The caller owns its lifecycle. When ``None`` each call
            opens a short-lived client.

    Example::

        client = OAuthClient(
            "cid",
            "https://idp.example/auth",
            "https://idp.example/token",
            "https://app.example/cb",
            "secret",
        )
        url = client.build_authorize_url(state)
        tokens = client.exchange_code_for_token(code)
    """

    def __init__(
        self,
        client_id: str,
        authorize_url: str,
        token_url: str,
        redirect_url: str,
        client_secret: str,
        scopes: Optional[Iterable[str]] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._client_id = client_id
        self._authorize_url = authorize_url
        self._token_url = token_url
        self._redirect_url = redirect_url
        self._client_secret = client_secret
        self._scopes: tuple[str, ...] = (
            DEFAULT_SCOPES if scopes is None else tuple(scopes)
        )
        self._http_client = http_client

    def __repr__(self) -> str:
        return (
            f"OAuthClient(client_id={self._client_id!r}, "
            f"authorize_url={self._authorize_url!r}, token_url={self._token_url!r})"
        )

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def authorize_url(self) -> str:
        return self._authorize_url

    @property
    def token_url(self) -> str:
        return self._token_url

    @property
    def redirect_url(self) -> str:
        return self._redirect_url

    @property
    def scopes(self) -> tuple[str, ...]:
        return self._scopes

    # ------------------------------------------------------------------ #
    # Authorization request
    # ------------------------------------------------------------------ #

    def build_authorize_url(self, state: str) -> str:
        """Return the URL to redirect the user to.

        Query parameters already present on the configured authorize URL are
        kept, except the ones set here, which are replaced so that each
        appears exactly once.

        Args:
            state: Opaque value the provider echoes back to the callback.
                Passed through verbatim.

        Returns:
            The serialised authorization URL.

        Raises:
            InvalidURLError: If the configured authorize URL cannot be parsed.
        """
        try:
            base = httpx.URL(self._authorize_url)
        except httpx.InvalidURL as exc:
            raise InvalidURLError(
                f"oauth: invalid authorize URL {self._authorize_url!r}: {exc}"
            ) from exc

        params = {
            "scope": " ".join(self._scopes),
            "redirect_uri": self._redirect_url,
            "client_id": self._client_id,
            "access_type": "offline",
            "response_type": "code",
            "prompt": "consent",
            "state": state,
        }
        return str(base.copy_merge_params(params))

    # ------------------------------------------------------------------ #
    # Token requests
    # ------------------------------------------------------------------ #

    def exchange_code_for_token(self, code: str) -> TokenResponse:
        """Exchange an authorization code for tokens.

        ``code_verifier`` is always sent empty; PKCE is not implemented.

        Args:
            code: The ``code`` query parameter from the provider callback.

        Returns:
            The tokens issued by the provider.

        Raises:
            TransportError: The request could not be sent or read.
            EndpointNotFoundError: The token endpoint answered HTTP 400.
            DecodeError: The response body was not the expected JSON.
            ProviderError: The provider returned an OAuth error payload.
        """
        body = urlencode(
            {
                "client_secret": self._client_secret,
                "grant_type": "authorization_code",
                "redirect_uri": self._redirect_url,
                "client_id": self._client_id,
                "code_verifier": "",
                "code": code,
            }
        )
        logger.debug("Exchanging authorization code at %s", self._token_url)
        return fetch_token(self._token_url, body, client=self._http_client)

    def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """Obtain a new access token with a refresh token.

        Raises the same errors as :meth:`exchange_code_for_token`.
        """
        body = urlencode(
            {
                "client_secret": self._client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
                "client_id": self._client_id,
            }
        )
        logger.debug("Refreshing access token at %s", self._token_url)
        return fetch_token(self._token_url, body, client=self._http_client)
