"""Shared token endpoint request used by every grant.

:func:`fetch_token` sends one form-encoded POST and decodes the JSON reply
into a :class:`~authcode.models.TokenResponse`. The status code decides how
the body is read:

- **200** -- the body is a token.
- **400** -- :class:`~authcode.exceptions.EndpointNotFoundError`; the body is
  not read. Some providers answer 400 for an unknown token path, so this
  status is reported as a missing endpoint rather than decoded.
- **anything else** -- the body is an OAuth error payload and becomes a
  :class:`~authcode.exceptions.ProviderError`.

No retries are attempted and httpx's default timeout applies.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from authcode.exceptions import (
    DecodeError,
    EndpointNotFoundError,
    ProviderError,
    TransportError,
)
from authcode.models import ProviderErrorPayload, TokenResponse

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def fetch_token(
    token_url: str,
    body: str,
    client: Optional[httpx.Client] = None,
) -> TokenResponse:
    """POST *body* to *token_url* and decode the token response.

    Args:
        token_url: The provider's token endpoint.
        body: An already URL-encoded form body.
        client: Optional :class:`httpx.Client` to send the request with.
            When ``None`` a client is opened and closed for this call only.

    Returns:
        The decoded :class:`~authcode.models.TokenResponse`.

    Raises:
        TransportError: If the request cannot be built or sent, or the
            response body cannot be read.
        EndpointNotFoundError: If the endpoint answers HTTP 400.
        DecodeError: If the body is not the expected JSON shape.
        ProviderError: If the endpoint returns an OAuth error payload.
    """
    if client is None:
        with httpx.Client() as own_client:
            response = _post_form(own_client, token_url, body)
    else:
        response = _post_form(client, token_url, body)

    logger.debug("Token endpoint %s answered %d", token_url, response.status_code)

    if response.status_code != 200:
        if response.status_code == 400:
            raise EndpointNotFoundError(
                "oauth: error fetching token, endpoint does not exist"
            )

        try:
            payload = ProviderErrorPayload.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(
                f"oauth: cannot decode error response (HTTP {response.status_code}): {exc}"
            ) from exc

        logger.debug("Token endpoint returned OAuth error '%s'", payload.error)
        raise ProviderError(payload.error, payload.error_description)

    try:
        return TokenResponse.model_validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(f"oauth: cannot decode token response: {exc}") from exc


def _post_form(client: httpx.Client, token_url: str, body: str) -> httpx.Response:
    """Send the POST, mapping every httpx failure to :class:`TransportError`."""
    try:
        return client.post(
            token_url,
            content=body.encode("utf-8"),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise TransportError(f"oauth: token request to {token_url} failed: {exc}") from exc
