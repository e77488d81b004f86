"""Canonical Pydantic models shared across all authcode modules.

The models fall into three groups:

**Wire models** -- decoded from token endpoint responses:
    :class:`TokenResponse` and :class:`ProviderErrorPayload`.

**State models** -- what a caller may carry inside the opaque ``state``
parameter: :class:`OAuthAction` and :class:`OAuthState`.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`ProviderConfig`, :class:`OutputConfig` and
:class:`GlobalConfig`.

All models use Pydantic v2. Wire models ignore unknown keys and fall back to
empty values for missing or ``null`` ones, so a provider that omits
``id_token`` or sends ``"refresh_token": null`` still decodes. Numbers are
not accepted in place of strings, nor strings in place of numbers.
"""

from __future__ import annotations

import base64
import binascii
import enum
import secrets
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from authcode.exceptions import DecodeError

DEFAULT_SCOPES: tuple[str, ...] = ("profile", "email")
"""Scopes requested when a client is built without an explicit scope list."""


# --- Wire Models ---


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        # A null body or a null field decodes to the zero value.
        if data is None:
            return {}
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class TokenResponse(_WireModel):
    """Tokens returned by the provider's token endpoint.

    Produced fresh by every exchange or refresh call. ``expires_in`` is the
    lifetime of ``access_token`` in seconds as reported by the provider.

    Example::

        TokenResponse.model_validate_json(
            '{"access_token": "ya29...", "expires_in": 3599, "token_type": "Bearer"}'
        )
    """

    id_token: str = ""
    expires_in: int = Field(default=0, strict=True)
    token_type: str = ""
    access_token: str = ""
    refresh_token: str = ""


class ProviderErrorPayload(_WireModel):
    """OAuth error body (``{"error": ..., "error_description": ...}``)."""

    error: str = ""
    error_description: str = ""


# --- State Models ---


class OAuthAction(str, enum.Enum):
    """What the user was doing when the authorization flow started.

    Purely advisory: the client never branches on it. Callers encode it into
    ``state`` so the callback handler knows which flow to resume.
    """

    SIGNIN = "SIGNIN"
    AUTHORIZE = "AUTHORIZE"
    CREATE_ACCOUNT = "CREATE_ACCOUNT"


class OAuthState(BaseModel):
    """Payload a caller may carry in the ``state`` query parameter.

    :meth:`encode` produces unpadded base64url JSON that survives the
    redirect untouched. Nothing here signs or verifies the value; callers
    that need forgery protection must sign it (e.g. as a JWT) and compare
    the ``nonce`` against their own session.
    """

    model_config = ConfigDict(frozen=True)

    action: OAuthAction = OAuthAction.SIGNIN
    nonce: str = ""

    @classmethod
    def new(cls, action: OAuthAction = OAuthAction.SIGNIN) -> OAuthState:
        """Create a state for *action* with a random URL-safe nonce."""
        return cls(action=action, nonce=secrets.token_urlsafe(16))

    def encode(self) -> str:
        """Return the state as unpadded base64url-encoded JSON."""
        raw = self.model_dump_json().encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    @classmethod
    def decode(cls, value: str) -> OAuthState:
        """Parse a value produced by :meth:`encode`.

        Raises:
            DecodeError: If *value* is not base64url JSON of the expected shape.
        """
        padded = value + "=" * (-len(value) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            return cls.model_validate_json(raw)
        except (binascii.Error, UnicodeEncodeError, ValidationError) as exc:
            raise DecodeError(f"oauth: invalid state value: {exc}") from exc


# --- Configuration Models ---


class ProviderConfig(BaseModel):
    """Identity provider profile stored under the ``providers/`` config directory.

    The client secret itself is never stored; ``client_secret_source`` says
    where to read it from (``env:VAR``, ``file:/path``, ``prompt`` or
    ``none`` for public clients).

    See Also:
        :func:`~authcode.config.load_provider`: Deserialise a provider by name.
        :func:`~authcode.config.build_client`: Turn a provider into an
        :class:`~authcode.client.OAuthClient`.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    client_id: str
    authorize_url: str = Field(description="Provider authorization endpoint")
    token_url: str = Field(description="Provider token endpoint")
    redirect_url: str = Field(description="Callback URL registered with the provider")
    client_secret_source: str = Field(
        default="none",
        description="Credential source: env:VAR, file:/path, prompt, none",
    )
    scopes: list[str] = Field(default_factory=lambda: list(DEFAULT_SCOPES))


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide settings stored in ``config.json``."""

    default_provider: Optional[str] = None
    output: OutputConfig = Field(default_factory=OutputConfig)
