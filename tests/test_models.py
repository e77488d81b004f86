"""Tests for authcode.models and the exception hierarchy."""

from __future__ import annotations

import base64
import json

import pytest
from pydantic import ValidationError

from authcode.exceptions import (
    AuthcodeError,
    ConfigError,
    DecodeError,
    EndpointNotFoundError,
    InvalidURLError,
    InvalidUsageError,
    ProviderError,
    TransportError,
)
from authcode.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_ENDPOINT_NOT_FOUND,
    EXIT_INVALID_URL,
    EXIT_INVALID_USAGE,
    EXIT_PROVIDER_ERROR,
    EXIT_TRANSPORT_ERROR,
)
from authcode.models import (
    DEFAULT_SCOPES,
    GlobalConfig,
    OAuthAction,
    OAuthState,
    ProviderConfig,
    ProviderErrorPayload,
    TokenResponse,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------


class TestConstants:
    def test_default_scopes(self) -> None:
        assert DEFAULT_SCOPES == ("profile", "email")

    def test_default_scopes_are_immutable(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_SCOPES.append("drive")  # type: ignore[attr-defined]

    def test_actions(self) -> None:
        assert [a.value for a in OAuthAction] == ["SIGNIN", "AUTHORIZE", "CREATE_ACCOUNT"]
        assert OAuthAction("CREATE_ACCOUNT") is OAuthAction.CREATE_ACCOUNT


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class TestTokenResponse:
    def test_field_names_match_wire_keys(self) -> None:
        token = TokenResponse.model_validate_json(
            '{"id_token": "i", "expires_in": 60, "token_type": "Bearer",'
            ' "access_token": "a", "refresh_token": "r"}'
        )
        assert token.model_dump() == {
            "id_token": "i",
            "expires_in": 60,
            "token_type": "Bearer",
            "access_token": "a",
            "refresh_token": "r",
        }

    def test_defaults(self) -> None:
        assert TokenResponse() == TokenResponse(
            id_token="", expires_in=0, token_type="", access_token="", refresh_token=""
        )

    def test_string_fields_reject_numbers(self) -> None:
        with pytest.raises(ValidationError):
            TokenResponse.model_validate_json('{"access_token": 12}')

    def test_expires_in_rejects_quoted_number(self) -> None:
        with pytest.raises(ValidationError):
            TokenResponse.model_validate_json('{"expires_in": "3600"}')

    def test_null_fields_take_defaults(self) -> None:
        token = TokenResponse.model_validate_json('{"token_type": null, "expires_in": null}')
        assert token == TokenResponse()


class TestProviderErrorPayload:
    def test_decodes_rfc6749_error(self) -> None:
        payload = ProviderErrorPayload.model_validate_json(
            '{"error": "invalid_grant", "error_description": "Bad Request", "error_uri": "x"}'
        )
        assert payload.error == "invalid_grant"
        assert payload.error_description == "Bad Request"


# ---------------------------------------------------------------------------
# OAuthState
# ---------------------------------------------------------------------------


class TestOAuthState:
    def test_new_generates_distinct_nonces(self) -> None:
        first = OAuthState.new(OAuthAction.AUTHORIZE)
        second = OAuthState.new(OAuthAction.AUTHORIZE)
        assert first.action is OAuthAction.AUTHORIZE
        assert first.nonce and second.nonce
        assert first.nonce != second.nonce

    def test_encode_is_url_safe_and_unpadded(self) -> None:
        encoded = OAuthState.new().encode()
        assert "=" not in encoded
        assert "+" not in encoded
        assert "/" not in encoded

    def test_decode_reverses_encode(self) -> None:
        state = OAuthState(action=OAuthAction.CREATE_ACCOUNT, nonce="n-1")
        assert OAuthState.decode(state.encode()) == state

    def test_decode_accepts_external_payload(self) -> None:
        raw = json.dumps({"action": "SIGNIN"}).encode()
        value = base64.urlsafe_b64encode(raw).decode().rstrip("=")
        decoded = OAuthState.decode(value)
        assert decoded.action is OAuthAction.SIGNIN
        assert decoded.nonce == ""

    @pytest.mark.parametrize(
        "value",
        [
            "!!!not-base64",
            base64.urlsafe_b64encode(b"not json").decode(),
            base64.urlsafe_b64encode(b'{"action": "DELETE_EVERYTHING"}').decode(),
            "café",
        ],
    )
    def test_decode_rejects_garbage(self, value: str) -> None:
        with pytest.raises(DecodeError):
            OAuthState.decode(value)

    def test_is_frozen(self) -> None:
        state = OAuthState.new()
        with pytest.raises(ValidationError):
            state.nonce = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Configuration models
# ---------------------------------------------------------------------------


class TestProviderConfig:
    def test_defaults(self) -> None:
        provider = ProviderConfig(
            name="google",
            client_id="cid",
            authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
            token_url="https://oauth2.googleapis.com/token",
            redirect_url="http://localhost:8080/callback",
        )
        assert provider.scopes == ["profile", "email"]
        assert provider.client_secret_source == "none"

    def test_requires_urls(self) -> None:
        with pytest.raises(ValidationError):
            ProviderConfig(name="x", client_id="cid")  # type: ignore[call-arg]

    def test_global_config_defaults(self) -> None:
        config = GlobalConfig()
        assert config.default_provider is None
        assert config.output.format == "auto"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TestExceptions:
    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (InvalidUsageError, EXIT_INVALID_USAGE),
            (InvalidURLError, EXIT_INVALID_URL),
            (TransportError, EXIT_TRANSPORT_ERROR),
            (EndpointNotFoundError, EXIT_ENDPOINT_NOT_FOUND),
            (DecodeError, EXIT_DECODE_ERROR),
            (ConfigError, EXIT_CONFIG_ERROR),
        ],
    )
    def test_exit_codes(self, exc_type: type[AuthcodeError], code: int) -> None:
        exc = exc_type("msg")
        assert isinstance(exc, AuthcodeError)
        assert exc.exit_code == code
        assert str(exc) == "msg"

    def test_exit_code_override(self) -> None:
        assert TransportError("msg", exit_code=99).exit_code == 99

    def test_provider_error_carries_both_fields(self) -> None:
        exc = ProviderError("server_error", "boom")
        assert exc.exit_code == EXIT_PROVIDER_ERROR
        assert exc.error == "server_error"
        assert exc.description == "boom"
        assert str(exc) == "oauth: error fetching token server_error boom"

    def test_error_kinds_are_distinct(self) -> None:
        kinds = [InvalidURLError, TransportError, EndpointNotFoundError, DecodeError, ProviderError]
        for kind in kinds:
            others = [k for k in kinds if k is not kind]
            assert not any(issubclass(kind, other) for other in others)
