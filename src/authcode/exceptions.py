"""Exception hierarchy for authcode.

All exceptions inherit from :class:`AuthcodeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`authcode.exit_codes`.
Library callers branch on the exception type; the CLI entry point in
:func:`authcode.app.main` catches ``AuthcodeError`` and exits with the
matching code.

Subclass hierarchy::

    AuthcodeError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- InvalidURLError       (exit 3)
    +-- TransportError        (exit 4)
    +-- EndpointNotFoundError (exit 5)
    +-- DecodeError           (exit 6)
    +-- ProviderError         (exit 7)
    +-- ConfigError           (exit 8)
"""

from __future__ import annotations

from authcode.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_ENDPOINT_NOT_FOUND,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_URL,
    EXIT_INVALID_USAGE,
    EXIT_PROVIDER_ERROR,
    EXIT_TRANSPORT_ERROR,
)


class AuthcodeError(Exception):
    """Base exception for all authcode errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`authcode.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AuthcodeError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class InvalidURLError(AuthcodeError):
    """Raised when the configured authorize URL cannot be parsed."""

    exit_code = EXIT_INVALID_URL


class TransportError(AuthcodeError):
    """Raised when the token request cannot be built or sent, or its body cannot be read."""

    exit_code = EXIT_TRANSPORT_ERROR


class EndpointNotFoundError(AuthcodeError):
    """Raised when the token endpoint responds with HTTP 400.

    The response body is never inspected for this status.
    """

    exit_code = EXIT_ENDPOINT_NOT_FOUND


class DecodeError(AuthcodeError):
    """Raised when a response body (or an encoded state) is not the expected JSON shape."""

    exit_code = EXIT_DECODE_ERROR


class ProviderError(AuthcodeError):
    """Raised when the token endpoint returns an ``{error, error_description}`` payload.

    Args:
        error: The OAuth error code (e.g. ``invalid_grant``).
        description: The provider's human-readable description.
    """

    exit_code = EXIT_PROVIDER_ERROR

    def __init__(self, error: str, description: str):
        super().__init__(f"oauth: error fetching token {error} {description}")
        self.error = error
        self.description = description


class ConfigError(AuthcodeError):
    """Raised for configuration problems (missing providers, invalid JSON, bad credential sources)."""

    exit_code = EXIT_CONFIG_ERROR
