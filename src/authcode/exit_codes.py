"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to one error kind and is referenced by the corresponding
:class:`~authcode.exceptions.AuthcodeError` subclass. Shell scripts that
drive ``authcode`` can branch on the exit code instead of parsing stderr.

Example::

    $ authcode refresh "$REFRESH_TOKEN"
    $ echo $?
    7   # EXIT_PROVIDER_ERROR -- the provider rejected the refresh token
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_INVALID_URL = 3
"""The configured authorize URL could not be parsed."""

EXIT_TRANSPORT_ERROR = 4
"""The token request could not be built, sent, or its body read."""

EXIT_ENDPOINT_NOT_FOUND = 5
"""The token endpoint answered HTTP 400."""

EXIT_DECODE_ERROR = 6
"""The token endpoint returned a body that is not the expected JSON shape."""

EXIT_PROVIDER_ERROR = 7
"""The token endpoint returned an OAuth error payload."""

EXIT_CONFIG_ERROR = 8
"""A provider profile or credential source could not be loaded."""
