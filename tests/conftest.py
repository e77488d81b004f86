"""Shared test fixtures for authcode.

Provides an isolated config environment, a reset of the global output
state between tests, a factory for ``httpx.MockTransport``-backed clients,
and the Typer CLI runner.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from authcode.client import OAuthClient
from authcode.output import reset_output

TOKEN_URL = "https://idp.example/token"
AUTHORIZE_URL = "https://idp.example/auth"
REDIRECT_URL = "https://app.example/cb"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale once the test finishes.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Isolated config directories
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory at *tmp_path* and clear provider env vars."""
    monkeypatch.setattr("authcode.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("AUTHCODE_PROVIDER", raising=False)
    return tmp_path


# ---------------------------------------------------------------------------
# Token endpoint mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def make_client() -> Callable[..., OAuthClient]:
    """Factory building an OAuthClient whose token calls hit a mock transport."""
    opened: list[httpx.Client] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        **overrides: Any,
    ) -> OAuthClient:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        opened.append(http_client)
        kwargs: dict[str, Any] = {
            "client_id": "cid",
            "authorize_url": AUTHORIZE_URL,
            "token_url": TOKEN_URL,
            "redirect_url": REDIRECT_URL,
            "client_secret": "secret",
            "scopes": ["profile", "email"],
            "http_client": http_client,
        }
        kwargs.update(overrides)
        return OAuthClient(**kwargs)

    yield factory
    for http_client in opened:
        http_client.close()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
