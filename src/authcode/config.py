"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for authcode:

* **Directory layout** -- provider profiles live in ``<config>/providers/``
  and crash logs under ``<data>/logs/``. ``<config>`` and ``<data>`` follow
  XDG on Linux/BSD and collapse to ``~/.authcode/`` on macOS and Windows.
  See :func:`get_config_dir`, :func:`get_data_dir`, :func:`get_providers_dir`.
* **Global config** -- A single :class:`~authcode.models.GlobalConfig`
  JSON file storing the default provider and output format.
* **Providers** -- One JSON file per identity provider, each deserialised
  into a :class:`~authcode.models.ProviderConfig`. Managed via
  :func:`load_provider`, :func:`save_provider`, :func:`delete_provider`.
* **Precedence resolution** -- :func:`resolve_provider` picks the active
  provider from the CLI flag, the environment, and the global config.
* **Credential resolution** -- :func:`resolve_credential` reads the client
  secret from an env var, a file, or an interactive prompt.

Only provider settings are written to disk. Tokens are never persisted.
Profile and global config writes go through :func:`_atomic_write`, so an
interrupted ``provider add`` never leaves a truncated profile behind.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

import httpx

from authcode.client import OAuthClient
from authcode.exceptions import ConfigError
from authcode.models import GlobalConfig, ProviderConfig

_APP_NAME = "authcode"
_CONFIG_FILENAME = "config.json"
_PROVIDER_ENV_VAR = "AUTHCODE_PROVIDER"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG base directories (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, *home_relative: str) -> Path:
    """$env_var when set and non-empty, else ~/<home_relative>."""
    return Path(os.environ.get(env_var) or Path.home().joinpath(*home_relative))


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/authcode/`` (default ``~/.config/authcode/``).
    On macOS/Windows: ``~/.authcode/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", ".config") / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/authcode/`` (default ``~/.local/share/authcode/``).
    On macOS/Windows: ``~/.authcode/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", ".local", "share") / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_providers_dir() -> Path:
    """Return the providers directory (``<config_dir>/providers/``), creating it if necessary."""
    path = get_config_dir() / "providers"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the original file is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~authcode.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Providers ---


def _provider_path(name: str) -> Path:
    return get_providers_dir() / f"{name}.json"


def list_providers() -> list[str]:
    """Return all provider names found in the providers directory, sorted alphabetically."""
    return sorted(p.stem for p in get_providers_dir().glob("*.json") if p.is_file())


def load_provider(name: str) -> ProviderConfig:
    """Load and validate a provider profile from disk.

    Args:
        name: Provider name (corresponds to ``<name>.json`` in the
            providers directory).

    Returns:
        The deserialised :class:`~authcode.models.ProviderConfig`.

    Raises:
        ConfigError: If the file does not exist, contains invalid JSON, or
            fails Pydantic validation.
    """
    path = _provider_path(name)
    if not path.is_file():
        raise ConfigError(f"Provider '{name}' not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ProviderConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid provider '{name}' at {path}: {exc}") from exc


def save_provider(provider: ProviderConfig) -> None:
    """Persist a provider profile atomically. The file name is ``provider.name``."""
    data = provider.model_dump(mode="json")
    _atomic_write(_provider_path(provider.name), json.dumps(data, indent=2) + "\n")


def delete_provider(name: str) -> None:
    """Delete a provider's JSON file from disk.

    Raises:
        ConfigError: If the provider does not exist.
    """
    path = _provider_path(name)
    if not path.is_file():
        raise ConfigError(f"Provider '{name}' not found at {path}")
    path.unlink()


def provider_exists(name: str) -> bool:
    return _provider_path(name).is_file()


# --- Precedence resolution ---


def resolve_provider(cli_provider: Optional[str] = None) -> ProviderConfig:
    """Resolve the active provider with full precedence chain.

    Precedence (high to low):
        1. CLI flag (``cli_provider``)
        2. Environment variable ``AUTHCODE_PROVIDER``
        3. ``default_provider`` from the global config
        4. The only saved provider, if exactly one exists

    Raises:
        ConfigError: If no provider can be selected or the selected one
            cannot be loaded.
    """
    name: Optional[str] = load_global_config().default_provider

    env_provider = os.environ.get(_PROVIDER_ENV_VAR)
    if env_provider:
        name = env_provider
    if cli_provider is not None:
        name = cli_provider

    if name is None:
        providers = list_providers()
        if len(providers) == 1:
            name = providers[0]
        else:
            raise ConfigError(
                "No provider selected. Pass --provider, set "
                f"{_PROVIDER_ENV_VAR}, or run 'authcode provider use NAME'."
            )

    return load_provider(name)


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)
        - ``"none"`` -- public client, resolves to an empty string

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source == "none":
        return ""

    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter client secret: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def build_client(
    provider: ProviderConfig,
    http_client: Optional[httpx.Client] = None,
) -> OAuthClient:
    """Build an :class:`~authcode.client.OAuthClient` for a saved provider.

    The client secret is resolved from ``provider.client_secret_source``
    at call time.
    """
    return OAuthClient(
        client_id=provider.client_id,
        authorize_url=provider.authorize_url,
        token_url=provider.token_url,
        redirect_url=provider.redirect_url,
        client_secret=resolve_credential(provider.client_secret_source),
        scopes=provider.scopes,
        http_client=http_client,
    )
