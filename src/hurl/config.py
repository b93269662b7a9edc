"""Configuration with XDG paths and precedence resolution.

hurl's defaults (timeout, compression threshold, redirect policy, TLS
verification, User-Agent) can be changed without touching code:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.hurl/`` on macOS and Windows. See :func:`get_config_dir`.
* **Config file** -- ``config.json`` in the config directory, validated
  into a :class:`~hurl.models.Settings`.
* **Environment** -- ``HURL_TIMEOUT``, ``HURL_COMPRESS_THRESHOLD``,
  ``HURL_FOLLOW_REDIRECTS``, ``HURL_VERIFY_SSL`` and ``HURL_USER_AGENT``
  override the file.

The resolved settings are cached in a module-level instance reachable
through :func:`get_settings`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from hurl.exceptions import ConfigError
from hurl.models import Settings

_APP_NAME = "hurl"
_CONFIG_FILENAME = "config.json"

_ENV_VARS = {
    "HURL_TIMEOUT": "timeout",
    "HURL_COMPRESS_THRESHOLD": "compress_threshold",
    "HURL_FOLLOW_REDIRECTS": "follow_redirects",
    "HURL_VERIFY_SSL": "verify_ssl",
    "HURL_USER_AGENT": "user_agent",
}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/hurl/`` (default ``~/.config/hurl/``).
    On macOS/Windows: ``~/.hurl/``.

    The directory is not created; hurl only ever reads from it.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def config_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Loading ---


def _load_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def _load_env() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for var, field in _ENV_VARS.items():
        value = os.environ.get(var)
        if value is not None and value != "":
            values[field] = value
    return values


def load_settings(path: Optional[Path] = None) -> Settings:
    """Resolve settings with full precedence.

    Precedence (high to low):
        1. Environment variables (``HURL_*``)
        2. Config file (``~/.config/hurl/config.json``)
        3. Defaults

    Args:
        path: Explicit config file to read instead of :func:`config_path`.

    Returns:
        The validated :class:`~hurl.models.Settings`.

    Raises:
        ConfigError: If the file holds invalid JSON or any value fails
            validation.
    """
    data = _load_file(path or config_path())
    data.update(_load_env())
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid hurl settings: {exc}") from exc


# ------------------------------------------------------------------ #
# Global settings instance
# ------------------------------------------------------------------ #

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the global :class:`~hurl.models.Settings`, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Install *settings* as the global instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget the global settings so the next :func:`get_settings` reloads them.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _settings
    _settings = None
