"""Settings management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.apicache/`` on macOS and Windows. See :func:`get_config_dir`.
* **Settings file** -- a single :class:`~apicache.models.Settings` JSON
  file, loaded with :func:`load_settings` and written atomically with
  :func:`save_settings`.
* **Precedence resolution** -- :func:`resolve_settings` layers environment
  variables and CLI flags over the settings file.
* **Cache opt-out** -- :func:`is_cache_disabled` reads the
  ``CLIENT_HTTP_CACHE_DISABLE`` toggle consulted by
  :meth:`~apicache.client.CachingHttpClient.derive_cached`.

The cache itself is never written to disk; only settings are.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from apicache.exceptions import ConfigError
from apicache.models import Settings

_APP_NAME = "apicache"
_CONFIG_FILENAME = "config.json"

ENV_BASE_URL = "APICACHE_BASE_URL"
ENV_CACHE_TTL = "APICACHE_CACHE_TTL"
ENV_CACHE_DISABLE = "CLIENT_HTTP_CACHE_DISABLE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/apicache/`` (default ``~/.config/apicache/``).
    On macOS/Windows: ``~/.apicache/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives next to *path* so that ``os.replace`` is an
    atomic rename on POSIX. On failure the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Optional[str] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as fd:
            tmp_path = fd.name
            fd.write(data)
            fd.flush()
            os.fsync(fd.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Settings file ---


def settings_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_settings() -> Settings:
    """Load settings from the config directory.

    Returns:
        The deserialised :class:`~apicache.models.Settings`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = settings_path()
    if not path.is_file():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Settings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings at {path}: {exc}") from exc


def save_settings(settings: Settings) -> None:
    """Persist settings atomically to disk."""
    data = settings.model_dump(mode="json")
    _atomic_write(settings_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def is_cache_disabled() -> bool:
    """Return True when ``CLIENT_HTTP_CACHE_DISABLE`` is exactly ``"true"``."""
    return os.environ.get(ENV_CACHE_DISABLE) == "true"


def resolve_settings(
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> Settings:
    """Resolve the effective settings.

    Precedence (high to low):
        1. CLI flags (``cli_base_url``, ``cli_format``)
        2. Environment variables (``APICACHE_BASE_URL``,
           ``APICACHE_CACHE_TTL``, ``CLIENT_HTTP_CACHE_DISABLE``)
        3. Settings file (``~/.config/apicache/config.json``)
        4. Defaults

    Returns:
        A new :class:`~apicache.models.Settings`; the file is not modified.
    """
    settings = load_settings()

    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        settings.base_url = env_base_url
    env_ttl = os.environ.get(ENV_CACHE_TTL)
    if env_ttl:
        settings.cache.default_ttl = int(env_ttl) if env_ttl.isdigit() else env_ttl
    if is_cache_disabled():
        settings.cache.disabled = True

    if cli_base_url is not None:
        settings.base_url = cli_base_url
    if cli_format is not None:
        settings.output.format = cli_format

    return settings
