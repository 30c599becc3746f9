"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for twenty-cli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.twenty/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~twenty_cli.models.GlobalConfig`
  JSON file storing defaults (base URL, output format, default profile,
  request settings).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, stored profile data and the global config into
  the effective settings for one invocation.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files, interactive prompts, or the credential store, and
  :func:`resolve_token` applies the token precedence chain.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import getpass
import json
import logging
import os
import platform
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from twenty_cli.exceptions import AuthError, ConfigError
from twenty_cli.models import GlobalConfig

logger = logging.getLogger(__name__)

_APP_NAME = "twenty"
_CONFIG_FILENAME = "config.json"

DEFAULT_PROFILE = "default"
TOKEN_ENV = "TWENTY_TOKEN"
PROFILE_ENV = "TWENTY_PROFILE"
BASE_URL_ENV = "TWENTY_BASE_URL"
OUTPUT_ENV = "TWENTY_OUTPUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/twenty/`` (default ``~/.config/twenty/``).
    On macOS/Windows: ``~/.twenty/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs, credentials), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/twenty/`` (default ``~/.local/share/twenty/``).
    On macOS/Windows: ``~/.twenty/data/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    When *mode* is given it is applied to the temp file before any content
    is written. On any failure the temp file is cleaned up.
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
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~twenty_cli.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        logger.debug("No config file at %s, using defaults", path)
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        config = GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc
    logger.debug("Loaded config from %s", path)
    return config


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk.

    Args:
        config: The configuration to save.
    """
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


@dataclass
class ResolvedConfig:
    """Effective settings for one invocation."""

    config: GlobalConfig
    profile: str
    base_url: str
    output: str


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_output: Optional[str] = None,
) -> ResolvedConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--profile``, ``--base-url``, ``--output``)
        2. Environment variables (``TWENTY_PROFILE``, ``TWENTY_BASE_URL``,
           ``TWENTY_OUTPUT``)
        3. The base URL stored with the active profile's credential
        4. User config (``~/.config/twenty/config.json``)
        5. Defaults

    Returns:
        The merged :class:`ResolvedConfig`.
    """
    from twenty_cli.credentials import CredentialStore

    config = load_global_config()

    profile = cli_profile or os.environ.get(PROFILE_ENV) or config.default_profile or DEFAULT_PROFILE

    base_url = config.base_url
    entry = CredentialStore(profile).load()
    if entry is not None and entry.base_url:
        base_url = entry.base_url
    env_base_url = os.environ.get(BASE_URL_ENV)
    if env_base_url:
        base_url = env_base_url
    if cli_base_url:
        base_url = cli_base_url

    output = cli_output or os.environ.get(OUTPUT_ENV) or config.output

    logger.debug("Resolved profile=%s base_url=%s output=%s", profile, base_url, output)
    return ResolvedConfig(
        config=config,
        profile=profile,
        base_url=base_url.rstrip("/"),
        output=output,
    )


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)
        - ``"store:PROFILE"`` -- reads from the credential store for the named profile

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        file_path = source[5:]
        path = Path(file_path).expanduser()
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
        return getpass.getpass("Twenty API token: ")

    if source.startswith("store:"):
        profile_name = source[6:]
        from twenty_cli.credentials import CredentialStore

        entry = CredentialStore(profile_name).load()
        if entry is None:
            raise ConfigError(
                f"No stored credential for profile '{profile_name}' (source: {source})"
            )
        return entry.token

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_token(profile: str, token_source: Optional[str] = None) -> tuple[str, str]:
    """Find the API token for *profile*.

    Precedence: ``TWENTY_TOKEN``, then *token_source* from the config, then
    the credential store.

    Returns:
        ``(token, source)`` where *source* names where the token came from.

    Raises:
        AuthError: If no token can be found.
        ConfigError: If *token_source* is set but cannot be resolved.
    """
    env_token = os.environ.get(TOKEN_ENV, "").strip()
    if env_token:
        return env_token, TOKEN_ENV

    if token_source:
        return resolve_credential(token_source).strip(), token_source

    from twenty_cli.credentials import CredentialStore

    entry = CredentialStore(profile).load()
    if entry is not None and entry.token:
        return entry.token, f"store:{profile}"

    raise AuthError(
        f"not authenticated for profile '{profile}'; "
        f"run 'twenty auth login --token ...' or set {TOKEN_ENV}"
    )
