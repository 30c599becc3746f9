"""Persistent API-token store scoped per profile.

Stores tokens in ``~/.local/share/twenty/credentials/<profile>.json`` (XDG)
or the platform-equivalent directory. Files are written atomically with
``0o600`` permissions so that tokens are never world-readable, even
momentarily.

Each profile maps to exactly one JSON file holding a serialised
:class:`CredentialEntry`: the token plus the base URL of the workspace it
belongs to.

See Also:
    :func:`twenty_cli.config.resolve_token` -- token precedence chain.
    :mod:`twenty_cli.commands.auth` -- ``twenty auth login/logout/status``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from twenty_cli.config import _atomic_write, get_data_dir

logger = logging.getLogger(__name__)


class CredentialEntry(BaseModel):
    """A stored API token.

    Attributes:
        token: The API key created under *Settings -> APIs & Webhooks*.
        base_url: Base URL of the workspace the token belongs to.
        created_at: When the entry was written (UTC).
    """

    token: str = Field(description="The API token")
    base_url: Optional[str] = Field(default=None, description="Workspace base URL")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _credentials_dir() -> Path:
    """Return the credentials directory, creating it if needed."""
    path = get_data_dir() / "credentials"
    path.mkdir(parents=True, exist_ok=True)
    return path


def list_profiles() -> list[str]:
    """Names of all profiles with a stored credential, sorted alphabetically."""
    return sorted(p.stem for p in _credentials_dir().glob("*.json") if p.is_file())


def mask_token(token: str) -> str:
    """Shorten *token* to ``first8...last4`` for display."""
    if len(token) <= 12:
        return "*" * len(token)
    return f"{token[:8]}...{token[-4:]}"


class CredentialStore:
    """Read/write the token for a single profile.

    Args:
        profile_name: The profile identifier used to derive the file name.

    Example::

        store = CredentialStore("staging")
        store.save(CredentialEntry(token="tok123", base_url="https://crm.example.com"))
        assert store.load().token == "tok123"
    """

    def __init__(self, profile_name: str) -> None:
        self._profile_name = profile_name
        self._path = _credentials_dir() / f"{profile_name}.json"

    @property
    def path(self) -> Path:
        """The filesystem path to this profile's credential file."""
        return self._path

    def save(self, entry: CredentialEntry) -> None:
        """Persist a credential entry atomically with ``0o600`` permissions.

        Raises:
            OSError: If the file cannot be written (permissions, disk full, etc.).
        """
        data = entry.model_dump(mode="json")
        _atomic_write(self._path, json.dumps(data, indent=2) + "\n", mode=0o600)
        logger.debug("Saved credential for profile %s", self._profile_name)

    def load(self) -> Optional[CredentialEntry]:
        """Load the stored entry, or ``None`` if missing or unreadable."""
        if not self._path.is_file():
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
            return CredentialEntry.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            logger.debug("Ignoring unreadable credential file %s: %s", self._path, exc)
            return None

    def clear(self) -> bool:
        """Delete the stored credential file. Returns ``False`` if there was none."""
        if self._path.is_file():
            self._path.unlink()
            return True
        return False
