"""Per-invocation runtime state.

The root callback in :mod:`twenty_cli.app` resolves global flags, the
environment and the config file into one :class:`Runtime` and stores it as
the Click context object. Commands fetch it with :func:`current_runtime`
instead of reading module-level globals, so every invocation (and every
test) starts from its own state.

Tests inject a runtime directly::

    runner.invoke(app, ["tasks", "list"], obj=Runtime(token="t", transport=mock))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import click
import httpx

from twenty_cli.client.rest import RestClient
from twenty_cli.config import DEFAULT_PROFILE, resolve_token
from twenty_cli.models import DEFAULT_BASE_URL
from twenty_cli.output import OutputFormat
from twenty_cli.render import Renderer


@dataclass
class Runtime:
    """Settings shared by every command of one CLI invocation."""

    output_format: OutputFormat = OutputFormat.TEXT
    query: Optional[str] = None
    profile: str = DEFAULT_PROFILE
    base_url: str = DEFAULT_BASE_URL
    token: Optional[str] = None
    token_source: Optional[str] = None
    timeout: float = 30
    max_retries: int = 3
    no_retry: bool = False
    debug: bool = False
    transport: Optional[httpx.BaseTransport] = None

    def require_token(self) -> str:
        """Return the API token, resolving it on first use.

        Raises:
            AuthError: If no token is configured for the active profile.
        """
        if not self.token:
            self.token, _ = resolve_token(self.profile, self.token_source)
        return self.token

    def rest_client(self) -> RestClient:
        """A new, not yet entered, :class:`RestClient` for this invocation."""
        return RestClient(
            self.base_url,
            self.require_token(),
            timeout=self.timeout,
            max_retries=self.max_retries,
            no_retry=self.no_retry,
            transport=self.transport,
        )

    def renderer(self) -> Renderer:
        return Renderer(self.output_format, self.query)


def current_runtime() -> Runtime:
    """The :class:`Runtime` of the running command (a default one outside the CLI)."""
    ctx = click.get_current_context(silent=True)
    if ctx is not None:
        runtime = ctx.find_object(Runtime)
        if runtime is not None:
            return runtime
    return Runtime()
