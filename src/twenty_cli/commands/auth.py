"""Auth commands -- manage stored API tokens.

Provides the ``twenty auth`` sub-command group. Tokens are created in the
Twenty web app under *Settings -> APIs & Webhooks* and stored per profile
by :class:`~twenty_cli.credentials.CredentialStore`.

Typical workflow::

    twenty auth login --token eyJhbGciOi...       # store for "default"
    twenty auth login --token ... --profile staging --base-url https://crm.example.com
    twenty auth status
    twenty auth logout --profile staging
"""

from __future__ import annotations

from typing import Optional

import typer

from twenty_cli.config import load_global_config, resolve_token, save_global_config
from twenty_cli.credentials import CredentialEntry, CredentialStore, list_profiles, mask_token
from twenty_cli.exceptions import AuthError, InvalidUsageError
from twenty_cli.output import get_output
from twenty_cli.runtime import current_runtime

auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("login")
def auth_login(
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="API token (prompted for when omitted)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Workspace base URL stored with the token."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile to store the token under."
    ),
) -> None:
    """Store an API token for a profile.

    The first profile ever stored also becomes the default profile.

    Example::

        twenty auth login --token eyJhbGciOi... --profile work
    """
    runtime = current_runtime()
    profile_name = profile or runtime.profile
    if not token:
        token = typer.prompt("Twenty API token", hide_input=True)
    token = (token or "").strip()
    if not token:
        raise InvalidUsageError("token must not be empty")

    entry = CredentialEntry(token=token, base_url=(base_url or runtime.base_url).rstrip("/"))
    CredentialStore(profile_name).save(entry)

    config = load_global_config()
    if not config.default_profile:
        config.default_profile = profile_name
        save_global_config(config)

    get_output().success(f"Logged in as profile '{profile_name}' ({entry.base_url})")


@auth_app.command("logout")
def auth_logout(
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile to remove the token from."
    ),
) -> None:
    """Remove the stored token of a profile."""
    profile_name = profile or current_runtime().profile
    if CredentialStore(profile_name).clear():
        get_output().success(f"Logged out of profile '{profile_name}'")
    else:
        get_output().info(f"No stored token for profile '{profile_name}'")


@auth_app.command("status")
def auth_status(
    show_token: bool = typer.Option(False, "--show-token", help="Print the token unmasked."),
) -> None:
    """Show which profile is active and where its token comes from."""
    runtime = current_runtime()
    status = {
        "profile": runtime.profile,
        "base_url": runtime.base_url,
        "authenticated": False,
        "source": "",
        "token": "",
    }
    try:
        token, source = resolve_token(runtime.profile, runtime.token_source)
    except AuthError:
        get_output().warning(f"Not authenticated for profile '{runtime.profile}'")
    else:
        status.update(
            authenticated=True,
            source=source,
            token=token if show_token else mask_token(token),
        )
    runtime.renderer().render_value(status)


@auth_app.command("list")
def auth_list() -> None:
    """List profiles with a stored token."""
    runtime = current_runtime()
    default = load_global_config().default_profile
    profiles = []
    for name in list_profiles():
        entry = CredentialStore(name).load()
        profiles.append(
            {
                "profile": name,
                "base_url": entry.base_url if entry and entry.base_url else "",
                "default": name == default,
            }
        )
    if not profiles:
        get_output().info("No stored profiles. Run 'twenty auth login' to add one.")
        return
    runtime.renderer().render_list(
        profiles,
        ["PROFILE", "BASE URL", "DEFAULT"],
        lambda p: [p["profile"], p["base_url"], "*" if p["default"] else ""],
    )
