"""``twenty favorites``: manage favorites.

The TARGET column shows what a favorite points at as ``kind:id``.
"""

from __future__ import annotations

from twenty_cli.builder import build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Favorite
from twenty_cli.records import format_cell, format_timestamp, truncate

FAVORITES = ResourceEndpoint(Favorite, "favorites", "favorite")


def _target(favorite: Favorite) -> str:
    kind, _, target_id = favorite.target.partition(":")
    return f"{kind}:{truncate(target_id)}" if target_id else ""


app = build_resource_app(
    endpoint_commands(
        FAVORITES,
        name="favorites",
        noun="favorite",
        help="Manage favorites.",
        headers=["ID", "POSITION", "TARGET"],
        row=lambda favorite: [
            truncate(favorite.id),
            format_cell(favorite.position),
            _target(favorite),
        ],
        csv_headers=["id", "position", "target", "workspaceMemberId", "createdAt"],
        csv_row=lambda favorite: [
            favorite.id,
            format_cell(favorite.position),
            favorite.target,
            favorite.workspace_member_id or "",
            format_timestamp(favorite.created_at),
        ],
    )
)
