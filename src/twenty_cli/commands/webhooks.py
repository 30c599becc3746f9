"""``twenty webhooks``: manage webhooks.

The webhooks endpoint returns every webhook in one bare JSON array, so
``list`` sends no pagination parameters and there is no ``update``.
"""

from __future__ import annotations

from twenty_cli.builder import build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Webhook
from twenty_cli.records import format_cell, format_timestamp, truncate

WEBHOOKS = ResourceEndpoint(Webhook, "webhooks", "webhook", paginated=False)


def _row(webhook: Webhook) -> list[str]:
    return [
        truncate(webhook.id),
        webhook.target_url,
        webhook.operation,
        format_cell(webhook.is_active),
    ]


def _csv_row(webhook: Webhook) -> list[str]:
    return [
        webhook.id,
        webhook.target_url,
        webhook.operation,
        webhook.description,
        format_cell(webhook.is_active),
        format_timestamp(webhook.created_at),
    ]


app = build_resource_app(
    endpoint_commands(
        WEBHOOKS,
        name="webhooks",
        noun="webhook",
        help="Manage webhooks.",
        headers=["ID", "URL", "OPERATION", "ACTIVE"],
        row=_row,
        csv_headers=["id", "targetUrl", "operation", "description", "isActive", "createdAt"],
        csv_row=_csv_row,
        updatable=False,
    )
)
