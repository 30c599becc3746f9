"""``twenty attachments``: manage file attachments."""

from __future__ import annotations

from twenty_cli.builder import build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Attachment
from twenty_cli.records import format_date, format_timestamp, truncate

ATTACHMENTS = ResourceEndpoint(Attachment, "attachments", "attachment")


def _row(attachment: Attachment) -> list[str]:
    return [
        truncate(attachment.id),
        attachment.name,
        attachment.type,
        format_date(attachment.created_at),
    ]


def _csv_row(attachment: Attachment) -> list[str]:
    return [
        attachment.id,
        attachment.name,
        attachment.full_path,
        attachment.type,
        attachment.company_id or "",
        attachment.person_id or "",
        format_timestamp(attachment.created_at),
    ]


app = build_resource_app(
    endpoint_commands(
        ATTACHMENTS,
        name="attachments",
        noun="attachment",
        help="Manage attachments.",
        headers=["ID", "NAME", "TYPE", "CREATED"],
        row=_row,
        csv_headers=["id", "name", "fullPath", "type", "companyId", "personId", "createdAt"],
        csv_row=_csv_row,
    )
)
