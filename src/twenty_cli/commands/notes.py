"""``twenty notes``: manage notes."""

from __future__ import annotations

from twenty_cli.builder import build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Note
from twenty_cli.records import format_date, format_timestamp, truncate

NOTES = ResourceEndpoint(Note, "notes", "note")

app = build_resource_app(
    endpoint_commands(
        NOTES,
        name="notes",
        noun="note",
        help="Manage notes.",
        headers=["ID", "TITLE", "CREATED"],
        row=lambda note: [truncate(note.id), note.title, format_date(note.created_at)],
        csv_headers=["id", "title", "body", "createdAt", "updatedAt"],
        csv_row=lambda note: [
            note.id,
            note.title,
            note.body,
            format_timestamp(note.created_at),
            format_timestamp(note.updated_at),
        ],
    )
)
