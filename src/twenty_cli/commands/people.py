"""``twenty people``: manage people records.

``list`` accepts shortcut filters on top of ``--filter``: ``--email`` and
``--name`` match case-insensitively on a substring, ``--city`` and
``--company-id`` match exactly.
"""

from __future__ import annotations

from typing import Any

from twenty_cli.builder import FlagSpec, build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Person
from twenty_cli.records import format_timestamp, truncate

PEOPLE = ResourceEndpoint(Person, "people", "person")

FILTER_FLAGS = [
    FlagSpec("email", help="Filter by email (contains)."),
    FlagSpec("name", help="Filter by first name (contains)."),
    FlagSpec("city", help="Filter by city."),
    FlagSpec("company_id", help="Filter by company ID."),
]


def _row(person: Person) -> list[str]:
    return [
        truncate(person.id),
        str(person.name),
        person.emails.primary_email,
        person.job_title,
        person.city,
    ]


def _csv_row(person: Person) -> list[str]:
    return [
        person.id,
        person.name.first_name,
        person.name.last_name,
        person.emails.primary_email,
        person.phones.primary_phone_number,
        person.job_title,
        person.city,
        person.company_id or "",
        format_timestamp(person.created_at),
        format_timestamp(person.updated_at),
    ]


def _filter(values: dict[str, Any]) -> dict[str, Any]:
    filter: dict[str, Any] = {}
    if values.get("email"):
        filter["emails"] = {"primaryEmail": {"ilike": f"%{values['email']}%"}}
    if values.get("name"):
        filter["name"] = {"firstName": {"ilike": f"%{values['name']}%"}}
    if values.get("city"):
        filter["city"] = {"eq": values["city"]}
    if values.get("company_id"):
        filter["companyId"] = {"eq": values["company_id"]}
    return filter


app = build_resource_app(
    endpoint_commands(
        PEOPLE,
        name="people",
        noun="person",
        help="Manage people.",
        headers=["ID", "NAME", "EMAIL", "JOB TITLE", "CITY"],
        row=_row,
        csv_headers=[
            "id",
            "firstName",
            "lastName",
            "email",
            "phone",
            "jobTitle",
            "city",
            "companyId",
            "createdAt",
            "updatedAt",
        ],
        csv_row=_csv_row,
        extra_flags=FILTER_FLAGS,
        build_filter=_filter,
    )
)
