"""``twenty companies``: manage company records."""

from __future__ import annotations

from typing import Any

from twenty_cli.builder import FlagSpec, build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Company
from twenty_cli.records import format_cell, format_timestamp, truncate

COMPANIES = ResourceEndpoint(Company, "companies", "company")


def _row(company: Company) -> list[str]:
    return [
        truncate(company.id),
        company.name,
        company.domain_name.primary_link_url,
        format_cell(company.employees),
        company.address.address_city,
    ]


def _csv_row(company: Company) -> list[str]:
    return [
        company.id,
        company.name,
        company.domain_name.primary_link_url,
        format_cell(company.employees),
        company.address.address_city,
        format_timestamp(company.created_at),
        format_timestamp(company.updated_at),
    ]


def _filter(values: dict[str, Any]) -> dict[str, Any]:
    if values.get("name"):
        return {"name": {"ilike": f"%{values['name']}%"}}
    return {}


app = build_resource_app(
    endpoint_commands(
        COMPANIES,
        name="companies",
        noun="company",
        help="Manage companies.",
        headers=["ID", "NAME", "DOMAIN", "EMPLOYEES", "CITY"],
        row=_row,
        csv_headers=["id", "name", "domain", "employees", "city", "createdAt", "updatedAt"],
        csv_row=_csv_row,
        extra_flags=[FlagSpec("name", help="Filter by name (contains).")],
        build_filter=_filter,
    )
)
