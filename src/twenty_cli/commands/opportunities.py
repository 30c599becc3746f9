"""``twenty opportunities``: manage opportunity records."""

from __future__ import annotations

from typing import Any

from twenty_cli.builder import FlagSpec, build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Opportunity
from twenty_cli.records import format_cell, format_timestamp, truncate

OPPORTUNITIES = ResourceEndpoint(Opportunity, "opportunities", "opportunity")


def _amount(opportunity: Opportunity) -> str:
    return str(opportunity.amount) if opportunity.amount is not None else "-"


def _row(opportunity: Opportunity) -> list[str]:
    return [
        truncate(opportunity.id),
        opportunity.name,
        opportunity.stage or "",
        _amount(opportunity),
        opportunity.close_date or "",
    ]


def _csv_row(opportunity: Opportunity) -> list[str]:
    return [
        opportunity.id,
        opportunity.name,
        opportunity.stage or "",
        _amount(opportunity),
        format_cell(opportunity.probability),
        opportunity.close_date or "",
        format_timestamp(opportunity.created_at),
        format_timestamp(opportunity.updated_at),
    ]


def _filter(values: dict[str, Any]) -> dict[str, Any]:
    conditions: dict[str, Any] = {}
    if values.get("stage"):
        conditions["stage"] = {"eq": values["stage"]}
    if values.get("company_id"):
        conditions["companyId"] = {"eq": values["company_id"]}
    return conditions


app = build_resource_app(
    endpoint_commands(
        OPPORTUNITIES,
        name="opportunities",
        noun="opportunity",
        help="Manage opportunities.",
        headers=["ID", "NAME", "STAGE", "AMOUNT", "CLOSE DATE"],
        row=_row,
        csv_headers=["id", "name", "stage", "amount", "probability", "closeDate", "createdAt", "updatedAt"],
        csv_row=_csv_row,
        extra_flags=[
            FlagSpec("stage", help="Filter by stage, e.g. MEETING or PROPOSAL."),
            FlagSpec("company_id", help="Filter by company ID."),
        ],
        build_filter=_filter,
    )
)
