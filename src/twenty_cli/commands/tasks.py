"""``twenty tasks``: list, get, create, update and delete tasks."""

from __future__ import annotations

from typing import Any

from twenty_cli.builder import FlagSpec, build_resource_app, endpoint_commands
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.models import Task
from twenty_cli.records import format_date, format_timestamp, truncate

TASKS = ResourceEndpoint(Task, "tasks", "task")


def _row(task: Task) -> list[str]:
    return [truncate(task.id), task.title, task.status or "", format_date(task.due_at)]


def _csv_row(task: Task) -> list[str]:
    return [
        task.id,
        task.title,
        task.status or "",
        format_timestamp(task.due_at),
        task.assignee_id or "",
        format_timestamp(task.created_at),
        format_timestamp(task.updated_at),
    ]


def _filter(values: dict[str, Any]) -> dict[str, Any]:
    if values.get("status"):
        return {"status": {"eq": values["status"]}}
    return {}


app = build_resource_app(
    endpoint_commands(
        TASKS,
        name="tasks",
        noun="task",
        help="Manage tasks.",
        headers=["ID", "TITLE", "STATUS", "DUE"],
        row=_row,
        csv_headers=["id", "title", "status", "dueAt", "assigneeId", "createdAt", "updatedAt"],
        csv_row=_csv_row,
        extra_flags=[FlagSpec("status", help="Filter by status, e.g. TODO or DONE.")],
        build_filter=_filter,
    )
)
