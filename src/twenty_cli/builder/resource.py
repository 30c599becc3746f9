"""Assembly of a resource's command group from one configuration object.

A resource module declares a :class:`ResourceCommandConfig` and passes it
to :func:`build_resource_app`; each configured operation becomes a
subcommand. :func:`endpoint_commands` fills in the call functions for the
common case of a :class:`~twenty_cli.client.resources.ResourceEndpoint`,
so most resources only provide their columns and filters::

    app = build_resource_app(
        endpoint_commands(
            TASKS,
            name="tasks",
            noun="task",
            headers=["ID", "TITLE", "STATUS", "DUE"],
            row=_task_row,
        )
    )

Configuration mistakes (missing call or row functions, clashing flags)
raise :class:`~twenty_cli.exceptions.ConfigurationError` while the app is
being built, i.e. at import time, never when a command runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import typer

from twenty_cli.builder.crud import (
    CreateConfig,
    DeleteConfig,
    UpdateConfig,
    new_create_command,
    new_delete_command,
    new_update_command,
)
from twenty_cli.builder.get import GetConfig, new_get_command
from twenty_cli.builder.list import ListConfig, new_list_command
from twenty_cli.builder.options import FlagSpec
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.render import record_pairs


@dataclass
class ResourceCommandConfig:
    """Everything needed to build one resource's command group.

    Operations left as ``None`` are not registered.
    """

    name: str
    noun: str
    help: str = ""
    list: Optional[ListConfig[Any]] = None
    get: Optional[GetConfig[Any]] = None
    create: Optional[CreateConfig] = None
    update: Optional[UpdateConfig] = None
    delete: Optional[DeleteConfig] = None


def build_resource_app(cfg: ResourceCommandConfig) -> typer.Typer:
    """Build the Typer group for *cfg*.

    Raises:
        ConfigurationError: If any operation's configuration is incomplete.
    """
    app = typer.Typer(
        name=cfg.name,
        help=cfg.help or f"Manage {cfg.name}.",
        no_args_is_help=True,
    )
    commands = []
    if cfg.list is not None:
        commands.append((cfg.list.name, new_list_command(cfg.name, cfg.list)))
    if cfg.get is not None:
        commands.append((cfg.get.name, new_get_command(cfg.noun, cfg.get)))
    if cfg.create is not None:
        commands.append((cfg.create.name, new_create_command(cfg.noun, cfg.create)))
    if cfg.update is not None:
        commands.append((cfg.update.name, new_update_command(cfg.noun, cfg.update)))
    if cfg.delete is not None:
        commands.append((cfg.delete.name, new_delete_command(cfg.noun, cfg.delete)))

    for name, command in commands:
        app.command(name=name)(command)
    return app


def endpoint_commands(
    endpoint: ResourceEndpoint[Any],
    name: str,
    noun: str,
    headers: Sequence[str],
    row: Callable[[Any], list[str]],
    help: str = "",
    csv_headers: Optional[Sequence[str]] = None,
    csv_row: Optional[Callable[[Any], list[str]]] = None,
    extra_flags: Sequence[FlagSpec] = (),
    build_filter: Optional[Callable[[dict[str, Any]], dict[str, Any]]] = None,
    updatable: bool = True,
) -> ResourceCommandConfig:
    """A full CRUD configuration backed by *endpoint*."""
    return ResourceCommandConfig(
        name=name,
        noun=noun,
        help=help,
        list=ListConfig(
            list_func=endpoint.list,
            headers=headers,
            row=row,
            csv_headers=csv_headers,
            csv_row=csv_row,
            extra_flags=extra_flags,
            build_filter=build_filter,
        ),
        get=GetConfig(get_func=endpoint.get, rows=record_pairs),
        create=CreateConfig(create_func=endpoint.create_raw),
        update=UpdateConfig(update_func=endpoint.update_raw) if updatable else None,
        delete=DeleteConfig(delete_func=endpoint.delete),
    )
