"""Generic ``create``, ``update`` and ``delete`` command factories.

Create and update read their payload from ``-d/--data`` or ``-f/--file``
(the file wins, ``-`` reads stdin) and render the server's answer as a raw
single-record document. Delete refuses to act without ``--force`` or
``--yes``: it then only reports what it would have deleted and exits
successfully without touching the API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from twenty_cli.builder.get import ID_ARGUMENT
from twenty_cli.builder.options import PAYLOAD_FLAGS, FlagSpec, make_command, read_payload
from twenty_cli.client.rest import RestClient
from twenty_cli.exceptions import ConfigurationError, TransportError
from twenty_cli.output import get_output
from twenty_cli.runtime import current_runtime

DELETE_FLAGS: tuple[FlagSpec, ...] = (
    ID_ARGUMENT,
    FlagSpec("force", bool, False, "Actually delete the record.", ("--force",)),
    FlagSpec("yes", bool, False, "Same as --force.", ("--yes", "-y")),
)


@dataclass
class CreateConfig:
    create_func: Optional[Callable[[RestClient, Any], Any]]
    allow_non_object: bool = False
    missing_message: Optional[str] = None
    invalid_message: Optional[str] = None
    name: str = "create"
    help: str = ""


@dataclass
class UpdateConfig:
    update_func: Optional[Callable[[RestClient, str, Any], Any]]
    allow_non_object: bool = False
    missing_message: Optional[str] = None
    invalid_message: Optional[str] = None
    name: str = "update"
    help: str = ""


@dataclass
class DeleteConfig:
    delete_func: Optional[Callable[[RestClient, str], None]]
    name: str = "delete"
    help: str = ""


def new_create_command(resource: str, cfg: CreateConfig) -> Callable[..., None]:
    if cfg.create_func is None:
        raise ConfigurationError(f"{resource} {cfg.name}: create function is required")
    create_func = cfg.create_func

    def run(values: dict[str, Any]) -> None:
        runtime = current_runtime()
        payload = read_payload(
            values,
            allow_non_object=cfg.allow_non_object,
            missing_message=cfg.missing_message,
            invalid_message=cfg.invalid_message,
        )
        with runtime.rest_client() as client:
            try:
                document = create_func(client, payload)
            except TransportError as exc:
                raise exc.with_context("failed to create") from exc
        runtime.renderer().render_raw(document, single=True)

    help = cfg.help or f"Create a {resource} record from a JSON payload."
    return make_command(cfg.name, help, PAYLOAD_FLAGS, run)


def new_update_command(resource: str, cfg: UpdateConfig) -> Callable[..., None]:
    if cfg.update_func is None:
        raise ConfigurationError(f"{resource} {cfg.name}: update function is required")
    update_func = cfg.update_func

    def run(values: dict[str, Any]) -> None:
        runtime = current_runtime()
        payload = read_payload(
            values,
            allow_non_object=cfg.allow_non_object,
            missing_message=cfg.missing_message,
            invalid_message=cfg.invalid_message,
        )
        with runtime.rest_client() as client:
            try:
                document = update_func(client, values["id"], payload)
            except TransportError as exc:
                raise exc.with_context("failed to update") from exc
        runtime.renderer().render_raw(document, single=True)

    help = cfg.help or f"Update a {resource} record with a partial JSON payload."
    return make_command(cfg.name, help, [ID_ARGUMENT, *PAYLOAD_FLAGS], run)


def new_delete_command(resource: str, cfg: DeleteConfig) -> Callable[..., None]:
    if cfg.delete_func is None:
        raise ConfigurationError(f"{resource} {cfg.name}: delete function is required")
    delete_func = cfg.delete_func

    def run(values: dict[str, Any]) -> None:
        record_id = values["id"]
        output = get_output()
        if not (values.get("force") or values.get("yes")):
            output.info(f"Would delete {resource} {record_id}. Use --force to confirm.")
            return

        runtime = current_runtime()
        with runtime.rest_client() as client:
            try:
                delete_func(client, record_id)
            except TransportError as exc:
                raise exc.with_context("failed to delete") from exc
        output.success(f"Deleted {resource} {record_id}")

    help = cfg.help or f"Delete a {resource} record (requires --force)."
    return make_command(cfg.name, help, DELETE_FLAGS, run)
