"""``twenty records``: CRUD over any object, including custom objects.

The object is named on the command line by its plural REST name, so
objects without a dedicated command group are still reachable::

    twenty records list opportunities --all
    twenty records get pets 3f2a...
    twenty records create pets -d '{"name": "Rex"}'
    twenty records delete pets 3f2a... --force

The flags are the builder's standard sets. Records carry no static type:
list output derives its columns from the records themselves, while get,
create and update render the server's document as-is.
"""

from __future__ import annotations

import re
from typing import Any

import typer

from twenty_cli.builder.crud import DELETE_FLAGS
from twenty_cli.builder.get import ID_ARGUMENT
from twenty_cli.builder.options import (
    LIST_FLAGS,
    PAYLOAD_FLAGS,
    FlagSpec,
    build_list_options,
    make_command,
    read_payload,
)
from twenty_cli.builder.paginate import paginate
from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.exceptions import InvalidUsageError, TransportError
from twenty_cli.models import Record
from twenty_cli.output import get_output
from twenty_cli.runtime import current_runtime

OBJECT_ARGUMENT = FlagSpec(
    "object",
    str,
    ...,
    "Plural object name, e.g. opportunities or a custom object.",
    argument=True,
    metavar="OBJECT",
)

_OBJECT_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


def object_endpoint(name: str) -> ResourceEndpoint[Record]:
    """An untyped endpoint for the object called *name*.

    Raises:
        InvalidUsageError: If *name* is not a plain object name.
    """
    name = name.strip()
    if not _OBJECT_NAME.match(name):
        raise InvalidUsageError(f"invalid object name {name!r}")
    return ResourceEndpoint(Record, name, name)


def _list(values: dict[str, Any]) -> None:
    runtime = current_runtime()
    endpoint = object_endpoint(values["object"])
    options = build_list_options(values)
    with runtime.rest_client() as client:
        try:
            items = paginate(
                lambda cursor: endpoint.list(client, options.model_copy(update={"cursor": cursor})),
                fetch_all=values.get("fetch_all", False),
                cursor=options.cursor,
            )
        except TransportError as exc:
            raise exc.with_context(f"failed to list {endpoint.plural}") from exc
    runtime.renderer().render_list([item.to_json() for item in items])


def _get(values: dict[str, Any]) -> None:
    runtime = current_runtime()
    endpoint = object_endpoint(values["object"])
    with runtime.rest_client() as client:
        try:
            document = client.get(endpoint.item_path(values["id"]))
        except TransportError as exc:
            raise exc.with_context(f"failed to get {endpoint.plural} record") from exc
    runtime.renderer().render_raw(document, single=True)


def _create(values: dict[str, Any]) -> None:
    runtime = current_runtime()
    endpoint = object_endpoint(values["object"])
    payload = read_payload(values)
    with runtime.rest_client() as client:
        try:
            document = endpoint.create_raw(client, payload)
        except TransportError as exc:
            raise exc.with_context(f"failed to create {endpoint.plural} record") from exc
    runtime.renderer().render_raw(document, single=True)


def _update(values: dict[str, Any]) -> None:
    runtime = current_runtime()
    endpoint = object_endpoint(values["object"])
    payload = read_payload(values)
    with runtime.rest_client() as client:
        try:
            document = endpoint.update_raw(client, values["id"], payload)
        except TransportError as exc:
            raise exc.with_context(f"failed to update {endpoint.plural} record") from exc
    runtime.renderer().render_raw(document, single=True)


def _delete(values: dict[str, Any]) -> None:
    endpoint = object_endpoint(values["object"])
    record_id = values["id"]
    output = get_output()
    if not (values.get("force") or values.get("yes")):
        output.info(f"Would delete {endpoint.plural} {record_id}. Use --force to confirm.")
        return

    runtime = current_runtime()
    with runtime.rest_client() as client:
        try:
            endpoint.delete(client, record_id)
        except TransportError as exc:
            raise exc.with_context(f"failed to delete {endpoint.plural} record") from exc
    output.success(f"Deleted {endpoint.plural} {record_id}")


app = typer.Typer(name="records", help="Manage records of any object.", no_args_is_help=True)

app.command(name="list")(
    make_command("list", "List records of an object.", [OBJECT_ARGUMENT, *LIST_FLAGS], _list)
)
app.command(name="get")(
    make_command("get", "Get one record by ID.", [OBJECT_ARGUMENT, ID_ARGUMENT], _get)
)
app.command(name="create")(
    make_command(
        "create", "Create a record from a JSON payload.", [OBJECT_ARGUMENT, *PAYLOAD_FLAGS], _create
    )
)
app.command(name="update")(
    make_command(
        "update",
        "Update a record with a partial JSON payload.",
        [OBJECT_ARGUMENT, ID_ARGUMENT, *PAYLOAD_FLAGS],
        _update,
    )
)
app.command(name="delete")(
    make_command(
        "delete", "Delete a record (requires --force).", [OBJECT_ARGUMENT, *DELETE_FLAGS], _delete
    )
)
