"""Generic ``get`` command factory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from twenty_cli.builder.options import FlagSpec, make_command
from twenty_cli.client.rest import RestClient
from twenty_cli.exceptions import ConfigurationError, TransportError
from twenty_cli.runtime import current_runtime

T = TypeVar("T")

ID_ARGUMENT = FlagSpec("id", str, ..., "Record ID.", argument=True, metavar="ID")


@dataclass
class GetConfig(Generic[T]):
    """Static input of a get command.

    Without ``headers`` the rows returned by ``rows`` are rendered as
    field/value pairs.
    """

    get_func: Optional[Callable[[RestClient, str], T]]
    rows: Optional[Callable[[T], list[list[str]]]]
    headers: Optional[Sequence[str]] = None
    csv_headers: Optional[Sequence[str]] = None
    csv_rows: Optional[Callable[[T], list[list[str]]]] = None
    name: str = "get"
    help: str = ""


def new_get_command(resource: str, cfg: GetConfig[T]) -> Callable[..., None]:
    """Build the get command for *resource*.

    Raises:
        ConfigurationError: If the get function or row mapping is missing.
    """
    if cfg.get_func is None:
        raise ConfigurationError(f"{resource} {cfg.name}: get function is required")
    if cfg.rows is None:
        raise ConfigurationError(f"{resource} {cfg.name}: row mapping is required")

    get_func = cfg.get_func

    def run(values: dict[str, Any]) -> None:
        runtime = current_runtime()
        with runtime.rest_client() as client:
            try:
                item = get_func(client, values["id"])
            except TransportError as exc:
                raise exc.with_context("failed to get") from exc

        runtime.renderer().render_record(
            item,
            cfg.rows,
            cfg.headers,
            csv_headers=cfg.csv_headers,
            csv_rows=cfg.csv_rows,
        )

    help = cfg.help or f"Get one {resource} record by ID."
    return make_command(cfg.name, help, [ID_ARGUMENT], run)
