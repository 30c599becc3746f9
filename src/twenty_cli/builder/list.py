"""Generic ``list`` command factory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from twenty_cli.builder.options import LIST_FLAGS, FlagSpec, build_list_options, make_command
from twenty_cli.builder.paginate import paginate
from twenty_cli.client.rest import RestClient
from twenty_cli.exceptions import ConfigurationError, TransportError
from twenty_cli.models import ListQueryOptions, ListResult
from twenty_cli.runtime import current_runtime

T = TypeVar("T")

ListFunc = Callable[[RestClient, ListQueryOptions], ListResult[T]]


@dataclass
class ListConfig(Generic[T]):
    """Static input of a list command.

    ``list_func`` and ``row`` are mandatory. ``build_filter`` receives the
    values of ``extra_flags`` and returns filter conditions that are merged
    over the ``--filter`` JSON.
    """

    list_func: Optional[ListFunc[T]]
    headers: Sequence[str]
    row: Optional[Callable[[T], list[str]]]
    csv_headers: Optional[Sequence[str]] = None
    csv_row: Optional[Callable[[T], list[str]]] = None
    extra_flags: Sequence[FlagSpec] = field(default_factory=tuple)
    build_filter: Optional[Callable[[dict[str, Any]], dict[str, Any]]] = None
    name: str = "list"
    help: str = ""


def new_list_command(resource: str, cfg: ListConfig[T]) -> Callable[..., None]:
    """Build the list command for *resource*.

    Raises:
        ConfigurationError: If the list function or row mapping is missing,
            or an extra flag collides with a standard list flag.
    """
    if cfg.list_func is None:
        raise ConfigurationError(f"{resource} {cfg.name}: list function is required")
    if cfg.row is None:
        raise ConfigurationError(f"{resource} {cfg.name}: row mapping is required")
    _check_flag_clash(resource, cfg.name, LIST_FLAGS, cfg.extra_flags)

    list_func = cfg.list_func
    extra_names = [flag.name for flag in cfg.extra_flags]

    def run(values: dict[str, Any]) -> None:
        runtime = current_runtime()
        options = build_list_options(values)
        if cfg.build_filter is not None:
            extra = cfg.build_filter({name: values.get(name) for name in extra_names})
            if extra:
                options = options.model_copy(update={"filter": {**options.filter, **extra}})

        with runtime.rest_client() as client:
            try:
                items = paginate(
                    lambda cursor: list_func(client, options.model_copy(update={"cursor": cursor})),
                    fetch_all=values.get("fetch_all", False),
                    cursor=options.cursor,
                )
            except TransportError as exc:
                raise exc.with_context("failed to list") from exc

        runtime.renderer().render_list(
            items,
            cfg.headers,
            cfg.row,
            csv_headers=cfg.csv_headers,
            csv_row=cfg.csv_row,
        )

    help = cfg.help or f"List {resource}."
    return make_command(cfg.name, help, [*LIST_FLAGS, *cfg.extra_flags], run)


def _check_flag_clash(
    resource: str,
    command: str,
    builtin: Sequence[FlagSpec],
    extra: Sequence[FlagSpec],
) -> None:
    taken = {decl for flag in builtin for decl in flag.flag_decls}
    names = {flag.name for flag in builtin}
    for flag in extra:
        clash = taken.intersection(flag.flag_decls)
        if clash or flag.name in names:
            what = ", ".join(sorted(clash)) or flag.name
            raise ConfigurationError(f"{resource} {command}: flag {what} is already defined")
        taken.update(flag.flag_decls)
        names.add(flag.name)
