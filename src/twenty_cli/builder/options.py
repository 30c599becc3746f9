"""Flag descriptors and JSON input handling shared by the command builders.

Commands are assembled at import time, so their parameters are described by
:class:`FlagSpec` descriptors and turned into an :class:`inspect.Signature`
that Typer reads like any hand-written function signature. The standard
list flags live in :data:`LIST_FLAGS`; resources add their own filters
through ``extra_flags`` on the list config.

This module also owns the conversion of raw flag values into a frozen
:class:`~twenty_cli.models.ListQueryOptions` and the reading of JSON from
``--data``/``--file``-style flag pairs (``-`` meaning standard input).
"""

from __future__ import annotations

import inspect
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import typer
from pydantic import ValidationError

from twenty_cli.exceptions import (
    ConfigurationError,
    InvalidPayloadError,
    InvalidUsageError,
    MissingPayloadError,
)
from twenty_cli.models import ListQueryOptions


@dataclass(frozen=True)
class FlagSpec:
    """One command-line parameter of a generated command.

    Attributes:
        name: Python identifier the value is passed under.
        annotation: Type Typer converts the raw value to.
        default: Default value (``...`` for a required argument).
        help: Help text.
        decls: Flag spellings, e.g. ``("--limit", "-l")``. Defaults to
            ``--<name>`` with underscores turned into dashes.
        argument: Positional argument instead of an option.
        metavar: Placeholder shown in usage for arguments.
    """

    name: str
    annotation: Any = Optional[str]
    default: Any = None
    help: str = ""
    decls: tuple[str, ...] = ()
    argument: bool = False
    metavar: Optional[str] = None

    @property
    def flag_decls(self) -> tuple[str, ...]:
        return self.decls or (f"--{self.name.replace('_', '-')}",)

    def to_parameter(self) -> inspect.Parameter:
        if self.argument:
            default = typer.Argument(self.default, help=self.help, metavar=self.metavar)
        else:
            default = typer.Option(self.default, *self.flag_decls, help=self.help)
        return inspect.Parameter(
            self.name,
            inspect.Parameter.KEYWORD_ONLY,
            default=default,
            annotation=self.annotation,
        )


LIST_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("limit", int, 20, "Maximum records per page.", ("--limit", "-l")),
    FlagSpec("cursor", help="Pagination cursor from a previous page."),
    FlagSpec("fetch_all", bool, False, "Follow pagination and fetch every record.", ("--all",)),
    FlagSpec("filter", help="Filter as JSON, e.g. '{\"city\": {\"eq\": \"Paris\"}}'."),
    FlagSpec("filter_file", help="Read the JSON filter from a file ('-' for stdin)."),
    FlagSpec(
        "param",
        Optional[List[str]],
        None,
        "Extra query parameter as key=value (repeatable).",
    ),
    FlagSpec("sort", help="Field to sort by."),
    FlagSpec("order", help="Sort order: asc or desc."),
    FlagSpec("fields", help="Comma-separated fields to return."),
    FlagSpec("include", help="Comma-separated relations to include."),
)

PAYLOAD_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("data", help="JSON payload.", decls=("--data", "-d")),
    FlagSpec("file", help="Read the JSON payload from a file ('-' for stdin).", decls=("--file", "-f")),
)


def make_command(
    name: str,
    help: str,
    flags: Sequence[FlagSpec],
    run: Callable[[dict[str, Any]], None],
) -> Callable[..., None]:
    """Build a Typer-compatible callable whose signature is *flags*.

    Typer inspects ``__signature__`` to discover parameters and calls the
    function with keyword arguments; they are forwarded to *run* as one
    dict.

    Raises:
        ConfigurationError: If two flags share a Python name.
    """
    seen: set[str] = set()
    for flag in flags:
        if flag.name in seen:
            raise ConfigurationError(f"{name}: duplicate flag {flag.name!r}")
        seen.add(flag.name)

    def command(**values: Any) -> None:
        run(values)

    command.__signature__ = inspect.Signature(  # type: ignore[attr-defined]
        [flag.to_parameter() for flag in flags]
    )
    command.__name__ = name.replace("-", "_")
    command.__qualname__ = command.__name__
    command.__doc__ = help
    return command


# ------------------------------------------------------------------ #
# List options
# ------------------------------------------------------------------ #


def build_list_options(values: dict[str, Any]) -> ListQueryOptions:
    """Turn parsed list-flag values into a frozen :class:`ListQueryOptions`.

    Raises:
        InvalidUsageError: On a malformed ``--param``, an invalid JSON filter,
            a non-positive ``--limit`` or an unknown ``--order``.
    """
    filter_text = read_json_input(values.get("filter"), values.get("filter_file"))
    filter = parse_json_object(filter_text, "filter") if filter_text else {}

    order = values.get("order")
    try:
        return ListQueryOptions(
            limit=values.get("limit", 20),
            cursor=values.get("cursor") or "",
            filter=filter,
            sort=values.get("sort") or "",
            order=order.lower() if order else None,
            fields=split_csv(values.get("fields")),
            include=split_csv(values.get("include")),
            params=parse_params(values.get("param")),
        )
    except ValidationError as exc:
        problems = "; ".join(
            f"--{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidUsageError(f"invalid list options: {problems}") from exc


def parse_params(raw: Optional[Sequence[str]]) -> list[tuple[str, str]]:
    """Split repeated ``key=value`` strings; the value may itself contain ``=``."""
    params = []
    for item in raw or ():
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise InvalidUsageError(f"invalid --param {item!r}: expected key=value")
        params.append((key.strip(), value))
    return params


def split_csv(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


# ------------------------------------------------------------------ #
# JSON input
# ------------------------------------------------------------------ #


def read_json_input(inline: Optional[str], path: Optional[str]) -> Optional[str]:
    """Return the JSON text from a file flag or an inline flag.

    The file wins when both are given; ``-`` reads standard input.
    Whitespace-only input counts as absent.

    Raises:
        InvalidUsageError: If the file cannot be read.
    """
    text: Optional[str]
    if path:
        if path == "-":
            text = sys.stdin.read()
        else:
            try:
                text = Path(path).expanduser().read_text(encoding="utf-8")
            except OSError as exc:
                raise InvalidUsageError(f"read json file {path}: {exc}") from exc
    else:
        text = inline
    if text is None or not text.strip():
        return None
    return text


def parse_json_object(text: str, what: str = "payload") -> dict[str, Any]:
    """Parse *text* and require a JSON object.

    Raises:
        InvalidPayloadError: If *text* is not JSON or not an object.
    """
    value = parse_json(text, what)
    if not isinstance(value, dict):
        raise InvalidPayloadError(f"invalid {what}: expected JSON object")
    return value


def parse_json(text: str, what: str = "payload") -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidPayloadError(f"invalid {what}: {exc}") from exc


def read_payload(
    values: dict[str, Any],
    allow_non_object: bool = False,
    missing_message: Optional[str] = None,
    invalid_message: Optional[str] = None,
) -> Any:
    """Read the create/update payload from ``--data``/``--file``.

    Raises:
        MissingPayloadError: If neither flag supplied any content.
        InvalidPayloadError: If the content is not JSON, or not an object
            unless *allow_non_object* is set.
    """
    text = read_json_input(values.get("data"), values.get("file"))
    if text is None:
        raise MissingPayloadError(missing_message or "missing JSON payload; use --data or --file")
    payload = parse_json(text)
    if not allow_non_object and not isinstance(payload, dict):
        raise InvalidPayloadError(invalid_message or "expected JSON object")
    return payload
