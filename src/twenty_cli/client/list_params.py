"""Translation of :class:`~twenty_cli.models.ListQueryOptions` into query parameters.

The Twenty REST API takes cursor pagination and sorting as plain query
parameters and expects filters as a single compact string::

    {"createdAt": {"gte": "2024-01-01"}}       ->  createdAt[gte]:"2024-01-01"
    {"emails": {"primaryEmail": {"eq": "a"}}}  ->  emails.primaryEmail[eq]:"a"
    {"or": [{"city": "Paris"}, {"city": "Oslo"}]}
                                               ->  or(city[eq]:"Paris",city[eq]:"Oslo")
    {"not": {"deletedAt": {"is": None}}}       ->  not(deletedAt[is]:NULL)

Keys are emitted in sorted order so the same filter always produces the
same URL.
"""

from __future__ import annotations

import json
from typing import Any

from twenty_cli.models import ListQueryOptions

FILTER_OPERATORS = frozenset(
    {
        "eq",
        "neq",
        "ne",
        "gt",
        "gte",
        "lt",
        "lte",
        "like",
        "ilike",
        "in",
        "is",
        "startsWith",
        "endsWith",
        "contains",
        "containsAny",
    }
)

LOGICAL_OPERATORS = frozenset({"or", "and", "not"})


def build_list_params(options: ListQueryOptions) -> list[tuple[str, str]]:
    """Return the ordered query parameters for one list request."""
    params: list[tuple[str, str]] = [("limit", str(options.limit))]
    if options.cursor:
        params.append(("starting_after", options.cursor))
    if options.sort:
        params.append(("order_by", options.sort))
    if options.order:
        params.append(("order_by_direction", options.order))
    if options.fields:
        params.append(("fields", ",".join(options.fields)))
    if options.include:
        params.append(("depth", "1"))
    if options.filter:
        filter_string = build_filter_string(options.filter)
        if filter_string:
            params.append(("filter", filter_string))
    params.extend(options.params)
    return params


def build_filter_string(filter: dict[str, Any]) -> str:
    """Serialise a filter mapping into the API's filter syntax."""
    parts = [_filter_part(key, filter[key]) for key in sorted(filter)]
    return ",".join(part for part in parts if part)


def _filter_part(key: str, value: Any) -> str:
    if key in LOGICAL_OPERATORS:
        return _logical(key, value)
    return _field_filter(key, value)


def _logical(op: str, value: Any) -> str:
    branches = value if isinstance(value, list) else [value]
    parts = [build_filter_string(branch) for branch in branches if isinstance(branch, dict)]
    parts = [part for part in parts if part]
    if not parts:
        return ""
    return f"{op}({','.join(parts)})"


def _field_filter(path: str, value: Any) -> str:
    if not isinstance(value, dict):
        return f"{path}[eq]:{format_filter_value(value)}"
    parts = []
    for key in sorted(value):
        if key in FILTER_OPERATORS:
            parts.append(f"{path}[{key}]:{format_filter_value(value[key])}")
        else:
            parts.append(_field_filter(f"{path}.{key}", value[key]))
    return ",".join(part for part in parts if part)


def format_filter_value(value: Any) -> str:
    """Strings are double-quoted, ``None`` is ``NULL``, lists are ``[a,b]``."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(format_filter_value(item) for item in value) + "]"
    return str(value)
