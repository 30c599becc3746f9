"""Record-array extraction and cell formatting for tabular output.

API responses arrive wrapped in envelopes of varying shape::

    [{"id": "1"}, ...]                              # bare array
    {"data": [{"id": "1"}, ...]}                    # data wrapper
    {"data": {"tasks": [...]}, "pageInfo": {...}}   # REST list envelope

:func:`extract_records` locates the array of record objects inside any of
them without knowing the resource name, and :func:`extract_record` does the
same for single-record responses (``{"data": {"createTask": {...}}}``).
The remaining helpers turn arbitrary JSON values into the flat string cells
used by the text and CSV renderers.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from pydantic import BaseModel


# ------------------------------------------------------------------ #
# Record location
# ------------------------------------------------------------------ #


def extract_records(document: Any) -> list[dict[str, Any]]:
    """Return the array of record objects found in *document*.

    Rules, first match wins:

    1. A list keeps only its dict elements.
    2. A dict with a ``"data"`` key recurses into that value.
    3. Otherwise the first list-valued field of the dict, in document
       order, is used (rule 1 applied).
    4. Anything else yields an empty list.

    Example::

        >>> extract_records({"data": {"people": [{"id": "1"}, 7]}})
        [{'id': '1'}]
    """
    array = locate_record_array(document)
    if array is None:
        return []
    return [item for item in array if isinstance(item, dict)]


def locate_record_array(document: Any) -> Optional[list[Any]]:
    """Return the raw list :func:`extract_records` would read, or ``None``.

    Lets callers tell an empty result page (``{"data": {"tasks": []}}``)
    apart from a document that holds no array at all.
    """
    if isinstance(document, list):
        return document
    if not isinstance(document, dict):
        return None
    if "data" in document:
        return locate_record_array(document["data"])
    for value in document.values():
        if isinstance(value, list):
            return value
    return None


def extract_record(document: Any) -> Optional[dict[str, Any]]:
    """Return the single record object wrapped in *document*, if any.

    ``{"data": {...}}`` is unwrapped first; a dict whose only value is
    itself a dict (``{"createTask": {...}}``) is unwrapped once more.
    """
    if not isinstance(document, dict):
        return None
    if isinstance(document.get("data"), dict):
        document = document["data"]
    if len(document) == 1:
        (only,) = document.values()
        if isinstance(only, dict):
            return only
    return document


def derive_headers(records: Sequence[dict[str, Any]]) -> list[str]:
    """Sorted union of the keys of every record in *records*."""
    keys: set[str] = set()
    for record in records:
        keys.update(record)
    return sorted(keys)


def record_to_row(record: dict[str, Any], headers: Sequence[str]) -> list[str]:
    """Project *record* onto *headers*; absent keys become empty cells."""
    return [format_cell(record.get(header)) for header in headers]


# ------------------------------------------------------------------ #
# Cell formatting
# ------------------------------------------------------------------ #


def format_cell(value: Any) -> str:
    """Render one JSON-ish value as a single table/CSV cell.

    ``None`` becomes ``""``, booleans become ``true``/``false``, whole
    floats lose their ``.0``, datetimes use ISO-8601 with a ``Z`` suffix and
    nested structures are written as compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def format_timestamp(value: Optional[datetime]) -> str:
    """Format *value* as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC (``""`` for ``None``)."""
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_date(value: Optional[datetime]) -> str:
    """Short ``YYYY-MM-DD`` form used in narrow table columns."""
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d")


def truncate(value: Optional[str], width: int = 8) -> str:
    """Shorten *value* to *width* characters plus ``...`` when longer."""
    if not value:
        return ""
    if len(value) <= width:
        return value
    return value[:width] + "..."
