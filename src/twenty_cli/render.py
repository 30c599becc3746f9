"""Rendering of command results in the ``--output`` format.

A :class:`Renderer` is created per invocation from the global ``--output``
and ``--query`` flags and knows three kinds of input:

* **lists of records** (:meth:`Renderer.render_list`) -- typed
  :class:`~twenty_cli.models.Record` objects with explicit column mappings
  from the resource config;
* **single records** (:meth:`Renderer.render_record`) -- shown as
  field/value rows in text and CSV unless explicit headers are given;
* **raw JSON documents** (:meth:`Renderer.render_raw`) -- responses of the
  passthrough commands, tabulated with
  :func:`~twenty_cli.records.extract_records` and sorted keys.

JSON output is pretty-printed; with ``--query`` every result of the
expression is printed on its own, and the query is evaluated completely
before anything is written so a failing expression never leaves partial
output behind. YAML uses two-space indentation. ``--query`` is ignored for
every format other than JSON.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Sequence, TypeVar

import yaml
from pydantic import BaseModel

from twenty_cli.exceptions import ConfigurationError
from twenty_cli.models import Record
from twenty_cli.output import OutputFormat, OutputManager, get_output
from twenty_cli.query import compile_query
from twenty_cli.records import (
    derive_headers,
    extract_record,
    format_cell,
    locate_record_array,
    record_to_row,
)

T = TypeVar("T")

RowFunc = Callable[[T], list[str]]
RowsFunc = Callable[[T], list[list[str]]]

FIELD_VALUE_HEADERS = ["field", "value"]


def to_jsonable(value: Any) -> Any:
    """Convert records and models inside *value* into plain JSON types."""
    if isinstance(value, Record):
        return value.to_json()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    return value


def record_pairs(record: Any) -> list[list[str]]:
    """Field/value rows for a single record.

    Typed records use their :meth:`~twenty_cli.models.Record.to_pairs`
    contract; plain dicts fall back to sorted keys.
    """
    if isinstance(record, Record):
        return [[key, value] for key, value in record.to_pairs()]
    if isinstance(record, dict):
        return [[key, format_cell(record[key])] for key in sorted(record)]
    return [["value", format_cell(record)]]


def dump_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def dump_yaml(value: Any) -> str:
    return yaml.safe_dump(value, indent=2, sort_keys=False, allow_unicode=True)


class Renderer:
    """Writes one command's result to stdout in the selected format.

    Args:
        format: The ``--output`` format.
        query: Optional ``--query`` expression (JSON output only).
        output: Output manager to write through; defaults to the global one.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.TEXT,
        query: Optional[str] = None,
        output: Optional[OutputManager] = None,
    ) -> None:
        self.format = OutputFormat(format)
        self.query = query or None
        self._output = output

    @property
    def output(self) -> OutputManager:
        return self._output or get_output()

    # ------------------------------------------------------------------ #
    # Entry points
    # ------------------------------------------------------------------ #

    def render_list(
        self,
        items: Sequence[T],
        headers: Optional[Sequence[str]] = None,
        row: Optional[RowFunc[T]] = None,
        csv_headers: Optional[Sequence[str]] = None,
        csv_row: Optional[RowFunc[T]] = None,
    ) -> None:
        """Render a list of records.

        Text and CSV use *headers*/*row*; CSV switches to *csv_headers*/
        *csv_row* when both are given. Without a row mapping the columns are
        derived from the records themselves.
        """
        if self._write_structured(to_jsonable(list(items))):
            return

        if self.format == OutputFormat.CSV and csv_headers is not None and csv_row is not None:
            headers, row = csv_headers, csv_row

        if headers is None or row is None:
            headers, rows = _derive_table(items)
        else:
            rows = [row(item) for item in items]

        _check_arity(headers, rows)
        if self.format == OutputFormat.CSV:
            if headers:
                self.output.print_csv(headers, rows)
        else:
            self.output.print_table(headers or None, rows)

    def render_record(
        self,
        item: T,
        rows: Optional[RowsFunc[T]] = None,
        headers: Optional[Sequence[str]] = None,
        csv_headers: Optional[Sequence[str]] = None,
        csv_rows: Optional[RowsFunc[T]] = None,
    ) -> None:
        """Render a single record.

        Without *headers* the rows are field/value pairs: printed bare in
        text mode and under a ``field,value`` header in CSV.
        """
        if self._write_structured(to_jsonable(item)):
            return

        if self.format == OutputFormat.CSV and csv_headers is not None and csv_rows is not None:
            headers, rows = csv_headers, csv_rows

        table = rows(item) if rows is not None else record_pairs(item)
        if self.format == OutputFormat.CSV:
            csv_head = list(headers) if headers is not None else FIELD_VALUE_HEADERS
            _check_arity(csv_head, table)
            self.output.print_csv(csv_head, table)
        else:
            self.output.print_table(headers, table)

    def render_raw(self, document: Any, single: bool = False, text_as_json: bool = False) -> None:
        """Render a parsed JSON document with no static type.

        Args:
            document: The parsed response.
            single: Treat the document as one record (create/update
                results) instead of looking for a record array.
            text_as_json: Print JSON for ``--output text`` too.
        """
        if text_as_json and self.format == OutputFormat.TEXT:
            self._write_json(document)
            return
        if self._write_structured(document):
            return

        array = None if single else locate_record_array(document)
        if array is not None:
            records = [item for item in array if isinstance(item, dict)]
            headers = derive_headers(records)
            rows = [record_to_row(record, headers) for record in records]
            if not headers:
                return
            if self.format == OutputFormat.CSV:
                self.output.print_csv(headers, rows)
            else:
                self.output.print_table(headers, rows)
            return

        record = extract_record(document)
        if record is None:
            if document is not None:
                self.output.print_data(format_cell(document))
            return
        self.render_record(record)

    def render_value(self, value: Any) -> None:
        """Render an arbitrary value (status objects, config dumps)."""
        if isinstance(value, (list, tuple)):
            self.render_list(value)
        elif isinstance(value, (dict, BaseModel)):
            self.render_record(value if isinstance(value, Record) else to_jsonable(value))
        else:
            self.render_raw(value)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _write_structured(self, tree: Any) -> bool:
        if self.format == OutputFormat.JSON:
            self._write_json(tree)
            return True
        if self.format == OutputFormat.YAML:
            self.output.print_data(dump_yaml(tree))
            return True
        return False

    def _write_json(self, tree: Any) -> None:
        if self.query is None:
            self.output.print_data(dump_json(tree))
            return
        results = list(compile_query(self.query).apply(tree))
        for result in results:
            self.output.print_data(dump_json(result))


def _derive_table(items: Sequence[Any]) -> tuple[list[str], list[list[str]]]:
    if items and all(isinstance(item, Record) for item in items):
        headers = type(items[0]).headers()
        return headers, [[value for _, value in item.to_pairs()] for item in items]
    records = [to_jsonable(item) for item in items]
    records = [record for record in records if isinstance(record, dict)]
    headers = derive_headers(records)
    return headers, [record_to_row(record, headers) for record in records]


def _check_arity(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    for row in rows:
        if len(row) != len(headers):
            raise ConfigurationError(
                f"row has {len(row)} cells but there are {len(headers)} headers: {list(row)!r}"
            )
