"""Tests for the output renderer (text, JSON, YAML and CSV)."""

from __future__ import annotations

import csv
import io
import json

import pytest
import yaml

from twenty_cli.exceptions import ConfigurationError, QueryError
from twenty_cli.models import Person, Task
from twenty_cli.output import OutputFormat
from twenty_cli.render import Renderer, record_pairs, to_jsonable


TASKS = [
    Task.model_validate({"id": "1", "title": "Call, then write", "status": "TODO"}),
    Task.model_validate({"id": "2", "title": 'Say "hi"\nback', "status": "DONE"}),
]


def _row(task: Task) -> list[str]:
    return [task.id, task.title]


class TestJSON:
    def test_typed_list_keeps_only_received_fields(self, capsys):
        items = [Task.model_validate({"id": "1"}), Task.model_validate({"id": "2"})]
        Renderer(OutputFormat.JSON).render_list(items, ["ID"], lambda t: [t.id])
        assert json.loads(capsys.readouterr().out) == [{"id": "1"}, {"id": "2"}]

    def test_json_is_pretty(self, capsys):
        Renderer(OutputFormat.JSON).render_raw({"a": 1})
        assert capsys.readouterr().out == '{\n  "a": 1\n}\n'

    def test_query_string_result_is_quoted(self, capsys):
        Renderer(OutputFormat.JSON, ".id").render_raw({"id": "42"})
        assert capsys.readouterr().out == '"42"\n'

    def test_query_multiple_results(self, capsys):
        Renderer(OutputFormat.JSON, ".[].name").render_raw([{"name": "A"}, {"name": "B"}])
        assert capsys.readouterr().out == '"A"\n"B"\n'

    def test_query_error_writes_nothing(self, capsys):
        renderer = Renderer(OutputFormat.JSON, ".[] | .a")
        with pytest.raises(QueryError):
            renderer.render_raw([{"a": 1}, 5])
        assert capsys.readouterr().out == ""

    def test_query_applies_to_typed_records(self, capsys):
        Renderer(OutputFormat.JSON, ".[1].status").render_list(TASKS, ["ID"], lambda t: [t.id])
        assert capsys.readouterr().out == '"DONE"\n'

    def test_invalid_escape_is_query_error(self, capsys):
        with pytest.raises(QueryError):
            Renderer(OutputFormat.JSON, r'.["\q"]').render_raw({"a": 1})
        assert capsys.readouterr().out == ""

    def test_query_ignored_for_yaml(self, capsys):
        Renderer(OutputFormat.YAML, ".id").render_raw({"id": "1", "n": 2})
        assert yaml.safe_load(capsys.readouterr().out) == {"id": "1", "n": 2}


class TestYAML:
    def test_two_space_indent(self, capsys):
        Renderer(OutputFormat.YAML).render_raw({"a": {"b": [1]}})
        assert capsys.readouterr().out == "a:\n  b:\n  - 1\n"

    def test_records(self, capsys):
        Renderer(OutputFormat.YAML).render_list(TASKS[:1], ["ID"], lambda t: [t.id])
        loaded = yaml.safe_load(capsys.readouterr().out)
        assert loaded == [{"id": "1", "title": "Call, then write", "status": "TODO"}]


class TestCSV:
    def test_round_trip_with_special_characters(self, capsys):
        Renderer(OutputFormat.CSV).render_list(TASKS, ["id", "title"], _row)
        rows = list(csv.reader(io.StringIO(capsys.readouterr().out)))
        assert rows == [["id", "title"], ["1", "Call, then write"], ["2", 'Say "hi"\nback']]

    def test_csv_mapping_preferred(self, capsys):
        Renderer(OutputFormat.CSV).render_list(
            TASKS,
            ["ID"],
            lambda t: [t.id],
            csv_headers=["id", "status"],
            csv_row=lambda t: [t.id, t.status],
        )
        assert capsys.readouterr().out == "id,status\n1,TODO\n2,DONE\n"

    def test_raw_headers_sorted(self, capsys):
        Renderer(OutputFormat.CSV).render_raw({"data": {"x": [{"b": 1, "a": 2}, {"c": True}]}})
        assert capsys.readouterr().out == "a,b,c\n2,1,\n,,true\n"

    def test_typed_fallback_uses_declaration_order(self, capsys):
        Renderer(OutputFormat.CSV).render_list([TASKS[0]])
        header = capsys.readouterr().out.splitlines()[0]
        assert header == "id,title,status,dueAt,assigneeId,createdAt,updatedAt"

    def test_arity_mismatch(self):
        renderer = Renderer(OutputFormat.CSV)
        with pytest.raises(ConfigurationError):
            renderer.render_list(TASKS, ["id", "title", "extra"], _row)

    def test_single_record_field_value(self, capsys):
        Renderer(OutputFormat.CSV).render_record({"b": 2, "a": "x"})
        assert capsys.readouterr().out == "field,value\na,x\nb,2\n"


class TestText:
    def test_aligned_columns(self, capsys):
        Renderer(OutputFormat.TEXT).render_list(
            TASKS[:1], ["ID", "STATUS"], lambda t: [t.id, t.status]
        )
        assert capsys.readouterr().out == "ID  STATUS\n1   TODO\n"

    def test_single_record_pairs_without_header(self, capsys):
        person = Person.model_validate(
            {"id": "p1", "name": {"firstName": "Ada", "lastName": "Lovelace"}, "city": "London"}
        )
        Renderer(OutputFormat.TEXT).render_record(person, record_pairs)
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["id", "p1"]
        assert lines[1].split() == ["name", "Ada", "Lovelace"]
        assert any(line.split() == ["city", "London"] for line in lines)

    def test_raw_single_record(self, capsys):
        Renderer(OutputFormat.TEXT).render_raw({"data": {"createTask": {"id": "1"}}}, single=True)
        assert capsys.readouterr().out.split() == ["id", "1"]

    def test_text_as_json(self, capsys):
        Renderer(OutputFormat.TEXT).render_raw({"ok": True}, text_as_json=True)
        assert json.loads(capsys.readouterr().out) == {"ok": True}

    def test_empty_list_prints_header(self, capsys):
        Renderer(OutputFormat.TEXT).render_list([], ["ID", "TITLE"], _row)
        assert capsys.readouterr().out == "ID  TITLE\n"


class TestHelpers:
    def test_to_jsonable_nested(self):
        assert to_jsonable({"items": [Task.model_validate({"id": "1"})]}) == {"items": [{"id": "1"}]}

    def test_record_pairs_plain_dict(self):
        assert record_pairs({"b": None, "a": 1}) == [["a", "1"], ["b", ""]]
