"""Tests for ResourceEndpoint envelope parsing against a fake API."""

from __future__ import annotations

import pytest

from twenty_cli.client.resources import ResourceEndpoint
from twenty_cli.client.rest import RestClient
from twenty_cli.exceptions import TransportError, UnexpectedResponseError
from twenty_cli.models import ListQueryOptions, Person, Task, Webhook

TASKS = ResourceEndpoint(Task, "tasks", "task")


def _client(fake_api) -> RestClient:
    return RestClient("https://crm.test", "t", no_retry=True, transport=fake_api.transport)


class TestParsePage:
    def test_rest_envelope(self):
        page = TASKS.parse_page(
            {
                "data": {"tasks": [{"id": "1", "title": "Call"}]},
                "totalCount": 42,
                "pageInfo": {"hasNextPage": True, "endCursor": "c1"},
            }
        )
        assert [task.title for task in page.data] == ["Call"]
        assert page.total_count == 42
        assert page.page_info.has_next_page is True
        assert page.page_info.end_cursor == "c1"

    def test_bare_array(self):
        page = ResourceEndpoint(Webhook, "webhooks", "webhook").parse_page(
            [{"id": "w1", "operation": ["*.created", "*.updated"]}, "junk"]
        )
        assert [hook.id for hook in page.data] == ["w1"]
        assert page.data[0].operation == "*.created,*.updated"
        assert page.total_count == 1
        assert page.page_info is None

    def test_unexpected_key_falls_back(self):
        page = TASKS.parse_page({"data": {"items": [{"id": "1"}]}})
        assert [task.id for task in page.data] == ["1"]

    def test_unknown_fields_kept(self):
        page = TASKS.parse_page({"data": {"tasks": [{"id": "1", "position": 3}]}})
        assert page.data[0].model_extra == {"position": 3}


class TestCalls:
    def test_list_sends_params(self, fake_api):
        fake_api.add("GET", "/rest/tasks", {"data": {"tasks": []}})
        with _client(fake_api) as client:
            TASKS.list(client, ListQueryOptions(limit=2, cursor="c9"))
        assert fake_api.requests[0].url.params.multi_items() == [("limit", "2"), ("starting_after", "c9")]

    def test_unpaginated_list_sends_no_params(self, fake_api):
        fake_api.add("GET", "/rest/webhooks", [])
        with _client(fake_api) as client:
            ResourceEndpoint(Webhook, "webhooks", "webhook", paginated=False).list(client, ListQueryOptions())
        assert fake_api.requests[0].url.query == b""

    def test_get_unwraps_singular(self, fake_api):
        body = {"data": {"person": {"id": "p1", "name": {"firstName": "Ada", "lastName": "Lovelace"}}}}
        fake_api.add("GET", "/rest/people/p1", body)
        with _client(fake_api) as client:
            person = ResourceEndpoint(Person, "people", "person").get(client, "p1")
        assert str(person.name) == "Ada Lovelace"

    def test_create_unwraps(self, fake_api):
        fake_api.add("POST", "/rest/tasks", {"data": {"createTask": {"id": "9", "title": "New"}}})
        with _client(fake_api) as client:
            task = TASKS.create(client, {"title": "New"})
        assert task.id == "9"
        assert fake_api.bodies() == [{"title": "New"}]

    def test_update_unwraps(self, fake_api):
        fake_api.add("PATCH", "/rest/tasks/9", {"data": {"updateTask": {"id": "9", "status": "DONE"}}})
        with _client(fake_api) as client:
            task = TASKS.update(client, "9", {"status": "DONE"})
        assert task.status == "DONE"

    def test_malformed_record_is_transport_error(self, fake_api):
        body = {"data": {"people": [{"id": "p1", "name": None}]}}
        fake_api.add("GET", "/rest/people", body)
        with _client(fake_api) as client, pytest.raises(UnexpectedResponseError) as excinfo:
            ResourceEndpoint(Person, "people", "person").list(client, ListQueryOptions())
        assert isinstance(excinfo.value, TransportError)
        assert str(excinfo.value).startswith("unexpected person p1 in response: name:")
        assert excinfo.value.body == body

    def test_malformed_single_record(self, fake_api):
        fake_api.add("GET", "/rest/tasks/9", {"data": {"task": {"id": "9", "dueAt": "soon"}}})
        with _client(fake_api) as client, pytest.raises(UnexpectedResponseError, match="dueAt"):
            TASKS.get(client, "9")

    def test_item_path_is_quoted(self):
        assert TASKS.item_path("a/b c") == "/rest/tasks/a%2Fb%20c"
