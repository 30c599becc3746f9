"""Tests for the REST transport: headers, retries and error mapping."""

from __future__ import annotations

import httpx
import pytest

from twenty_cli.client.rest import RestClient, _backoff, _retry_after
from twenty_cli.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TransportError,
)


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr("twenty_cli.client.rest.time.sleep", delays.append)
    return delays


def _client(fake_api, **kwargs) -> RestClient:
    return RestClient("https://crm.test/", "secret", transport=fake_api.transport, **kwargs)


class TestRequests:
    def test_headers_and_url(self, fake_api):
        fake_api.add("GET", "/rest/tasks", {"data": {"tasks": []}})
        with _client(fake_api) as client:
            assert client.get("/rest/tasks", params=[("limit", "5")]) == {"data": {"tasks": []}}
        (request,) = fake_api.requests
        assert str(request.url) == "https://crm.test/rest/tasks?limit=5"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"].startswith("twenty-cli/")

    def test_json_body(self, fake_api):
        fake_api.add("POST", "/rest/tasks", {"ok": True})
        with _client(fake_api) as client:
            client.post("/rest/tasks", json_body={"title": "x"})
        assert fake_api.bodies() == [{"title": "x"}]

    def test_empty_body_is_none(self, fake_api):
        fake_api.add("DELETE", "/rest/tasks/1", status=204)
        with _client(fake_api) as client:
            assert client.delete("/rest/tasks/1") is None

    def test_control_characters_tolerated(self, fake_api):
        reply = httpx.Response(200, content=b'{"body": "line\tone"}')
        fake_api.add("GET", "/rest/notes/1", reply=reply)
        with _client(fake_api) as client:
            assert client.get("/rest/notes/1") == {"body": "line\tone"}

    def test_invalid_json(self, fake_api):
        fake_api.add("GET", "/rest/x", reply=httpx.Response(200, content=b"<html>"))
        with _client(fake_api) as client, pytest.raises(TransportError, match="invalid JSON"):
            client.get("/rest/x")

    def test_do_raw(self, fake_api):
        fake_api.add("PATCH", "/rest/people/1", {"id": "1"})
        with _client(fake_api) as client:
            assert client.do_raw("patch", "/rest/people/1", body={"city": "Oslo"}) == {"id": "1"}
        assert fake_api.requests[0].method == "PATCH"


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status, exc_type, exit_code",
        [
            (400, TransportError, 1),
            (401, AuthError, 3),
            (403, AuthError, 3),
            (404, NotFoundError, 4),
            (429, RateLimitedError, 5),
            (500, ServerError, 5),
        ],
    )
    def test_status_codes(self, fake_api, status, exc_type, exit_code):
        fake_api.add("GET", "/rest/x", {"message": "nope"}, status=status)
        with _client(fake_api, no_retry=True) as client, pytest.raises(exc_type) as excinfo:
            client.get("/rest/x")
        assert type(excinfo.value) is exc_type
        assert excinfo.value.status_code == status
        assert excinfo.value.exit_code == exit_code
        assert str(excinfo.value) == f"HTTP {status}: nope"

    def test_error_envelope_code(self, fake_api):
        body = {"error": {"code": "BAD_REQUEST", "message": "limit too high"}}
        fake_api.add("GET", "/rest/x", body, status=400)
        with _client(fake_api) as client, pytest.raises(TransportError) as excinfo:
            client.get("/rest/x")
        assert str(excinfo.value) == "HTTP 400 BAD_REQUEST: limit too high"
        assert excinfo.value.code == "BAD_REQUEST"
        assert excinfo.value.body == body

    def test_messages_list(self, fake_api):
        fake_api.add("GET", "/rest/x", {"messages": ["a", "b"]}, status=400)
        with _client(fake_api) as client, pytest.raises(TransportError, match="a; b"):
            client.get("/rest/x")

    def test_with_context_keeps_class(self):
        err = NotFoundError("HTTP 404", status_code=404, body={"x": 1})
        wrapped = err.with_context("failed to get")
        assert type(wrapped) is NotFoundError
        assert str(wrapped) == "failed to get: HTTP 404"
        assert wrapped.status_code == 404
        assert wrapped.body == {"x": 1}


class TestRetry:
    def test_retries_retryable_status(self, fake_api, _no_sleep):
        fake_api.add("GET", "/rest/x", {"message": "busy"}, status=503)
        fake_api.add("GET", "/rest/x", {"ok": True})
        with _client(fake_api, max_retries=3) as client:
            assert client.get("/rest/x") == {"ok": True}
        assert len(fake_api.requests) == 2
        assert _no_sleep == [1.0]

    def test_gives_up_after_max_retries(self, fake_api, _no_sleep):
        fake_api.add("GET", "/rest/x", {"message": "busy"}, status=502)
        with _client(fake_api, max_retries=2) as client, pytest.raises(ServerError):
            client.get("/rest/x")
        assert len(fake_api.requests) == 3
        assert _no_sleep == [1.0, 2.0]

    def test_retry_after_header(self, fake_api, _no_sleep):
        fake_api.add("GET", "/rest/x", {"message": "slow down"}, status=429, headers={"Retry-After": "7"})
        fake_api.add("GET", "/rest/x", {"ok": True})
        with _client(fake_api) as client:
            client.get("/rest/x")
        assert _no_sleep == [7.0]

    def test_no_retry(self, fake_api, _no_sleep):
        fake_api.add("GET", "/rest/x", {"message": "busy"}, status=503)
        with _client(fake_api, no_retry=True) as client, pytest.raises(ServerError):
            client.get("/rest/x")
        assert len(fake_api.requests) == 1
        assert _no_sleep == []

    def test_client_errors_not_retried(self, fake_api, _no_sleep):
        fake_api.add("GET", "/rest/x", {"message": "bad"}, status=400)
        with _client(fake_api) as client, pytest.raises(TransportError):
            client.get("/rest/x")
        assert len(fake_api.requests) == 1

    def test_network_error(self, _no_sleep):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        transport = httpx.MockTransport(refuse)
        with RestClient("https://crm.test", "t", max_retries=1, transport=transport) as client:
            with pytest.raises(ConnectionError_, match="after 2 attempt"):
                client.get("/rest/x")
        assert _no_sleep == [1.0]


class TestBackoff:
    def test_exponential_and_capped(self):
        assert [_backoff(n) for n in range(6)] == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0]

    def test_retry_after_parsing(self):
        assert _retry_after(httpx.Response(429, headers={"Retry-After": "3"})) == 3.0
        assert _retry_after(httpx.Response(429, headers={"Retry-After": "soon"})) is None
        assert _retry_after(httpx.Response(429)) is None
