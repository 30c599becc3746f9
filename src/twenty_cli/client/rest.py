"""Synchronous REST client for the Twenty API.

This module provides :class:`RestClient`, the blocking HTTP client used by
every command. It wraps :class:`httpx.Client` and layers on:

- **Bearer auth** -- the API token is sent as ``Authorization: Bearer``.
- **Retry with backoff** -- retries on HTTP 429/502/503/504 and network
  errors with exponential delay (1 s, 2 s, 4 s, ... capped at 30 s),
  honouring a ``Retry-After`` header given in seconds. ``--no-retry``
  turns this off.
- **Error mapping** -- failed responses become typed
  :class:`~twenty_cli.exceptions.TransportError` subclasses carrying the
  status code, the parsed body and the API's error code.
- **Lenient JSON** -- response bodies are parsed with ``strict=False`` so
  that raw control characters inside rich-text fields do not break
  decoding.
"""

from __future__ import annotations

import json
import time
from typing import Any, Optional

import httpx

from twenty_cli import __version__
from twenty_cli.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TransportError,
)
from twenty_cli.output import get_output

RETRYABLE_STATUS = frozenset({429, 502, 503, 504})
MAX_BACKOFF = 30.0


class RestClient:
    """Synchronous HTTP client for the Twenty REST and GraphQL endpoints.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        base_url: Workspace API root, e.g. ``https://api.twenty.com``.
        token: API token sent as a bearer credential.
        timeout: Per-request timeout in seconds.
        max_retries: Extra attempts after a retryable failure.
        no_retry: Disable retrying entirely.
        transport: Optional httpx transport (tests use
            :class:`httpx.MockTransport`).

    Example::

        with RestClient("https://api.twenty.com", token) as client:
            doc = client.get("/rest/tasks", params={"limit": 5})
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30,
        max_retries: int = 3,
        no_retry: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._max_retries = 0 if no_retry else max(0, max_retries)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> RestClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/json",
                "User-Agent": f"twenty-cli/{__version__}",
            },
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Any] = None,
        json_body: Optional[Any] = None,
    ) -> Any:
        """Send a request and return the parsed JSON body.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE).
            path: URL path appended to the base URL.
            params: Query parameters (mapping or list of pairs).
            json_body: JSON-serialisable request body.

        Returns:
            The decoded JSON document, or ``None`` for an empty body.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            RateLimitedError: On 429 after all retries.
            ServerError: On 5xx after all retries.
            TransportError: On any other 4xx.
            ConnectionError_: On network / timeout errors after all retries.
        """
        response = self._execute_with_retry(method.upper(), path, params, json_body)
        self._map_response_error(response)
        try:
            return _decode(response)
        except ValueError as exc:
            raise TransportError(
                f"invalid JSON in response to {method.upper()} {path}: {exc}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

    def do_raw(self, method: str, path: str, body: Optional[Any] = None, params: Optional[Any] = None) -> Any:
        """Escape hatch used by the ``rest`` and ``graphql`` passthrough commands."""
        return self.request(method, path, params=params, json_body=body)

    def get(self, path: str, **kwargs: Any) -> Any:
        """Send a GET request. See :meth:`request`."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        """Send a POST request. See :meth:`request`."""
        return self.request("POST", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        """Send a PATCH request. See :meth:`request`."""
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        """Send a DELETE request. See :meth:`request`."""
        return self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _execute_with_retry(
        self,
        method: str,
        path: str,
        params: Optional[Any],
        json_body: Optional[Any],
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry."""
        assert self._client is not None, "Client not initialised -- use as context manager"

        output = get_output()
        max_retries = self._max_retries

        for attempt in range(max_retries + 1):
            output.debug(f"{method} {self._base_url}{path}")
            try:
                response = self._client.request(
                    method,
                    path,
                    params=params,
                    json=json_body,
                )
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = _backoff(attempt)
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay:g}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"connection to {self._base_url} failed after {attempt + 1} attempt(s): {exc}"
                ) from exc

            output.debug(f"HTTP {response.status_code} from {method} {path}")
            if response.status_code in RETRYABLE_STATUS and attempt < max_retries:
                delay = _retry_after(response) or _backoff(attempt)
                output.debug(
                    f"HTTP {response.status_code}, retrying in {delay:g}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)
                continue
            return response

        raise AssertionError("unreachable")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            body: Any = _decode(response)
        except ValueError:
            body = response.text
        code, message = _error_detail(body)
        if not message and isinstance(body, str):
            message = body.strip()[:200]

        full_msg = f"HTTP {status}"
        if code:
            full_msg += f" {code}"
        if message:
            full_msg += f": {message}"

        exc_type: type[TransportError]
        if status in (401, 403):
            exc_type = AuthError
        elif status == 404:
            exc_type = NotFoundError
        elif status == 429:
            exc_type = RateLimitedError
        elif status >= 500:
            exc_type = ServerError
        else:
            exc_type = TransportError
        raise exc_type(full_msg, status_code=status, body=body, code=code)


def _decode(response: httpx.Response) -> Any:
    text = response.text
    if not text.strip():
        return None
    return json.loads(text, strict=False)


def _error_detail(body: Any) -> tuple[Optional[str], str]:
    """Pull ``(code, message)`` out of the API's error envelopes."""
    if not isinstance(body, dict):
        return None, ""
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("code"), str(error.get("message") or "")
    messages = body.get("messages")
    if isinstance(messages, list) and messages:
        return None, "; ".join(str(m) for m in messages)
    message = body.get("message")
    if isinstance(error, str) and not message:
        return None, error
    return None, str(message or "")


def _backoff(attempt: int) -> float:
    return min(float(2**attempt), MAX_BACKOFF)


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After", "")
    try:
        seconds = float(value)
    except ValueError:
        return None
    if seconds <= 0:
        return None
    return min(seconds, MAX_BACKOFF)
