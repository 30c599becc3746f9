"""REST passthrough -- call any API route directly.

Provides the ``twenty rest`` sub-command group for endpoints the resource
commands do not cover::

    twenty rest get /opportunities --param limit=5
    twenty rest post companies -d '{"name": "Acme"}'
    twenty rest request PATCH /people/123 -f payload.json

Paths without a known API prefix are sent under ``/rest``. The response
is rendered as raw JSON; ``--output text`` prints JSON as well, while
``yaml`` and ``csv`` go through the generic record extraction.
"""

from __future__ import annotations

from typing import Any, List, Optional

import typer

from twenty_cli.builder.options import parse_json, parse_params, read_json_input
from twenty_cli.exceptions import InvalidUsageError
from twenty_cli.runtime import current_runtime

rest_app = typer.Typer(no_args_is_help=True)

API_PREFIXES = ("/rest", "/graphql", "/metadata")
METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

_DATA_HELP = "JSON request body."
_FILE_HELP = "Read the JSON request body from a file ('-' for stdin)."
_PARAM_HELP = "Query parameter as key=value (repeatable)."


def normalize_path(path: str) -> str:
    """Add a leading ``/`` and the ``/rest`` prefix where missing."""
    if not path:
        return "/rest"
    if not path.startswith("/"):
        path = "/" + path
    if not path.startswith(API_PREFIXES):
        path = "/rest" + path
    return path


def run_request(
    method: str,
    path: str,
    data: Optional[str] = None,
    file: Optional[str] = None,
    param: Optional[List[str]] = None,
) -> None:
    """Send one request and render the response."""
    method = method.upper()
    if method not in METHODS:
        raise InvalidUsageError(f"unsupported method {method!r}; use one of {', '.join(METHODS)}")

    text = read_json_input(data, file)
    body: Any = parse_json(text, "request body") if text is not None else None
    params = parse_params(param) or None

    runtime = current_runtime()
    with runtime.rest_client() as client:
        document = client.do_raw(method, normalize_path(path), body=body, params=params)
    runtime.renderer().render_raw(document, text_as_json=True)


@rest_app.command("request")
def rest_request(
    method: str = typer.Argument(help="HTTP method: GET, POST, PUT, PATCH or DELETE."),
    path: str = typer.Argument(help="API path, e.g. /people or /rest/people/ID."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
    file: Optional[str] = typer.Option(None, "--file", "-f", help=_FILE_HELP),
    param: Optional[List[str]] = typer.Option(None, "--param", help=_PARAM_HELP),
) -> None:
    """Send a request with any method.

    Example::

        twenty rest request PATCH /people/123 -d '{"city": "Paris"}'
    """
    run_request(method, path, data, file, param)


@rest_app.command("get")
def rest_get(
    path: str = typer.Argument(help="API path."),
    param: Optional[List[str]] = typer.Option(None, "--param", help=_PARAM_HELP),
) -> None:
    """Send a GET request."""
    run_request("GET", path, param=param)


@rest_app.command("post")
def rest_post(
    path: str = typer.Argument(help="API path."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
    file: Optional[str] = typer.Option(None, "--file", "-f", help=_FILE_HELP),
    param: Optional[List[str]] = typer.Option(None, "--param", help=_PARAM_HELP),
) -> None:
    """Send a POST request."""
    run_request("POST", path, data, file, param)


@rest_app.command("patch")
def rest_patch(
    path: str = typer.Argument(help="API path."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help=_DATA_HELP),
    file: Optional[str] = typer.Option(None, "--file", "-f", help=_FILE_HELP),
    param: Optional[List[str]] = typer.Option(None, "--param", help=_PARAM_HELP),
) -> None:
    """Send a PATCH request."""
    run_request("PATCH", path, data, file, param)


@rest_app.command("delete")
def rest_delete(
    path: str = typer.Argument(help="API path."),
    param: Optional[List[str]] = typer.Option(None, "--param", help=_PARAM_HELP),
) -> None:
    """Send a DELETE request."""
    run_request("DELETE", path, param=param)
