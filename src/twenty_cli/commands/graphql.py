"""GraphQL passthrough.

``twenty graphql query`` and ``twenty graphql mutate`` POST a document to
``/graphql`` (or ``/metadata`` with ``--endpoint metadata``)::

    twenty graphql query --gql '{ companies { edges { node { id name } } } }'
    twenty graphql mutate -f create.graphql --variables '{"name": "Acme"}'

``twenty graphql schema`` fetches the schema through introspection.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import typer

from twenty_cli.builder.options import parse_json_object, read_json_input
from twenty_cli.exceptions import InvalidUsageError, MissingPayloadError
from twenty_cli.runtime import current_runtime

graphql_app = typer.Typer(no_args_is_help=True)

INTROSPECTION_QUERY = """
query IntrospectionQuery {
  __schema {
    queryType { name }
    mutationType { name }
    subscriptionType { name }
    types { ...FullType }
    directives {
      name
      description
      locations
      args { ...InputValue }
    }
  }
}

fragment FullType on __Type {
  kind
  name
  description
  fields(includeDeprecated: true) {
    name
    description
    args { ...InputValue }
    type { ...TypeRef }
    isDeprecated
    deprecationReason
  }
  inputFields { ...InputValue }
  interfaces { ...TypeRef }
  enumValues(includeDeprecated: true) {
    name
    description
    isDeprecated
    deprecationReason
  }
  possibleTypes { ...TypeRef }
}

fragment InputValue on __InputValue {
  name
  description
  type { ...TypeRef }
  defaultValue
}

fragment TypeRef on __Type {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType { kind name }
      }
    }
  }
}
"""

_ENDPOINT_HELP = "GraphQL endpoint: graphql or metadata."


def normalize_endpoint(endpoint: Optional[str]) -> str:
    endpoint = (endpoint or "").strip() or "graphql"
    return endpoint if endpoint.startswith("/") else "/" + endpoint


def read_query(gql: Optional[str], file: Optional[str]) -> str:
    """Return the GraphQL document from ``--file`` or ``--gql``.

    Raises:
        MissingPayloadError: If neither supplies a query.
        InvalidUsageError: If the file cannot be read.
    """
    text = gql
    if file:
        if file == "-":
            text = sys.stdin.read()
        else:
            try:
                text = Path(file).expanduser().read_text(encoding="utf-8")
            except OSError as exc:
                raise InvalidUsageError(f"read query file {file}: {exc}") from exc
    if not text or not text.strip():
        raise MissingPayloadError("missing GraphQL query; use --gql or --file")
    return text.strip()


def post_document(payload: dict[str, Any], endpoint: Optional[str]) -> None:
    runtime = current_runtime()
    with runtime.rest_client() as client:
        document = client.do_raw("POST", normalize_endpoint(endpoint), body=payload)
    runtime.renderer().render_raw(document, text_as_json=True)


def run_graphql(
    gql: Optional[str],
    file: Optional[str],
    variables: Optional[str],
    variables_file: Optional[str],
    operation: Optional[str],
    endpoint: Optional[str],
) -> None:
    payload: dict[str, Any] = {"query": read_query(gql, file)}
    variables_text = read_json_input(variables, variables_file)
    if variables_text is not None:
        values = parse_json_object(variables_text, "variables")
        if values:
            payload["variables"] = values
    if operation:
        payload["operationName"] = operation
    post_document(payload, endpoint)


@graphql_app.command("query")
def graphql_query(
    gql: Optional[str] = typer.Option(None, "--gql", "-q", help="GraphQL query string."),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Query file ('-' for stdin)."),
    variables: Optional[str] = typer.Option(None, "--variables", help="Variables as JSON."),
    variables_file: Optional[str] = typer.Option(
        None, "--variables-file", help="Variables JSON file ('-' for stdin)."
    ),
    operation: Optional[str] = typer.Option(None, "--operation", help="Operation name."),
    endpoint: str = typer.Option("graphql", "--endpoint", help=_ENDPOINT_HELP),
) -> None:
    """Run a GraphQL query."""
    run_graphql(gql, file, variables, variables_file, operation, endpoint)


@graphql_app.command("mutate")
def graphql_mutate(
    gql: Optional[str] = typer.Option(None, "--gql", "-q", help="GraphQL mutation string."),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Mutation file ('-' for stdin)."),
    variables: Optional[str] = typer.Option(None, "--variables", help="Variables as JSON."),
    variables_file: Optional[str] = typer.Option(
        None, "--variables-file", help="Variables JSON file ('-' for stdin)."
    ),
    operation: Optional[str] = typer.Option(None, "--operation", help="Operation name."),
    endpoint: str = typer.Option("graphql", "--endpoint", help=_ENDPOINT_HELP),
) -> None:
    """Run a GraphQL mutation."""
    run_graphql(gql, file, variables, variables_file, operation, endpoint)


@graphql_app.command("schema")
def graphql_schema(
    endpoint: str = typer.Option("graphql", "--endpoint", help=_ENDPOINT_HELP),
) -> None:
    """Fetch the GraphQL schema via introspection."""
    post_document({"query": INTROSPECTION_QUERY}, endpoint)
