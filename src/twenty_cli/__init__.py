"""twenty_cli -- command-line client for the Twenty CRM API.

Each CRM resource (tasks, people, companies, notes, webhooks, attachments,
favorites) gets the same ``list`` / ``get`` / ``create`` / ``update`` /
``delete`` commands. They are assembled by a small builder layer from one
declarative config per resource, so the resource modules only describe
columns and endpoints.

Typical workflow::

    twenty auth login --token $TOKEN --base-url https://crm.example.com
    twenty people list --all --output csv > people.csv
    twenty tasks get 3f2a... --output json --query '.title'

Modules:
    app: Typer application and CLI entry point.
    builder: Generic resource-command factories and pagination.
    client: REST transport and typed resource endpoints.
    render: Text, JSON, YAML and CSV rendering of records and raw JSON.
    query: jq-style query evaluation for ``--query``.
    records: Record-array extraction and cell formatting.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and credential resolution.
    output: stdout/stderr discipline with Rich support.
"""

__version__ = "0.1.0"
