"""Typer application and CLI entry point for twenty.

This module wires together the top-level Typer application: the resource
groups built by :mod:`twenty_cli.builder` (``tasks``, ``people``,
``companies``, ``opportunities``, ``notes``, ``webhooks``,
``attachments``, ``favorites``), the generic ``records`` group, the
``rest`` and ``graphql`` passthrough groups, and the ``auth`` and ``config``
groups.

The root callback resolves global flags, environment variables and the
config file into a :class:`~twenty_cli.runtime.Runtime` stored on the Click
context, and installs the :class:`~twenty_cli.output.OutputManager`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~twenty_cli.exceptions.TwentyError` becomes an
``Error: ...`` line on stderr and the error's exit code; any other
exception is written to a crash log under the data directory.

See Also:
    :mod:`twenty_cli.config`: Configuration and token resolution.
    :mod:`twenty_cli.render`: Output formats selected by ``--output``.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from twenty_cli import __version__
from twenty_cli.commands import (
    attachments,
    companies,
    favorites,
    notes,
    opportunities,
    people,
    records,
    tasks,
    webhooks,
)
from twenty_cli.commands.auth import auth_app
from twenty_cli.commands.config import config_app
from twenty_cli.commands.graphql import graphql_app
from twenty_cli.commands.rest import rest_app
from twenty_cli.exceptions import InvalidUsageError
from twenty_cli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from twenty_cli.output import OutputFormat
from twenty_cli.runtime import Runtime


app = typer.Typer(
    name="twenty",
    help="Command-line client for the Twenty CRM API.",
    no_args_is_help=True,
    add_completion=True,
)

# ------------------------------------------------------------------ #
# Command groups
# ------------------------------------------------------------------ #

app.add_typer(tasks.app, name="tasks", help="Manage tasks.")
app.add_typer(people.app, name="people", help="Manage people.")
app.add_typer(companies.app, name="companies", help="Manage companies.")
app.add_typer(opportunities.app, name="opportunities", help="Manage opportunities.")
app.add_typer(notes.app, name="notes", help="Manage notes.")
app.add_typer(webhooks.app, name="webhooks", help="Manage webhooks.")
app.add_typer(attachments.app, name="attachments", help="Manage attachments.")
app.add_typer(favorites.app, name="favorites", help="Manage favorites.")
app.add_typer(records.app, name="records", help="Manage records of any object.")
app.add_typer(rest_app, name="rest", help="Call REST API endpoints directly.")
app.add_typer(graphql_app, name="graphql", help="Run GraphQL queries and mutations.")
app.add_typer(auth_app, name="auth", help="Authentication management.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"twenty {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format: text, json, yaml or csv."
    ),
    query: Optional[str] = typer.Option(
        None, "--query", "-q", help="jq-style expression applied to JSON output."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Twenty API base URL."
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Print debug diagnostics to stderr."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", help="Suppress non-essential output."
    ),
    no_retry: bool = typer.Option(
        False, "--no-retry", help="Do not retry failed requests."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~twenty_cli.output.OutputManager` and
    fills the invocation's :class:`~twenty_cli.runtime.Runtime`. A runtime
    passed in as the context object keeps its token and transport.

    Raises:
        InvalidUsageError: If the effective output format is unknown.
    """
    from twenty_cli.config import resolve_config
    from twenty_cli.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=debug))
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    resolved = resolve_config(profile, base_url, output)
    try:
        output_format = OutputFormat(resolved.output.lower())
    except ValueError:
        choices = ", ".join(fmt.value for fmt in OutputFormat)
        raise InvalidUsageError(
            f"invalid output format {resolved.output!r}; use one of {choices}"
        ) from None

    runtime = ctx.ensure_object(Runtime)
    runtime.output_format = output_format
    runtime.query = query
    runtime.profile = resolved.profile
    runtime.base_url = resolved.base_url
    runtime.timeout = resolved.config.request.timeout
    runtime.max_retries = resolved.config.request.max_retries
    runtime.no_retry = no_retry or runtime.no_retry
    runtime.debug = debug
    if runtime.token_source is None:
        runtime.token_source = resolved.config.token_source


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from twenty_cli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``twenty`` console script.

    Unhandled :class:`~twenty_cli.exceptions.TwentyError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from twenty_cli.exceptions import TwentyError
        from twenty_cli.output import error

        if isinstance(exc, TwentyError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
