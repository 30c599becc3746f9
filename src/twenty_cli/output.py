"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (tables, JSON, YAML, CSV). This is what
  downstream tools pipe and parse.
* **stderr** -- all diagnostics (progress, status, warnings, errors).
  Never contaminates the data stream.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding the Rich stderr
   console and the quiet/verbose flags. Created once in
   :func:`~twenty_cli.app.main_callback` and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``
   instance so callers do not need to pass the manager around.

Choosing *what* to print for each ``--output`` format is the job of
:mod:`twenty_cli.render`; this module only knows how to lay out text.
"""

from __future__ import annotations

import csv
import io
import os
import sys
from enum import Enum
from typing import Optional, Sequence

from rich.cells import cell_len
from rich.console import Console
from rich.markup import escape


class OutputFormat(str, Enum):
    """Values accepted by the global ``--output`` flag."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    CSV = "csv"


TABLE_GUTTER = 2
"""Spaces between aligned table columns."""


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Data written with :meth:`print_data` goes to ``sys.stdout`` as plain
    text, so it stays byte-exact for piping. Diagnostics go through a Rich
    :class:`~rich.console.Console` bound to stderr; any Rich markup in the
    message text is escaped so that API error strings such as
    ``createdAt[gte]`` print verbatim.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr (``--debug``).
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        # Console for stderr (diagnostics)
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
        )

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout.

        Args:
            text: The string to write. A trailing newline is appended if
                missing.
        """
        if text.endswith("\n"):
            sys.stdout.write(text)
            sys.stdout.flush()
        else:
            print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: Optional[Sequence[str]],
        rows: Sequence[Sequence[str]],
    ) -> None:
        """Print rows as aligned columns; *headers* may be ``None`` to omit the header line.

        Args:
            headers: Column header strings, or ``None``.
            rows: List of rows, where each row is a list of cell strings.
        """
        lines = format_table(headers, rows)
        if lines:
            self.print_data("\n".join(lines))

    def print_csv(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Print *headers* and *rows* as RFC 4180 CSV.

        Args:
            headers: Header row.
            rows: Data rows, each the same length as *headers*.
        """
        self.print_data(format_csv(headers, rows))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(escape(message))

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``.

        Args:
            message: The warning text.
        """
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed.

        Args:
            message: The error text.
        """
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--debug`` is active.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]{escape('[debug]')} {escape(message)}[/dim]")

    def progress(self, message: str) -> None:
        """Print a dimmed progress message to stderr.

        Only displayed when stderr is a TTY. Suppressed by ``--quiet``.

        Args:
            message: The progress text.
        """
        if not self._quiet and _is_tty(sys.stderr):
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]{escape(message)}[/dim]")


# ------------------------------------------------------------------ #
# Layout helpers
# ------------------------------------------------------------------ #


def format_table(
    headers: Optional[Sequence[str]],
    rows: Sequence[Sequence[str]],
    gutter: int = TABLE_GUTTER,
) -> list[str]:
    """Lay out *rows* (and optional *headers*) as left-aligned columns.

    Widths are measured in terminal cells, the last column is never padded,
    and columns are separated by at least *gutter* spaces.
    """
    table = [list(headers)] if headers is not None else []
    table.extend(list(row) for row in rows)
    if not table:
        return []

    ncols = max(len(row) for row in table)
    widths = [0] * ncols
    for row in table:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], cell_len(cell))

    lines = []
    for row in table:
        parts = []
        for i, cell in enumerate(row):
            if i == len(row) - 1:
                parts.append(cell)
            else:
                parts.append(cell + " " * (widths[i] - cell_len(cell) + gutter))
        lines.append("".join(parts).rstrip())
    return lines


def format_csv(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Serialise *headers* and *rows* with the :mod:`csv` module (``\\n`` line endings)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty(stream: object = None) -> bool:
    """Check if *stream* (stdout by default) is a TTY."""
    stream = sys.stdout if stream is None else stream
    return hasattr(stream, "isatty") and stream.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` is created lazily.

    Returns:
        The active :class:`OutputManager`.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance.

    Called once during CLI startup from :func:`~twenty_cli.app.main_callback`.

    Args:
        output: The configured manager to install.
    """
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)


def progress(message: str) -> None:
    """Print progress message to stderr via the global OutputManager."""
    get_output().progress(message)
