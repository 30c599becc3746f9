"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~twenty_cli.exceptions.TwentyError` subclass.
Shell scripts can inspect the exit code to tell a bad flag from a rejected
token or an unreachable server without parsing stderr.

Example::

    $ twenty tasks get does-not-exist
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Invalid flags, a missing or malformed JSON payload, or a bad query expression."""

EXIT_AUTH_FAILURE = 3
"""No token is configured, or the API rejected it (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested record was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The API returned an HTTP 5xx error or kept rate-limiting the client."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
