"""Exception hierarchy for twenty-cli.

All runtime errors inherit from :class:`TwentyError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`twenty_cli.exit_codes`.
The top-level error handler in :func:`twenty_cli.app.main` catches
``TwentyError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    TwentyError                 (exit 1)
    +-- InvalidUsageError       (exit 2)
    |   +-- MissingPayloadError
    |   +-- InvalidPayloadError
    |   +-- QueryError
    +-- ConfigError             (exit 1)
    +-- TransportError          (exit 1)
        +-- AuthError           (exit 3)
        +-- NotFoundError       (exit 4)
        +-- RateLimitedError    (exit 5)
        +-- ServerError         (exit 5)
        +-- ConnectionError_    (exit 6)
        +-- UnexpectedResponseError

:class:`ConfigurationError` sits outside this tree on purpose: it reports a
mis-assembled command (a resource config without its call function) and is
raised while the command tree is built, before any user input is read.
"""

from __future__ import annotations

from typing import Any, Optional

from twenty_cli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class TwentyError(Exception):
    """Base exception for all twenty-cli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`twenty_cli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(TypeError):
    """Raised at command-build time when a resource config is incomplete.

    This is a programming error (for example a list config with no list
    function), so it deliberately does not inherit from :class:`TwentyError`
    and is never mapped to an exit code.
    """


class InvalidUsageError(TwentyError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class MissingPayloadError(InvalidUsageError):
    """Raised when create/update receives no JSON payload at all."""


class InvalidPayloadError(InvalidUsageError):
    """Raised when a create/update payload is not valid JSON or not an object."""


class QueryError(InvalidUsageError):
    """Raised when a ``--query`` expression cannot be parsed or applied."""


class ConfigError(TwentyError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class TransportError(TwentyError):
    """Raised for any failed HTTP exchange with the Twenty API.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, if one was received.
        body: Parsed (or raw text) response body, if any.
        code: Machine-readable error code from the API error envelope.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.code = code

    def with_context(self, prefix: str) -> TransportError:
        """Return a copy of this error whose message starts with *prefix*.

        The copy keeps the concrete class, so the exit code is unchanged::

            raise exc.with_context("failed to list") from exc
        """
        return type(self)(
            f"{prefix}: {self}",
            status_code=self.status_code,
            body=self.body,
            code=self.code,
        )


class AuthError(TransportError):
    """Raised when no token is available or the API rejects it (HTTP 401/403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(TransportError):
    """Raised when the API returns HTTP 404 (record not found)."""

    exit_code = EXIT_NOT_FOUND


class RateLimitedError(TransportError):
    """Raised when the API still answers HTTP 429 after all retries."""

    exit_code = EXIT_SERVER_ERROR


class ServerError(TransportError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(TransportError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class UnexpectedResponseError(TransportError):
    """Raised when a successful response does not match the expected record shape."""
