"""Exception hierarchy for errorgroups.

All exceptions inherit from :class:`ErrorGroupsError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`errorgroups.exit_codes`. :func:`errorgroups.app.main` catches
``ErrorGroupsError`` and exits with that code.

Failures of a remote call are :class:`RequestFailure` instances. The
gateway never retries and never reinterprets them: the originating
``httpx`` exception stays reachable through ``__cause__``.

Subclass hierarchy::

    ErrorGroupsError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- ConfigError           (exit 1)
    +-- RequestFailure        (exit 1)
        +-- AuthFailure       (exit 3)
        +-- TransportFailure  (exit 5, or 6 without an HTTP response)
"""

from __future__ import annotations

from errorgroups.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SERVER_ERROR,
)


class ErrorGroupsError(Exception):
    """Base exception for all errorgroups errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ErrorGroupsError):
    """Raised for invalid arguments, e.g. an unsupported HTTP method."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ErrorGroupsError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class RequestFailure(ErrorGroupsError):
    """Raised when a call to the error reporting service did not succeed."""

    exit_code = EXIT_GENERIC_FAILURE


class AuthFailure(RequestFailure):
    """Raised when credentials cannot be obtained or the service rejects them (401/403)."""

    exit_code = EXIT_AUTH_FAILURE


class TransportFailure(RequestFailure):
    """Raised on network errors and non-success HTTP statuses.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status, or ``None`` when no response arrived
            (connection refused, timeout, DNS failure).
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message,
            exit_code=EXIT_SERVER_ERROR if status_code is not None else EXIT_CONNECTION_ERROR,
        )
        self.status_code = status_code
