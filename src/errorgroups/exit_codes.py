"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant is referenced by the matching
:class:`~errorgroups.exceptions.ErrorGroupsError` subclass so that shell
wrappers can tell failure classes apart without parsing stderr.

Example::

    $ errorgroups groups show 123
    $ echo $?
    4   # EXIT_NOT_FOUND -- no error group with that id
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Credentials could not be obtained or were rejected by the service."""

EXIT_NOT_FOUND = 4
"""The requested error group does not exist."""

EXIT_SERVER_ERROR = 5
"""The service answered with a non-success HTTP status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
