"""Exception hierarchy for apicache.

All exceptions inherit from :class:`ApicacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apicache.exit_codes`.
The CLI entry point in :func:`apicache.app.main` catches ``ApicacheError``
and exits with the appropriate code.

Transport failures are raised by
:class:`~apicache.client.transport.HttpxTransport` and travel through the
caching client untouched: nothing is cached and nothing is retried.

Subclass hierarchy::

    ApicacheError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ConfigError         (exit 1)
"""

from apicache.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class ApicacheError(Exception):
    """Base exception for all apicache errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apicache.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApicacheError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(ApicacheError):
    """Raised when the API rejects the request with HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ApicacheError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ApicacheError):
    """Raised when the API returns an HTTP 5xx error or an unmapped 4xx."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(ApicacheError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(ApicacheError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
