"""Exception hierarchy for swagtree.

All exceptions inherit from :class:`SwagtreeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`swagtree.exit_codes`.
The top-level error handler in :func:`swagtree.app.main` catches
``SwagtreeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The normalization engine itself never raises these for malformed input: a
missing reference or schema is logged and yields an empty result. Only the
loader, the configuration layer, the CLI and the *strict* pointer lookup
raise.

Subclass hierarchy::

    SwagtreeError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- ConnectionError_    (exit 6)
    +-- SpecParseError      (exit 7)
    |   +-- RefResolutionError
    +-- ConfigError         (exit 1)
"""

from swagtree.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)


class SwagtreeError(Exception):
    """Base exception for all swagtree errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`swagtree.exit_codes`. The entry point catches
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


class InvalidUsageError(SwagtreeError):
    """Raised for invalid CLI arguments or missing required options."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(SwagtreeError):
    """Raised when a requested interface, group or source does not exist."""

    exit_code = EXIT_NOT_FOUND


class ConnectionError_(SwagtreeError):
    """Raised on network-level failures while fetching a remote document.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(SwagtreeError):
    """Raised when the OpenAPI document cannot be parsed or fails validation."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class RefResolutionError(SpecParseError):
    """Raised by a strict pointer lookup when a ``$ref`` target is missing.

    The normalization engine always uses the tolerant lookup, so this only
    surfaces from callers that explicitly ask for ``strict=True``.
    """


class ConfigError(SwagtreeError):
    """Raised for configuration problems (invalid JSON, unknown source, bad key)."""

    exit_code = EXIT_GENERIC_FAILURE
