"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~swagtree.exceptions.SwagtreeError` subclass.
Shell wrappers can inspect the exit code to tell a missing interface from an
unreadable document without parsing stderr.

Example::

    $ swagtree inspect show user-info-get
    $ echo $?
    4   # EXIT_NOT_FOUND -- no interface with that path name
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The requested interface, group or source does not exist."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred while fetching a remote document."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be parsed, validated or dereferenced."""
