"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specgen.exceptions.SpecgenError` subclass.
External tooling (CI scripts, build steps) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ specgen generate https://example.com/missing.json
    $ echo $?
    7   # EXIT_RETRIEVAL_ERROR -- the document could not be fetched
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_RETRIEVAL_ERROR = 7
"""The source document could not be fetched or parsed as a Swagger 2.0 document."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
