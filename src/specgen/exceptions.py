"""Exception hierarchy for specgen.

All exceptions inherit from :class:`SpecgenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specgen.exit_codes`.
The top-level error handler in :func:`specgen.app.main` catches
``SpecgenError`` and exits with the appropriate code.

Only :class:`RetrievalError` (and the CLI-level usage/config errors) abort a
run. :class:`UnresolvedReferenceError` and :class:`RenderFormatError` are
recoverable: the compiler and the emitter log them and carry on with
best-effort output.

Subclass hierarchy::

    SpecgenError (exit 1)
    +-- InvalidUsageError         (exit 2)
    +-- RetrievalError            (exit 7)
    +-- UnresolvedReferenceError  (logged, never fatal)
    +-- RenderFormatError         (logged, never fatal)
    +-- ConfigError               (exit 1)
"""

from specgen.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_RETRIEVAL_ERROR,
)


class SpecgenError(Exception):
    """Base exception for all specgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specgen.exit_codes`. The entry point catches
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


class InvalidUsageError(SpecgenError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class RetrievalError(SpecgenError):
    """Raised when the source document cannot be fetched or parsed.

    Also raised when the document parses but is not a Swagger 2.0 document.
    This is the only fatal error of the compile pipeline.
    """

    exit_code = EXIT_RETRIEVAL_ERROR


class UnresolvedReferenceError(SpecgenError):
    """A ``$ref`` points at a definition that was never registered.

    The compiler builds one of these for the diagnostic message and logs it;
    the affected type keeps its placeholder value.

    Args:
        name: Canonical name of the missing model.
        context: Where the reference was found (e.g. ``"Order.pet"``).
    """

    def __init__(self, name: str, context: str | None = None):
        message = f"{name} not found"
        if context:
            message = f"{message} (referenced from {context})"
        super().__init__(message)
        self.name = name
        self.context = context


class RenderFormatError(SpecgenError):
    """Raised when the formatter rejects generated text as invalid.

    The emitter catches it, logs the failure, and persists the unformatted
    text instead.
    """


class ConfigError(SpecgenError):
    """Raised for configuration problems (invalid JSON/TOML, bad template sources)."""

    exit_code = EXIT_GENERIC_FAILURE
