"""Built-in CLI sub-commands for specgen.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specgen.commands.generate` -- compile a Swagger document and write
  the generated client.
* :mod:`~specgen.commands.inspect` -- list the models and operations a
  document compiles to, without writing anything.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect``) or a plain callback function
registered directly on the root app (for single commands like
``generate``).
"""
