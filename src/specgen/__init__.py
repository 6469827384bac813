"""specgen -- Generate typed API clients from Swagger 2.0 specs.

This package compiles a Swagger 2.0 document into a normalized intermediate
representation (type models plus one API module per tag) and renders it into
source text through a configurable Jinja2 template pipeline. The default
templates produce a TypeScript client built on axios.

Typical workflow::

    specgen generate https://petstore.swagger.io/v2/swagger.json -d ./api

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: Config-file loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
