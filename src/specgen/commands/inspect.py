"""Inspect commands -- examine what a Swagger document compiles to.

Provides the ``specgen inspect`` sub-command group with read-only
commands that compile a document without writing anything and present the
models or modules as a table (or JSON with ``--json``).
"""

from __future__ import annotations

from typing import Optional

import typer

from specgen.exceptions import SpecgenError
from specgen.models import CompiledSpec
from specgen.output import error, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)

_URL_ARGUMENT = typer.Argument(
    None, help="URL, file path, or '-' of the document (default: from config)."
)
_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file.")


def _compile(url: Optional[str], config: Optional[str]) -> CompiledSpec:
    """Resolve the document location and compile it.

    Args:
        url: Explicit document location, overriding the config file.
        config: Explicit config file path.

    Returns:
        The compiled document.

    Raises:
        typer.Exit: With the exit code of any :class:`~specgen.exceptions.SpecgenError`.
    """
    from specgen.config import resolve_config
    from specgen.parser import compile_spec, load_document, validate_swagger_version

    try:
        cfg, _ = resolve_config(cli_url=url, cli_config=config)
        assert cfg.url is not None
        raw = load_document(cfg.url)
        validate_swagger_version(raw)
        return compile_spec(raw)
    except SpecgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@inspect_app.command("models")
def inspect_models(
    url: Optional[str] = _URL_ARGUMENT,
    config: Optional[str] = _CONFIG_OPTION,
) -> None:
    """List the models compiled from the document's definitions.

    Shows each model with its generic parameters and up to five
    properties (required ones marked with ``*``).

    Example::

        specgen inspect models ./swagger.json
    """
    compiled = _compile(url, config)
    if not compiled.models:
        info("No definitions in this document.")
        return

    rows: list[list[str]] = []
    for model in compiled.models:
        props = [f"{p.name}{'*' if p.required else ''}: {p.type}" for p in model.properties]
        shown = ", ".join(props[:5])
        if len(props) > 5:
            shown += "..."
        rows.append([model.name, ", ".join(model.generics) or "-", shown])

    get_output().print_table(
        ["Model", "Generics", "Properties"], rows, title=f"Models ({len(rows)})"
    )


@inspect_app.command("modules")
def inspect_modules(
    url: Optional[str] = _URL_ARGUMENT,
    config: Optional[str] = _CONFIG_OPTION,
) -> None:
    """List every operation, grouped by module, in document order.

    Example::

        specgen inspect modules ./swagger.json --json
    """
    compiled = _compile(url, config)
    if not compiled.modules:
        info("No tagged operations in this document.")
        return

    rows: list[list[str]] = []
    for module in compiled.modules:
        for op in module.operations:
            rows.append([
                module.name,
                op.name,
                op.method.value.upper(),
                op.path,
                op.return_type or "-",
            ])

    get_output().print_table(
        ["Module", "Operation", "Method", "Path", "Returns"],
        rows,
        title=f"Operations ({len(rows)})",
    )
