"""Write every generated artifact to the output directory.

Files are written in a fixed order:

1. ``types.ts`` -- type declarations for all models.
2. ``modules/<tag>.ts`` -- one per module, in module order.
3. ``manifest.json`` -- the compiled ``{models, modules}``.
4. ``docs.json`` -- the raw source document, verbatim.

Each file goes through a formatter first. When the formatter rejects the
text (:class:`~specgen.exceptions.RenderFormatError`) the failure is logged
and the unformatted text is written anyway, so one bad template never costs
the whole run.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so an interrupted run never leaves half-written files.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional

from specgen.exceptions import RenderFormatError
from specgen.generator.formatter import Formatter, format_code, format_json
from specgen.generator.renderer import ModuleTemplates, Renderer
from specgen.models import CompiledSpec

logger = logging.getLogger(__name__)

TYPES_FILENAME = "types.ts"
MODULES_DIRNAME = "modules"
MODULE_SUFFIX = ".ts"
MANIFEST_FILENAME = "manifest.json"
DOCS_FILENAME = "docs.json"

_UNSAFE_FILENAME_RE = re.compile(r"[\\/:*?\"<>|]+")


def emit(
    compiled: CompiledSpec,
    output_dir: str | Path,
    templates: Optional[ModuleTemplates] = None,
    code_formatter: Formatter = format_code,
    json_formatter: Formatter = format_json,
) -> list[Path]:
    """Render *compiled* and write all artifacts under *output_dir*.

    Args:
        compiled: Output of :func:`~specgen.parser.compile_spec`.
        output_dir: Target directory, created (with parents) if missing.
        templates: Module slot templates; ``None`` uses the defaults.
        code_formatter: Applied to ``types.ts`` and module files.
        json_formatter: Applied to ``manifest.json`` and ``docs.json``.

    Returns:
        The written paths, in write order.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    renderer = Renderer(templates)
    written: list[Path] = []

    types_path = out / TYPES_FILENAME
    _write_formatted(types_path, renderer.render_types(compiled.models), code_formatter)
    written.append(types_path)

    modules_dir = out / MODULES_DIRNAME
    modules_dir.mkdir(exist_ok=True)
    for module in compiled.modules:
        module_path = modules_dir / f"{module_filename(module.name)}{MODULE_SUFFIX}"
        _write_formatted(module_path, renderer.render_module(module), code_formatter)
        written.append(module_path)

    manifest_path = out / MANIFEST_FILENAME
    _write_formatted(manifest_path, _dump_json(compiled.manifest()), json_formatter)
    written.append(manifest_path)

    docs_path = out / DOCS_FILENAME
    _write_formatted(docs_path, _dump_json(compiled.raw_spec), json_formatter)
    written.append(docs_path)

    return written


def module_filename(name: str) -> str:
    """Make a tag name safe to use as a file name."""
    return _UNSAFE_FILENAME_RE.sub("_", name).strip() or "default"


def _dump_json(data: Any) -> str:
    # default=str covers YAML-parsed dates in the raw document
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _write_formatted(path: Path, text: str, formatter: Formatter) -> None:
    try:
        text = formatter(text)
    except RenderFormatError as exc:
        logger.error("format error: %s: %s", path, exc)
    atomic_write(path, text)


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
