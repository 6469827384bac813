"""Best-effort formatting of generated text.

Two formatters are provided:

* :func:`format_json` -- re-serialises JSON with two-space indentation.
* :func:`format_code` -- pipes source text through the ``prettier``
  executable when one is on ``PATH``. Without prettier the text is returned
  unchanged.

Both raise :class:`~specgen.exceptions.RenderFormatError` when the text is
rejected as invalid; the emitter catches it and writes the text unformatted.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from typing import Callable

from specgen.exceptions import RenderFormatError

logger = logging.getLogger(__name__)

Formatter = Callable[[str], str]

PRETTIER = "prettier"


def format_json(text: str) -> str:
    """Pretty-print a JSON document.

    Raises:
        RenderFormatError: If *text* is not valid JSON.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RenderFormatError(f"Invalid JSON: {exc}") from exc
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def format_code(text: str, parser: str = "typescript") -> str:
    """Format source text with prettier.

    Args:
        text: The generated source.
        parser: prettier's ``--parser`` value.

    Returns:
        The formatted text, or *text* itself when prettier is not installed.

    Raises:
        RenderFormatError: If prettier exits non-zero (usually a syntax
            error in the generated code) or cannot be started.
    """
    executable = shutil.which(PRETTIER)
    if executable is None:
        logger.debug("prettier not found on PATH, leaving output unformatted")
        return text

    try:
        proc = subprocess.run(
            [executable, "--parser", parser, "--tab-width", "4", "--no-use-tabs"],
            input=text,
            capture_output=True,
            text=True,
            encoding="utf-8",
        )
    except OSError as exc:
        raise RenderFormatError(f"Failed to run prettier: {exc}") from exc

    if proc.returncode != 0:
        detail = proc.stderr.strip().splitlines()
        raise RenderFormatError(detail[0] if detail else f"prettier exited with {proc.returncode}")
    return proc.stdout
