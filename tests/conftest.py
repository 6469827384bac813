"""Shared test fixtures for specgen.

Provides reusable fixtures for loading document fixtures, compiling them,
isolating the working directory, managing output and logging state, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from specgen.models import CompiledSpec
from specgen.output import LOGGER_NAME, reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``specgen`` logger after every test.

    The OutputManager and the RichHandler it installs cache references to
    sys.stdout/sys.stderr at creation time. When Typer's CliRunner redirects
    those streams and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces fresh ones on next
    use.
    """
    yield
    reset_output()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw document fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore document."""
    with open(FIXTURES_DIR / "petstore_swagger.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def petstore_path(tmp_path: Path) -> Path:
    """Copy the petstore fixture into tmp_path and return its path."""
    target = tmp_path / "swagger.json"
    target.write_text(
        (FIXTURES_DIR / "petstore_swagger.json").read_text(encoding="utf-8"),
        encoding="utf-8",
    )
    return target


@pytest.fixture
def minimal_raw() -> dict[str, Any]:
    """A tiny document with one tag, one operation and one model."""
    return {
        "swagger": "2.0",
        "info": {"title": "Minimal", "version": "1.0"},
        "tags": [{"name": "pet", "description": "Pets"}],
        "paths": {
            "/pets/{id}": {
                "get": {
                    "tags": ["pet"],
                    "operationId": "getPet",
                    "parameters": [
                        {"name": "id", "in": "path", "required": True, "type": "integer"}
                    ],
                    "responses": {
                        "200": {"description": "ok", "schema": {"$ref": "#/definitions/Pet"}}
                    },
                }
            }
        },
        "definitions": {
            "Pet": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                },
            }
        },
    }


# ---------------------------------------------------------------------------
# Compiled fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_compiled(petstore_raw: dict[str, Any]) -> CompiledSpec:
    """The petstore document compiled with the default type table."""
    from specgen.parser import compile_spec

    return compile_spec(petstore_raw)


# ---------------------------------------------------------------------------
# Working directory isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change the working directory to tmp_path.

    Keeps config discovery (``specgen.json``, ``pyproject.toml``) and the
    default ``.specgen`` output directory away from the real project.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
