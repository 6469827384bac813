"""Configuration loading and precedence resolution.

A run is described by a :class:`~specgen.models.GenerateConfig`. It is
assembled from, in order of precedence (high to low):

1. CLI flags (``URL``, ``--dir``).
2. The config file: ``--config PATH``, else ``./specgen.json``, else the
   ``[tool.specgen]`` table of ``./pyproject.toml``.
3. Defaults (``dir=".specgen"``).

Config files may use either snake_case (``module_template``) or the
camelCase ``moduleTemplate`` key. Template overrides may reference files
with ``file:PATH``; relative paths are resolved against the directory of the
config file that declared them (see :func:`resolve_templates`).

The core compiler never calls into this module: it receives a finished
``GenerateConfig`` and never reads process arguments or environment
variables itself.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specgen.exceptions import ConfigError, InvalidUsageError
from specgen.generator.renderer import ModuleTemplates
from specgen.models import GenerateConfig

_CONFIG_FILENAME = "specgen.json"
_PYPROJECT_FILENAME = "pyproject.toml"
_PYPROJECT_TABLE = "specgen"


def find_config_file(cwd: Optional[Path] = None) -> Optional[Path]:
    """Locate the project config file in *cwd* (default: the working directory).

    Returns:
        ``specgen.json`` if present, else ``pyproject.toml`` if it holds a
        ``[tool.specgen]`` table, else ``None``.
    """
    base = cwd or Path.cwd()
    candidate = base / _CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    pyproject = base / _PYPROJECT_FILENAME
    if pyproject.is_file() and _read_pyproject_table(pyproject) is not None:
        return pyproject
    return None


def load_config_file(path: Path) -> GenerateConfig:
    """Load and validate a config file.

    ``.toml`` files are read from their ``[tool.specgen]`` table; anything
    else is parsed as JSON.

    Raises:
        ConfigError: If the file is missing, unparsable, or fails
            validation.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path.suffix == ".toml":
        data = _read_pyproject_table(path)
        if data is None:
            raise ConfigError(f"No [tool.{_PYPROJECT_TABLE}] table in {path}")
    else:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected an object")

    try:
        return GenerateConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def _read_pyproject_table(path: Path) -> Optional[dict[str, Any]]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Invalid TOML at {path}: {exc}") from exc
    table = data.get("tool", {}).get(_PYPROJECT_TABLE)
    return table if isinstance(table, dict) else None


def resolve_config(
    cli_url: Optional[str] = None,
    cli_dir: Optional[str] = None,
    cli_config: Optional[str] = None,
) -> tuple[GenerateConfig, Optional[Path]]:
    """Resolve the effective run configuration.

    Args:
        cli_url: Document URL/path from the command line.
        cli_dir: Output directory from ``--dir``.
        cli_config: Explicit config file from ``--config``.

    Returns:
        ``(config, config_path)``; ``config_path`` is the file that was
        loaded, or ``None`` when no file was used.

    Raises:
        ConfigError: If the config file is invalid.
        InvalidUsageError: If no document URL is configured anywhere.
    """
    config_path = Path(cli_config) if cli_config else find_config_file()
    config = load_config_file(config_path) if config_path else GenerateConfig()

    if cli_url is not None:
        config.url = cli_url
    if cli_dir is not None:
        config.dir = cli_dir

    if not config.url:
        raise InvalidUsageError("missing required argument 'url'")

    return config, config_path


def resolve_templates(
    config: GenerateConfig,
    config_path: Optional[Path] = None,
) -> ModuleTemplates:
    """Build the module templates for *config*, applying its overrides.

    Raises:
        ConfigError: If a ``file:`` template cannot be read.
    """
    base_dir = config_path.parent if config_path else None
    return ModuleTemplates.defaults().with_overrides(config.module_template, base_dir)
