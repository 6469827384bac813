"""Canonical Pydantic models shared across all specgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Configuration models** -- loaded from ``specgen.json`` (or the
``[tool.specgen]`` table of ``pyproject.toml``) and merged with CLI flags:
    :class:`ModuleTemplateConfig` and :class:`GenerateConfig`.

**Compiler output models** -- produced by the Swagger compiler and consumed by
the template renderer:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`ModelProperty`,
    :class:`ModelDefinition`, :class:`Parameter`, :class:`Operation`,
    :class:`Module`, and :class:`CompiledSpec`.

Compiler output models serialise with the camelCase field names used by the
generated ``manifest.json`` (``returnType``, ``in``) when dumped with
``by_alias=True``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class ModuleTemplateConfig(BaseModel):
    """Per-slot template overrides for module artifacts.

    Each slot holds Jinja2 template source text, or ``file:PATH`` to read
    the template from disk. Slots left as ``None`` fall back to the
    packaged default templates.

    Example::

        ModuleTemplateConfig(footer="export const tag = '{{ name }}'")
    """

    header: Optional[str] = None
    body: Optional[str] = None
    footer: Optional[str] = None
    wrapper: Optional[str] = None


class GenerateConfig(BaseModel):
    """Everything one ``specgen generate`` run needs.

    Loaded by :func:`~specgen.config.resolve_config`, which layers CLI
    flags over the config file. ``url`` is optional here so that a config
    file may omit it, but a run without one is rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = Field(
        default=None, description="URL, file path, or '-' for the Swagger document"
    )
    dir: str = Field(default=".specgen", description="Output directory")
    module_template: ModuleTemplateConfig = Field(
        default_factory=ModuleTemplateConfig, alias="moduleTemplate"
    )


# --- Compiler Output ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by Swagger 2.0 path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"


class ParameterLocation(str, enum.Enum):
    """Locations where a parameter can appear, per the Swagger ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"
    FORM_DATA = "formData"
    BODY = "body"


class ModelProperty(BaseModel):
    """One property of a :class:`ModelDefinition`.

    ``type`` is a canonical type string (see
    :func:`~specgen.parser.notation.parse_type`). Properties typed by a
    ``$ref`` start out as ``"any"`` and are rewritten when the deferred
    binding queue drains.
    """

    name: str
    type: str = "any"
    required: bool = False
    description: Optional[str] = None


class ModelDefinition(BaseModel):
    """A type model compiled from one entry of the ``definitions`` map."""

    name: str
    title: Optional[str] = None
    generics: list[str] = Field(default_factory=list)
    properties: list[ModelProperty] = Field(default_factory=list)


class Parameter(BaseModel):
    """A single operation parameter with its resolved type."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    type: str = "any"
    required: bool = False


class Operation(BaseModel):
    """One HTTP method bound to one path.

    ``path`` uses template-literal interpolation (``/pets/${id}``) so the
    default templates can drop it straight into a backtick string.
    ``return_type`` is empty when the 200 response declares no schema.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    method: HTTPMethod
    path: str
    description: Optional[str] = None
    return_type: str = Field(default="", alias="returnType")
    parameters: list[Parameter] = Field(default_factory=list)


class Module(BaseModel):
    """All operations of one tag plus the model names they reference."""

    name: str
    description: Optional[str] = None
    operations: list[Operation] = Field(default_factory=list)
    imports: list[str] = Field(default_factory=list)


class CompiledSpec(BaseModel):
    """Result of compiling a Swagger 2.0 document.

    See Also:
        :func:`~specgen.parser.extractor.compile_spec`: Produces this.
        :func:`~specgen.generator.emitter.emit`: Consumes this.
    """

    models: list[ModelDefinition] = Field(default_factory=list)
    modules: list[Module] = Field(default_factory=list)
    raw_spec: dict[str, Any] = Field(
        default_factory=dict, description="Source document, dumped verbatim to docs.json"
    )

    def manifest(self) -> dict[str, Any]:
        """Return the ``{models, modules}`` document written to ``manifest.json``."""
        return {
            "models": [m.model_dump(mode="json", exclude_none=True) for m in self.models],
            "modules": [
                m.model_dump(mode="json", by_alias=True, exclude_none=True)
                for m in self.modules
            ],
        }
