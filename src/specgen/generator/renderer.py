"""Render compiled models and modules into source text with Jinja2.

Module artifacts follow a four-slot contract:

* ``header`` -- imports and preamble, rendered from the module.
* ``body`` -- the operations, rendered from the module.
* ``footer`` -- trailing code, rendered from the module (empty by default).
* ``wrapper`` -- combines the three, receiving them as ``module_header``,
  ``module_body`` and ``module_footer`` next to the module's own fields.

:class:`ModuleTemplates` holds the four slots. Defaults come from the
packaged ``templates/`` directory; any one slot can be replaced by template
source text without touching the others. The type declarations artifact is
rendered from ``types.ts.j2`` and is not overridable.

Every slot sees the module's ``name``, ``description``, ``operations`` and
``imports`` (and ``module`` itself). Operations and parameters are the
Pydantic models from :mod:`specgen.models`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, Template, TemplateError

from specgen.exceptions import ConfigError
from specgen.models import ModelDefinition, Module, ModuleTemplateConfig

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""

SLOTS = ("header", "body", "footer", "wrapper")

_DEFAULT_SLOT_FILES = {
    "header": "header.ts.j2",
    "body": "body.ts.j2",
    "footer": "footer.ts.j2",
    "wrapper": "module.ts.j2",
}
_TYPES_TEMPLATE = "types.ts.j2"
_FILE_PREFIX = "file:"
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class ModuleTemplates:
    """Template source text for the four module slots.

    Build it with :meth:`defaults` and :meth:`with_overrides`; the record is
    immutable so one instance can be shared between renders.
    """

    header: str
    body: str
    footer: str
    wrapper: str

    @classmethod
    def defaults(cls) -> ModuleTemplates:
        """Load the packaged default templates."""
        return cls(
            **{
                slot: (TEMPLATE_DIR / filename).read_text(encoding="utf-8")
                for slot, filename in _DEFAULT_SLOT_FILES.items()
            }
        )

    def with_overrides(
        self,
        overrides: Optional[ModuleTemplateConfig],
        base_dir: Optional[Path] = None,
    ) -> ModuleTemplates:
        """Return a copy with every slot set in *overrides* replaced.

        Args:
            overrides: Per-slot template text; ``file:PATH`` reads the
                template from disk instead.
            base_dir: Directory relative ``file:`` paths are resolved
                against. Defaults to the working directory.

        Raises:
            ConfigError: If a ``file:`` template cannot be read.
        """
        if overrides is None:
            return self
        changes: dict[str, str] = {}
        for slot in SLOTS:
            value = getattr(overrides, slot)
            if value is not None:
                changes[slot] = _read_template_source(value, base_dir)
        return replace(self, **changes)


def _read_template_source(value: str, base_dir: Optional[Path]) -> str:
    """Return inline template text, or the content of a ``file:`` template."""
    if not value.startswith(_FILE_PREFIX):
        return value
    path = Path(value[len(_FILE_PREFIX) :]).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read template {path}: {exc}") from exc


def doc_comment(text: Any) -> str:
    """Flatten *text* onto one line that is safe inside a ``/** */`` block."""
    return " ".join(str(text).split()).replace("*/", "*\\/")


def ts_property(name: str) -> str:
    """Quote a property name that is not a valid TypeScript identifier."""
    if _IDENTIFIER_RE.match(name):
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class Renderer:
    """Render type declarations and module artifacts.

    Args:
        templates: Module slot templates. ``None`` uses
            :meth:`ModuleTemplates.defaults`.

    Example::

        renderer = Renderer(ModuleTemplates.defaults().with_overrides(cfg))
        code = renderer.render_module(compiled.modules[0])
    """

    def __init__(self, templates: Optional[ModuleTemplates] = None) -> None:
        self._env = _create_jinja_env()
        templates = templates or ModuleTemplates.defaults()
        self._slots: dict[str, Template] = {
            slot: self._compile(slot, getattr(templates, slot)) for slot in SLOTS
        }

    def _compile(self, slot: str, source: str) -> Template:
        try:
            return self._env.from_string(source)
        except TemplateError as exc:
            raise ConfigError(f"Invalid {slot} template: {exc}") from exc

    def render_types(self, models: list[ModelDefinition]) -> str:
        """Render the type declarations artifact for *models*."""
        template = self._env.get_template(_TYPES_TEMPLATE)
        return template.render(models=models)

    def render_module(self, module: Module) -> str:
        """Render one module artifact.

        Header, body and footer are rendered independently from the
        module, then handed to the wrapper.

        Raises:
            ConfigError: If an overridden template fails while rendering.
        """
        context = _module_context(module)
        parts = {
            f"module_{slot}": self._render_slot(slot, context)
            for slot in ("header", "body", "footer")
        }
        return self._render_slot("wrapper", {**context, **parts})

    def _render_slot(self, slot: str, context: dict[str, Any]) -> str:
        try:
            return self._slots[slot].render(**context)
        except TemplateError as exc:
            raise ConfigError(f"Failed to render {slot} template: {exc}") from exc


def _module_context(module: Module) -> dict[str, Any]:
    return {
        "module": module,
        "name": module.name,
        "description": module.description,
        "operations": module.operations,
        "imports": module.imports,
    }


def _create_jinja_env() -> Environment:
    """Create and configure the Jinja2 environment for code templates.

    Autoescape is off because the output is source code, not HTML. Block
    trimming and lstrip are enabled for cleaner template authoring.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["doc_comment"] = doc_comment
    env.filters["ts_property"] = ts_property
    return env
