"""Group extracted operations into one module per tag.

A module is what the renderer turns into one source file: the tag's name and
description, its operations in document order, and the model names those
operations need, deduplicated by first occurrence (not sorted), so the
output is stable across runs of the same document.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from specgen.models import HTTPMethod, ModelDefinition, Module
from specgen.parser.extractor import extract_operations
from specgen.parser.notation import DEFAULT_TYPE_TABLE, TypeTable

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def assemble_modules(
    raw_spec: Mapping[str, Any],
    registry: Mapping[str, ModelDefinition],
    table: TypeTable = DEFAULT_TYPE_TABLE,
) -> list[Module]:
    """Build one :class:`~specgen.models.Module` per tag.

    Tags come from the document's ``tags`` array, in order. A document
    without that array gets its tags from the operations themselves, in
    first-seen order and without descriptions.

    Args:
        raw_spec: The raw Swagger document.
        registry: Canonical model name to model.
        table: Canonicalisation data for type names.

    Returns:
        The modules, in tag order.
    """
    modules: list[Module] = []
    for name, description in _tags(raw_spec):
        operations, imports = extract_operations(raw_spec, name, registry, table)
        modules.append(
            Module(
                name=name,
                description=description,
                operations=operations,
                imports=dedupe_imports(imports),
            )
        )
    return modules


def dedupe_imports(names: Iterable[str]) -> list[str]:
    """Drop repeated names, keeping the first occurrence of each."""
    return list(dict.fromkeys(names))


def _tags(raw_spec: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """Return ``(name, description)`` pairs for every tag."""
    declared = raw_spec.get("tags")
    if declared is not None:
        return [
            (tag["name"], tag.get("description"))
            for tag in declared
            if isinstance(tag, dict) and tag.get("name")
        ]

    seen: dict[str, None] = {}
    for path_item in (raw_spec.get("paths") or {}).values():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if str(method).lower() in _HTTP_METHODS and isinstance(operation, dict):
                for tag in operation.get("tags") or []:
                    seen.setdefault(tag, None)
    return [(name, None) for name in seen]
