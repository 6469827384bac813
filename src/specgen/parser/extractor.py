"""Extract models and operations from a Swagger 2.0 document.

This module walks the raw document (``$ref`` pointers are *not* inlined)
and builds the compiler's intermediate representation:

* :func:`extract_models` -- the ``definitions`` map becomes a deduplicated
  list of :class:`~specgen.models.ModelDefinition`. Properties typed by a
  ``$ref`` are bound in a second pass through
  :class:`~specgen.parser.resolver.DeferredBindings`.
* :func:`extract_operations` -- the ``paths`` map becomes the ordered
  :class:`~specgen.models.Operation` list of one tag, plus the model names
  those operations mention.
* :func:`compile_spec` -- the public entry point tying both together with
  :func:`~specgen.parser.assembler.assemble_modules`.

Parameter merging follows the Swagger specification: path-level parameters
provide defaults, and operation-level parameters override them when they
share the same ``name`` and ``in`` values. Parameters given as
``{"$ref": "#/parameters/..."}`` are looked up in the document's shared
``parameters`` map.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from specgen.models import (
    CompiledSpec,
    HTTPMethod,
    ModelDefinition,
    ModelProperty,
    Operation,
    Parameter,
    ParameterLocation,
)
from specgen.parser.notation import (
    ANY,
    DEFAULT_TYPE_TABLE,
    TypeNode,
    TypeTable,
    array_of,
    external_types,
    parse_type,
)
from specgen.parser.resolver import (
    DeferredBindings,
    property_binding,
    report_unresolved,
    resolve_ref,
)

logger = logging.getLogger(__name__)

_PATH_PARAM_RE = re.compile(r"\{([^}]+)\}")
_SHARED_PARAMETER_PREFIX = "#/parameters/"


def compile_spec(raw_spec: dict[str, Any], table: TypeTable = DEFAULT_TYPE_TABLE) -> CompiledSpec:
    """Compile a raw Swagger 2.0 document into a :class:`~specgen.models.CompiledSpec`.

    Models are extracted first (including the deferred-binding pass), so
    operation types can check their references against the finished model
    registry. Each call owns all of its state; nothing is cached between
    calls.

    Args:
        raw_spec: The document as returned by
            :func:`~specgen.parser.loader.load_document`.
        table: Canonicalisation data for type names.

    Returns:
        Models, one module per tag, and the untouched raw document.

    Example::

        raw = load_document("petstore.json")
        validate_swagger_version(raw)
        compiled = compile_spec(raw)
        for module in compiled.modules:
            print(module.name, len(module.operations))
    """
    from specgen.parser.assembler import assemble_modules

    models = extract_models(raw_spec.get("definitions") or {}, table)
    registry = {model.name: model for model in models}
    modules = assemble_modules(raw_spec, registry, table)
    return CompiledSpec(models=models, modules=modules, raw_spec=raw_spec)


# --- Models ---


def extract_models(
    definitions: Mapping[str, Any],
    table: TypeTable = DEFAULT_TYPE_TABLE,
) -> list[ModelDefinition]:
    """Turn the ``definitions`` map into a deduplicated model list.

    Each definition name is canonicalised with
    :func:`~specgen.parser.notation.parse_type`; the model takes the base
    name and the generic arguments become its ``generics``. When two
    definitions canonicalise to the same name (``Page«Pet»`` and
    ``Page«Order»``), the first one wins and the rest are skipped.

    Property types are computed inline for scalars, arrays of scalars and
    plain named types. ``$ref`` and array-of-``$ref`` properties are queued
    and bound only after every definition is registered, so declaration
    order, forward references, and self references all work.

    Args:
        definitions: The document's ``definitions`` object.
        table: Canonicalisation data for type names.

    Returns:
        Models in first-registration order, with all bindings applied.
    """
    registry: dict[str, ModelDefinition] = {}
    bindings = DeferredBindings()

    for raw_name, definition in definitions.items():
        if not isinstance(definition, dict):
            continue

        node = parse_type(raw_name, table)
        if node.name in registry:
            logger.debug("Skipping definition '%s': '%s' already registered", raw_name, node.name)
            continue

        model = ModelDefinition(
            name=node.name,
            title=definition.get("title"),
            generics=[generic.name for generic in node.generics],
        )
        registry[model.name] = model

        required = set(definition.get("required") or [])
        for prop_name, schema in (definition.get("properties") or {}).items():
            if not isinstance(schema, dict):
                schema = {}
            prop = ModelProperty(
                name=prop_name,
                required=prop_name in required,
                description=schema.get("description"),
            )
            model.properties.append(prop)

            target = _ref_target(schema, table)
            if target is not None:
                bindings.defer(property_binding(prop, target, registry, model.name))
            else:
                prop.type = str(_inline_type(schema, table))

    count = bindings.drain()
    logger.debug("Registered %d models, bound %d references", len(registry), count)
    return list(registry.values())


def _ref_target(schema: Mapping[str, Any], table: TypeTable) -> Optional[TypeNode]:
    """Return the referenced type of a ``$ref`` or array-of-``$ref`` schema, else ``None``."""
    target = resolve_ref(schema.get("$ref"), table)
    if target is not None:
        return target
    items = schema.get("items")
    if schema.get("type") == "array" and isinstance(items, dict):
        element = _ref_target(items, table)
        if element is not None:
            return array_of(element)
    return None


def _inline_type(schema: Mapping[str, Any], table: TypeTable) -> TypeNode:
    """Type a schema that holds no ``$ref``."""
    node = parse_type(schema.get("type"), table)
    items = schema.get("items")
    if node.is_array and not node.generics and isinstance(items, dict):
        return array_of(_inline_type(items, table))
    return node


# --- Operations ---


def extract_operations(
    raw_spec: Mapping[str, Any],
    tag: str,
    registry: Mapping[str, ModelDefinition],
    table: TypeTable = DEFAULT_TYPE_TABLE,
) -> tuple[list[Operation], list[str]]:
    """Extract every operation tagged *tag*, in document order.

    Iterates ``paths`` and, inside each path item, its HTTP-method entries
    in the order the document lists them. Path templates are rewritten from
    ``/pets/{id}`` to ``/pets/${id}``. Keys of a path item that are not HTTP
    methods (``parameters``, ``$ref``, vendor extensions) are ignored.

    Args:
        raw_spec: The whole document (``paths`` plus the shared
            ``parameters`` map).
        tag: Only operations listing this tag are extracted.
        registry: Canonical model name to model, used to report references
            to unknown models.
        table: Canonicalisation data for type names.

    Returns:
        A ``(operations, imports)`` tuple. ``imports`` holds every non-base
        type name seen in return and parameter types, in order of
        appearance, with repeats.
    """
    paths = raw_spec.get("paths") or {}
    shared = raw_spec.get("parameters") or {}
    operations: list[Operation] = []
    imports: list[str] = []

    for raw_path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        path = interpolate_path(raw_path)
        path_params = path_item.get("parameters") or []

        for method_str, operation in path_item.items():
            try:
                method = HTTPMethod(str(method_str).lower())
            except ValueError:
                continue
            if not isinstance(operation, dict) or tag not in (operation.get("tags") or []):
                continue

            name = operation.get("operationId") or _default_operation_name(method, raw_path)
            context = f"{method.value.upper()} {raw_path}"

            return_type = ""
            response = _success_response(operation.get("responses") or {})
            if response and isinstance(response.get("schema"), dict):
                node = field_type(response["schema"], registry, table, context)
                imports.extend(external_types(node, table))
                return_type = str(node)

            params = [_dereference(p, shared) for p in path_params]
            op_params = [_dereference(p, shared) for p in operation.get("parameters") or []]
            parameters: list[Parameter] = []
            for param in _merge_parameters(params, op_params):
                extracted = _extract_parameter(param, registry, table, context, imports)
                if extracted is not None:
                    parameters.append(extracted)

            operations.append(
                Operation(
                    name=name,
                    method=method,
                    path=path,
                    description=operation.get("description"),
                    return_type=return_type,
                    parameters=parameters,
                )
            )

    return operations, imports


def interpolate_path(path: str) -> str:
    """Rewrite ``{param}`` segments as ``${param}`` template interpolations."""
    return _PATH_PARAM_RE.sub(r"${\1}", path)


def field_type(
    schema: Mapping[str, Any],
    registry: Mapping[str, ModelDefinition],
    table: TypeTable = DEFAULT_TYPE_TABLE,
    context: Optional[str] = None,
) -> TypeNode:
    """Type a parameter or response schema.

    A ``$ref`` names a model directly; an ``array`` recurses into
    ``items``; anything else goes through the type parser. A missing type
    degrades to ``any``.

    References to models missing from *registry* are reported through
    :func:`~specgen.parser.resolver.report_unresolved` and keep the
    referenced name as their type.
    """
    target = resolve_ref(schema.get("$ref"), table)
    if target is not None:
        lookup = target
        while lookup.is_array and lookup.generics:
            lookup = lookup.generics[0]
        if lookup.name not in registry and not table.is_base(lookup.name):
            report_unresolved(lookup.name, context)
        return target

    type_name = schema.get("type")
    if not type_name:
        return parse_type(ANY, table)

    node = parse_type(type_name, table)
    items = schema.get("items")
    if node.is_array and not node.generics and isinstance(items, dict):
        return array_of(field_type(items, registry, table, context))
    return node


def _extract_parameter(
    param: dict[str, Any],
    registry: Mapping[str, ModelDefinition],
    table: TypeTable,
    context: str,
    imports: list[str],
) -> Optional[Parameter]:
    """Convert one raw parameter dict, or return ``None`` for an unknown location."""
    try:
        location = ParameterLocation(param.get("in", "query"))
    except ValueError:
        return None

    # Nested schema keys win over the parameter's own type/items.
    field = {key: param[key] for key in ("type", "items") if key in param}
    if isinstance(param.get("schema"), dict):
        field.update(param["schema"])

    node = field_type(field, registry, table, context)
    imports.extend(external_types(node, table))

    # Swagger 2.0 requires path parameters
    required = bool(param.get("required", False)) or location == ParameterLocation.PATH

    return Parameter(
        name=param.get("name", ""),
        location=location,
        type=str(node),
        required=required,
    )


def _success_response(responses: Mapping[Any, Any]) -> Optional[dict[str, Any]]:
    """Return the ``200`` response object (YAML may key it by integer)."""
    response = responses.get("200", responses.get(200))
    return response if isinstance(response, dict) else None


def _dereference(param: Any, shared: Mapping[str, Any]) -> dict[str, Any]:
    """Replace a ``#/parameters/...`` reference with the shared parameter object."""
    if not isinstance(param, dict):
        return {}
    ref = param.get("$ref")
    if isinstance(ref, str) and ref.startswith(_SHARED_PARAMETER_PREFIX):
        target = shared.get(ref[len(_SHARED_PARAMETER_PREFIX) :])
        if isinstance(target, dict):
            return target
        report_unresolved(ref, "parameters")
        return {}
    return param


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), per the Swagger spec.

    Args:
        path_params: Parameters defined at the path level.
        op_params: Parameters defined at the operation level.

    Returns:
        A merged list of parameter dicts.
    """
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_params if p}

    merged = [
        p for p in path_params
        if p and (p.get("name", ""), p.get("in", "")) not in op_keys
    ]
    merged.extend(p for p in op_params if p)
    return merged


def _default_operation_name(method: HTTPMethod, path: str) -> str:
    """Derive a camelCase name for an operation without ``operationId``.

    ``GET /pets/{petId}/photos`` becomes ``getPetsByPetIdPhotos``.
    """
    parts = [method.value]
    for segment in path.strip("/").split("/"):
        if not segment:
            continue
        match = _PATH_PARAM_RE.fullmatch(segment)
        if match:
            segment = "by_" + match.group(1)
        words = re.split(r"[^0-9a-zA-Z]+", segment)
        parts.extend(word[:1].upper() + word[1:] for word in words if word)
    return "".join(parts)
