"""Tests for model and operation extraction.

Covers:
- Model registration, property typing and the required flag
- Forward, self and array references bound after registration
- Generic definitions deduplicated by canonical name (first wins)
- Unresolved references logged without aborting
- Operation order, naming, path interpolation and return types
- Parameter typing, location filtering and path-level merging
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from specgen.models import HTTPMethod, ModelDefinition, Operation, ParameterLocation
from specgen.parser.extractor import (
    compile_spec,
    extract_models,
    extract_operations,
    field_type,
    interpolate_path,
)


def _by_name(models: list[ModelDefinition]) -> dict[str, ModelDefinition]:
    return {m.name: m for m in models}


def _prop_types(model: ModelDefinition) -> dict[str, str]:
    return {p.name: p.type for p in model.properties}


# ------------------------------------------------------------------ #
# Models
# ------------------------------------------------------------------ #


class TestExtractModels:
    """Extract the ``definitions`` map into models."""

    def test_models_in_registration_order(self, petstore_raw: dict[str, Any]) -> None:
        models = extract_models(petstore_raw["definitions"])
        assert [m.name for m in models] == [
            "Order",
            "Category",
            "Tag",
            "Pet",
            "ApiResponse",
            "Page",
            "Node",
        ]

    def test_property_types(self, petstore_raw: dict[str, Any]) -> None:
        pet = _by_name(extract_models(petstore_raw["definitions"]))["Pet"]
        assert _prop_types(pet) == {
            "id": "number",
            "category": "Category",
            "name": "string",
            "photoUrls": "string[]",
            "tags": "Tag[]",
            "status": "string",
        }

    def test_required_flag_and_description(self, petstore_raw: dict[str, Any]) -> None:
        pet = _by_name(extract_models(petstore_raw["definitions"]))["Pet"]
        props = {p.name: p for p in pet.properties}
        assert props["name"].required is True
        assert props["photoUrls"].required is True
        assert props["id"].required is False
        assert props["status"].description == "pet status in the store"

    def test_forward_reference_is_bound(self, petstore_raw: dict[str, Any]) -> None:
        # Order is declared before Pet.
        order = _by_name(extract_models(petstore_raw["definitions"]))["Order"]
        assert _prop_types(order)["pet"] == "Pet"

    def test_self_reference_terminates(self, petstore_raw: dict[str, Any]) -> None:
        node = _by_name(extract_models(petstore_raw["definitions"]))["Node"]
        assert _prop_types(node) == {"parent": "Node", "children": "Node[]"}

    def test_generic_definitions_first_wins(self, petstore_raw: dict[str, Any]) -> None:
        models = extract_models(petstore_raw["definitions"])
        pages = [m for m in models if m.name == "Page"]
        assert len(pages) == 1
        assert pages[0].generics == ["Order"]
        assert pages[0].title == "Page«Order»"
        assert _prop_types(pages[0])["content"] == "Order[]"

    def test_declaration_order_does_not_change_types(
        self, petstore_raw: dict[str, Any]
    ) -> None:
        forward = extract_models(petstore_raw["definitions"])
        reversed_defs = dict(reversed(list(petstore_raw["definitions"].items())))
        backward = extract_models(reversed_defs)

        forward_types = {m.name: _prop_types(m) for m in forward}
        backward_types = {m.name: _prop_types(m) for m in backward}
        # Page«Pet» wins in reverse order, so only compare the other models.
        forward_types.pop("Page")
        backward_types.pop("Page")
        assert forward_types == backward_types

    def test_unresolved_reference_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        definitions = {
            "Pet": {"properties": {"owner": {"$ref": "#/definitions/Person"}}},
        }
        with caplog.at_level(logging.WARNING, logger="specgen"):
            models = extract_models(definitions)

        assert _prop_types(models[0]) == {"owner": "any"}
        assert "Person not found" in caplog.text

    def test_missing_type_is_any(self) -> None:
        models = extract_models({"Blob": {"properties": {"data": {}}}})
        assert _prop_types(models[0]) == {"data": "any"}

    def test_nested_inline_arrays(self) -> None:
        models = extract_models(
            {
                "Grid": {
                    "properties": {
                        "cells": {"type": "array", "items": {"type": "array", "items": {"type": "integer"}}}
                    }
                }
            }
        )
        assert _prop_types(models[0]) == {"cells": "number[][]"}

    def test_empty_definitions(self) -> None:
        assert extract_models({}) == []


# ------------------------------------------------------------------ #
# Operations
# ------------------------------------------------------------------ #


def _ops(raw: dict[str, Any], tag: str) -> tuple[list[Operation], list[str]]:
    registry = _by_name(extract_models(raw.get("definitions") or {}))
    return extract_operations(raw, tag, registry)


class TestExtractOperations:
    """Extract the ``paths`` map for one tag."""

    def test_document_order(self, petstore_raw: dict[str, Any]) -> None:
        ops, _ = _ops(petstore_raw, "pet")
        assert [o.name for o in ops] == [
            "addPet",
            "getPetById",
            "deletePet",
            "findPetsByStatus",
            "uploadFile",
        ]

    def test_only_matching_tag(self, petstore_raw: dict[str, Any]) -> None:
        ops, _ = _ops(petstore_raw, "store")
        assert [o.name for o in ops] == ["placeOrder", "listOrders"]
        assert _ops(petstore_raw, "user") == ([], [])

    def test_path_interpolation(self, petstore_raw: dict[str, Any]) -> None:
        ops, _ = _ops(petstore_raw, "pet")
        get = next(o for o in ops if o.name == "getPetById")
        assert get.path == "/pet/${petId}"
        assert get.method == HTTPMethod.GET
        assert get.description == "Returns a single pet"

    def test_return_types(self, petstore_raw: dict[str, Any]) -> None:
        pet_ops, _ = _ops(petstore_raw, "pet")
        store_ops, _ = _ops(petstore_raw, "store")
        returns = {o.name: o.return_type for o in pet_ops + store_ops}
        assert returns == {
            "addPet": "Pet",
            "getPetById": "Pet",
            "deletePet": "",
            "findPetsByStatus": "Pet[]",
            "uploadFile": "ApiResponse",
            "placeOrder": "Order",
            "listOrders": "Page<Order>",
        }

    def test_imports_in_order_of_appearance(self, petstore_raw: dict[str, Any]) -> None:
        _, imports = _ops(petstore_raw, "store")
        assert imports == ["Order", "Order", "Page", "Order"]

    def test_parameters(self, petstore_raw: dict[str, Any]) -> None:
        ops, _ = _ops(petstore_raw, "pet")
        upload = next(o for o in ops if o.name == "uploadFile")
        assert [(p.name, p.location, p.type, p.required) for p in upload.parameters] == [
            ("petId", ParameterLocation.PATH, "number", True),
            ("additionalMetadata", ParameterLocation.FORM_DATA, "string", False),
            ("file", ParameterLocation.FORM_DATA, "File", False),
        ]

    def test_body_and_array_query_parameters(self, petstore_raw: dict[str, Any]) -> None:
        ops, _ = _ops(petstore_raw, "pet")
        by_name = {o.name: o for o in ops}
        body = by_name["addPet"].parameters[0]
        assert (body.name, body.location, body.type) == ("body", ParameterLocation.BODY, "Pet")
        status = by_name["findPetsByStatus"].parameters[0]
        assert (status.location, status.type) == (ParameterLocation.QUERY, "string[]")

    def test_unknown_methods_and_locations_skipped(self) -> None:
        raw = {
            "paths": {
                "/a": {
                    "x-internal": {"tags": ["t"]},
                    "parameters": [],
                    "get": {
                        "tags": ["t"],
                        "operationId": "getA",
                        "parameters": [{"name": "q", "in": "matrix", "type": "string"}],
                    },
                }
            }
        }
        ops, imports = extract_operations(raw, "t", {})
        assert [o.name for o in ops] == ["getA"]
        assert ops[0].parameters == []
        assert ops[0].return_type == ""
        assert imports == []

    def test_default_operation_name(self) -> None:
        raw = {"paths": {"/pets/{petId}/photos": {"get": {"tags": ["t"]}}}}
        ops, _ = extract_operations(raw, "t", {})
        assert ops[0].name == "getPetsByPetIdPhotos"

    def test_path_level_parameters_merged(self) -> None:
        raw = {
            "paths": {
                "/pets/{id}": {
                    "parameters": [
                        {"name": "id", "in": "path", "type": "string"},
                        {"name": "trace", "in": "header", "type": "string"},
                    ],
                    "get": {
                        "tags": ["t"],
                        "operationId": "getPet",
                        "parameters": [{"name": "id", "in": "path", "type": "integer"}],
                    },
                }
            }
        }
        ops, _ = extract_operations(raw, "t", {})
        assert [(p.name, p.type) for p in ops[0].parameters] == [
            ("trace", "string"),
            ("id", "number"),
        ]
        # Path parameters are always required.
        assert ops[0].parameters[1].required is True

    def test_shared_parameter_reference(self) -> None:
        raw = {
            "parameters": {"limit": {"name": "limit", "in": "query", "type": "integer"}},
            "paths": {
                "/pets": {
                    "get": {
                        "tags": ["t"],
                        "operationId": "listPets",
                        "parameters": [{"$ref": "#/parameters/limit"}],
                    }
                }
            },
        }
        ops, _ = extract_operations(raw, "t", {})
        assert [(p.name, p.location, p.type) for p in ops[0].parameters] == [
            ("limit", ParameterLocation.QUERY, "number")
        ]

    def test_integer_response_key(self) -> None:
        raw = {
            "paths": {
                "/n": {
                    "get": {
                        "tags": ["t"],
                        "operationId": "count",
                        "responses": {200: {"schema": {"type": "integer"}}},
                    }
                }
            }
        }
        ops, _ = extract_operations(raw, "t", {})
        assert ops[0].return_type == "number"

    def test_unknown_model_in_response_is_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        raw = {
            "paths": {
                "/p": {
                    "get": {
                        "tags": ["t"],
                        "operationId": "getP",
                        "responses": {"200": {"schema": {"$ref": "#/definitions/Person"}}},
                    }
                }
            }
        }
        with caplog.at_level(logging.WARNING, logger="specgen"):
            ops, imports = extract_operations(raw, "t", {})

        assert ops[0].return_type == "Person"
        assert imports == ["Person"]
        assert "Person not found (referenced from GET /p)" in caplog.text


class TestFieldType:
    def test_ref(self) -> None:
        registry = {"Pet": ModelDefinition(name="Pet")}
        assert str(field_type({"$ref": "#/definitions/Pet"}, registry)) == "Pet"

    def test_array_of_ref(self) -> None:
        registry = {"Pet": ModelDefinition(name="Pet")}
        schema = {"type": "array", "items": {"$ref": "#/definitions/Pet"}}
        assert str(field_type(schema, registry)) == "Pet[]"

    def test_no_type(self) -> None:
        assert str(field_type({}, {})) == "any"


class TestInterpolatePath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/pets", "/pets"),
            ("/pets/{id}", "/pets/${id}"),
            ("/a/{x}/b/{y}", "/a/${x}/b/${y}"),
        ],
    )
    def test_interpolation(self, path: str, expected: str) -> None:
        assert interpolate_path(path) == expected


# ------------------------------------------------------------------ #
# compile_spec
# ------------------------------------------------------------------ #


class TestCompileSpec:
    def test_compiles_models_and_modules(self, petstore_compiled) -> None:
        assert len(petstore_compiled.models) == 7
        assert [m.name for m in petstore_compiled.modules] == ["pet", "store"]

    def test_raw_document_is_kept(self, petstore_raw: dict[str, Any]) -> None:
        compiled = compile_spec(petstore_raw)
        assert compiled.raw_spec == petstore_raw

    def test_compilations_are_independent(self, petstore_raw: dict[str, Any]) -> None:
        first = compile_spec(petstore_raw)
        second = compile_spec(petstore_raw)
        assert first.manifest() == second.manifest()
        assert first.models[0] is not second.models[0]

    def test_minimal_document(self, minimal_raw: dict[str, Any]) -> None:
        compiled = compile_spec(minimal_raw)

        assert len(compiled.models) == 1
        pet = compiled.models[0]
        assert pet.name == "Pet"
        assert [(p.name, p.type, p.required) for p in pet.properties] == [
            ("id", "number", True),
            ("name", "string", False),
        ]

        assert len(compiled.modules) == 1
        module = compiled.modules[0]
        assert module.name == "pet"
        assert module.imports == ["Pet"]
        assert len(module.operations) == 1
        op = module.operations[0]
        assert (op.method, op.path, op.return_type) == (HTTPMethod.GET, "/pets/${id}", "Pet")

    def test_empty_document(self) -> None:
        compiled = compile_spec({"swagger": "2.0"})
        assert compiled.models == []
        assert compiled.modules == []
