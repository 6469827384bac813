"""Type-notation parser -- decode type strings into :class:`TypeNode` trees.

Swagger 2.0 documents produced by Java toolchains name their definitions
with generic notation, e.g. ``ResponseEntity«List«Pet»»`` or
``Page<Order>``, and property types use JSON-Schema vocabulary
(``integer``, ``array``) rather than the target language's. This module
turns any such string into a small immutable tree and renders the tree back
into one canonical spelling.

Supported notations:

* ``Name<A,B>`` -- generic arguments, nested to any depth.
* ``Name«A,B»`` -- the guillemet variant, normalised to ``<``/``>``.
* ``Elem[]`` -- array suffix, equivalent to ``Array<Elem>``.

Canonical string form:

* an ``array`` node renders as ``Elem[]`` (``any[]`` without an element);
* any other node with generic arguments renders as ``Name<A,B>``;
* a bare node renders as ``Name``.

Name canonicalisation is driven by a :class:`TypeTable` passed into every
call, so independent compilations never share mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

ANY = "any"
ARRAY = "array"


@dataclass(frozen=True)
class TypeTable:
    """Immutable canonicalisation data for :func:`parse_type`.

    Attributes:
        type_map: Foreign primitive/container names mapped to the
            normalised vocabulary (``integer`` -> ``number``).
        base_types: Names that are built into the target language and must
            never be imported from the generated type declarations.
    """

    type_map: Mapping[str, str] = field(default_factory=dict)
    base_types: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_map", MappingProxyType(dict(self.type_map)))
        object.__setattr__(self, "base_types", frozenset(self.base_types))

    def canonical_name(self, name: str) -> str:
        """Map *name* through :attr:`type_map`, returning it unchanged when unmapped."""
        return self.type_map.get(name, name)

    def is_base(self, name: str) -> bool:
        """Whether *name* is a built-in type of the target language."""
        return name in self.base_types


DEFAULT_TYPE_TABLE = TypeTable(
    type_map={
        "integer": "number",
        "int": "number",
        "long": "number",
        "float": "number",
        "double": "number",
        "decimal": "number",
        "bigdecimal": "number",
        "Integer": "number",
        "Long": "number",
        "Double": "number",
        "Boolean": "boolean",
        "String": "string",
        "Object": "object",
        "date": "string",
        "file": "File",
        "List": ARRAY,
        "Set": ARRAY,
        "Array": ARRAY,
        "Map": "Record",
        "Void": "void",
    },
    base_types=frozenset(
        {
            "string",
            "number",
            "object",
            "boolean",
            ARRAY,
            ANY,
            "void",
            "undefined",
            "null",
            "Record",
            "File",
        }
    ),
)
"""Canonicalisation table for the default TypeScript templates."""


@dataclass(frozen=True)
class TypeNode:
    """A parsed type: a name plus ordered generic arguments.

    ``str(node)`` yields the canonical spelling. Nodes compare by value, so
    two notations that mean the same type produce equal trees.
    """

    name: str
    generics: tuple[TypeNode, ...] = ()

    @property
    def is_array(self) -> bool:
        return self.name == ARRAY

    def __str__(self) -> str:
        if self.is_array:
            element = str(self.generics[0]) if self.generics else ANY
            return f"{element}[]"
        if self.generics:
            return f"{self.name}<{','.join(str(g) for g in self.generics)}>"
        return self.name


def array_of(element: TypeNode) -> TypeNode:
    """Wrap *element* in an ``array`` node."""
    return TypeNode(ARRAY, (element,))


def split_generic_args(segment: str) -> list[str]:
    """Split the inside of a generic segment into its top-level arguments.

    Walks the characters once keeping a bracket depth: ``<`` increments it,
    ``>`` decrements it, and a comma is a split point only at depth zero.
    ``"A,Map<K,V>"`` therefore yields ``["A", "Map<K,V>"]``.

    Args:
        segment: Text between the outermost ``<`` and ``>``, with
            guillemets already normalised.

    Returns:
        The arguments, stripped of surrounding whitespace, in order.
    """
    args: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(segment):
        if char == "<":
            depth += 1
        elif char == ">":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            args.append(segment[start:index].strip())
            start = index + 1
    if start < len(segment):
        args.append(segment[start:].strip())
    return args


def parse_type(notation: Optional[str], table: TypeTable = DEFAULT_TYPE_TABLE) -> TypeNode:
    """Parse a type string into a :class:`TypeNode`.

    The function is pure: the same input and table always give the same
    tree, regardless of what was parsed before.

    Args:
        notation: The type string, e.g. ``"List«Pet»"``, ``"Pet[]"``, or
            ``"integer"``. ``None`` or blank input parses as ``any``.
        table: Canonicalisation data applied to every base name.

    Returns:
        The parsed tree.

    Example::

        >>> str(parse_type("List<Set<Product<S,B>>>"))
        'Product<S,B>[][]'
    """
    notation = (notation or "").strip()
    if not notation:
        return TypeNode(ANY)

    notation = notation.replace("«", "<").replace("»", ">")

    if notation.endswith("[]"):
        return array_of(parse_type(notation[:-2], table))

    name = notation
    generics: tuple[TypeNode, ...] = ()
    start = notation.find("<")
    if start > -1:
        name = notation[:start]
        end = notation.rfind(">")
        if end > start:
            generics = tuple(
                parse_type(arg, table)
                for arg in split_generic_args(notation[start + 1 : end])
            )

    return TypeNode(table.canonical_name(name.strip()) or ANY, generics)


def canonical(notation: Optional[str], table: TypeTable = DEFAULT_TYPE_TABLE) -> str:
    """Shorthand for ``str(parse_type(notation, table))``."""
    return str(parse_type(notation, table))


def external_types(node: TypeNode, table: TypeTable = DEFAULT_TYPE_TABLE) -> list[str]:
    """List every non-base type name in *node*, depth-first.

    Repeats are kept; callers deduplicate.

    Args:
        node: A parsed type.
        table: Supplies the set of base type names to leave out.

    Returns:
        Names that the generated code has to import.
    """
    names: list[str] = []
    if not table.is_base(node.name):
        names.append(node.name)
    for generic in node.generics:
        names.extend(external_types(generic, table))
    return names
