"""Resolve ``$ref`` pointers to model names, deferring what is not yet known.

Swagger 2.0 documents point at shared schemas with
``{"$ref": "#/definitions/Pet"}``. Unlike a full JSON-Reference resolver,
the compiler never inlines the target: a reference simply *names* a model,
and the canonical name (via :func:`~specgen.parser.notation.parse_type`)
becomes the property's type.

The catch is ordering. A definition may reference one declared later in the
map, or itself. Model extraction therefore runs in two phases:

1. Register every definition. Properties typed by a ``$ref`` keep the
   placeholder type ``any`` and push a *binding* onto a
   :class:`DeferredBindings` queue.
2. :meth:`DeferredBindings.drain` runs every binding once. Each binding
   checks that its target model exists and rewrites the property type, or
   logs an :class:`~specgen.exceptions.UnresolvedReferenceError` and leaves
   the placeholder alone.

Nothing recurses into referenced schemas, so cyclic and self-referential
models cannot loop.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Mapping, Optional

from specgen.exceptions import UnresolvedReferenceError
from specgen.models import ModelDefinition, ModelProperty
from specgen.parser.notation import DEFAULT_TYPE_TABLE, TypeNode, TypeTable, parse_type

logger = logging.getLogger(__name__)

REF_PREFIX = "#/definitions/"

Binding = Callable[[], None]


def ref_name(ref: Optional[str]) -> Optional[str]:
    """Strip the ``#/definitions/`` prefix from *ref*.

    Returns:
        The raw definition name, or ``None`` when *ref* is missing or
        points anywhere else.
    """
    if ref and ref.startswith(REF_PREFIX):
        return ref[len(REF_PREFIX) :]
    return None


def resolve_ref(ref: Optional[str], table: TypeTable = DEFAULT_TYPE_TABLE) -> Optional[TypeNode]:
    """Parse the definition name behind *ref* into a canonical type.

    ``"#/definitions/List«Pet»"`` becomes the node for ``Pet[]``.
    """
    name = ref_name(ref)
    if name is None:
        return None
    return parse_type(name, table)


def report_unresolved(name: str, context: Optional[str] = None) -> None:
    """Log the diagnostic for a reference to an unregistered model."""
    logger.warning("%s", UnresolvedReferenceError(name, context))


class DeferredBindings:
    """FIFO queue of resolution steps run after all definitions are registered.

    Each compilation owns its own queue. :meth:`drain` runs every queued
    binding exactly once; draining again does nothing, and queueing after
    the drain is a programming error.

    Example::

        bindings = DeferredBindings()
        bindings.defer(lambda: print("resolved"))
        bindings.drain()
    """

    def __init__(self) -> None:
        self._queue: deque[Binding] = deque()
        self._drained = False

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def drained(self) -> bool:
        """Whether :meth:`drain` has run."""
        return self._drained

    def defer(self, binding: Binding) -> None:
        """Queue *binding* for the second pass."""
        if self._drained:
            raise RuntimeError("cannot defer a binding after the queue was drained")
        self._queue.append(binding)

    def drain(self) -> int:
        """Run and discard every queued binding, in queue order.

        Returns:
            The number of bindings executed.
        """
        count = 0
        while self._queue:
            binding = self._queue.popleft()
            binding()
            count += 1
        self._drained = True
        return count


def property_binding(
    prop: ModelProperty,
    target: TypeNode,
    registry: Mapping[str, ModelDefinition],
    owner: str,
) -> Binding:
    """Build the binding that types *prop* as *target* once models are known.

    For an array target (``Pet[]``, ``Pet[][]``) the innermost element's
    name is the one looked up.

    Args:
        prop: The property to rewrite; mutated in place.
        target: Canonical referenced type.
        registry: Canonical model name to model. Read when the binding
            runs, not when it is built, so forward references see the
            finished registry.
        owner: Name of the model holding *prop*, for the diagnostic.
    """
    lookup = target
    while lookup.is_array and lookup.generics:
        lookup = lookup.generics[0]

    def bind() -> None:
        if lookup.name in registry:
            prop.type = str(target)
        else:
            report_unresolved(lookup.name, f"{owner}.{prop.name}")

    return bind
