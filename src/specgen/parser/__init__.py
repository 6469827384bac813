"""Swagger compiler -- load a document and compile it into models and modules.

This sub-package is the first half of the specgen pipeline: turning a raw
Swagger 2.0 document (JSON or YAML, local file or remote URL) into a
:class:`~specgen.models.CompiledSpec` that the generator can render.

Typical usage::

    from specgen.parser import compile_spec, load_document, validate_swagger_version

    raw = load_document("https://petstore.swagger.io/v2/swagger.json")
    validate_swagger_version(raw)
    compiled = compile_spec(raw)

Sub-modules:

* :mod:`~specgen.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and Swagger version validation.
* :mod:`~specgen.parser.notation` -- Type-notation parser producing
  :class:`~specgen.parser.notation.TypeNode` trees.
* :mod:`~specgen.parser.resolver` -- ``$ref`` naming and the deferred
  binding queue.
* :mod:`~specgen.parser.extractor` -- Model and operation extraction.
* :mod:`~specgen.parser.assembler` -- Per-tag module assembly.
"""

from specgen.parser.extractor import compile_spec
from specgen.parser.loader import load_document, validate_swagger_version

__all__ = ["compile_spec", "load_document", "validate_swagger_version"]
