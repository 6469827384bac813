"""Generator -- render a compiled spec and write it to disk.

This sub-package is the second half of the specgen pipeline. It takes the
:class:`~specgen.models.CompiledSpec` produced by :mod:`specgen.parser` and
turns it into files:

* :mod:`~specgen.generator.renderer` -- Jinja2 rendering with the
  four-slot module template contract.
* :mod:`~specgen.generator.formatter` -- Best-effort JSON and prettier
  formatting.
* :mod:`~specgen.generator.emitter` -- Ordered, atomic writes of every
  artifact.
"""

from specgen.generator.emitter import emit
from specgen.generator.renderer import ModuleTemplates, Renderer

__all__ = ["emit", "ModuleTemplates", "Renderer"]
