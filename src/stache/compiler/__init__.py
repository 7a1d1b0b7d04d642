"""stache compiler: template text to Python source.

Public entry points are ``Compiler``, ``Options`` and ``CompiledTemplate``;
``optimize_source`` exposes the write-coalescing pass on its own.
"""

from stache.compiler.coalescing import coalesce_writes, optimize_source
from stache.compiler.core import Compilation, CompiledTemplate, Compiler, Options

__all__ = [
    "CompiledTemplate",
    "Compilation",
    "Compiler",
    "Options",
    "coalesce_writes",
    "optimize_source",
]
