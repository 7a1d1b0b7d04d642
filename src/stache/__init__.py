"""stache: compile Handlebars-style templates to Python source.

Templates are translated ahead of time into plain Python statements that
write the rendered output to a sink (any object with ``write(str)``). There
is no runtime template interpreter: every path is resolved against the
block scopes at compile time.

Quickstart:
    >>> from stache import Compiler, Options
    >>> compiled = Compiler(Options(root_var_name="page")).compile(
    ...     "<h1>{{title}}</h1>{{#each items}}<li>{{name}}</li>{{/each}}"
    ... )
    >>> print(compiled.imports())
    from stache.template.helpers import as_display_html
    >>> print(compiled.code)
    out.write('<h1>{}</h1>'.format(as_display_html(page.title)))
    for this_1 in page.items:
        out.write('<li>{}</li>'.format(as_display_html(this_1.name)))

Function generation:
    >>> from stache import generate_function_from_str
    >>> render = generate_function_from_str("{{!def hello(out, name)}}Hi {{name}}").load()

Class templates:
    >>> from stache.derive import template
    >>> @template("<b>{{name}}</b>")
    ... class Tag:
    ...     def __init__(self, name):
    ...         self.name = name
    >>> str(Tag("a & b"))
    '<b>a &amp; b</b>'

Architecture:
Template Source → Scanner → Tokens → Scope resolution → Python AST → unparse

Pipeline stages:
1. **Scanner**: Splits the text into literal prefixes and classified markers
2. **Tokenizer**: Splits marker content into paths, privates, literals
3. **Compiler**: Resolves scopes, opens blocks, batches writes into ``ast``
4. **Coalescing**: Merges adjacent write calls, then ``ast.unparse``

Thread-Safety:
A ``Compiler`` holds only immutable options and a copy-on-write block
registry. Each compile call owns all of its mutable state.

Free-Threading (PEP 703):
Declares GIL-independence via `_Py_mod_gil = 0` attribute.
"""

from stache.compiler import CompiledTemplate, Compiler, Options, optimize_source
from stache.compiler.blocks import Block, BlockFactory
from stache.environment.exceptions import (
    ArityMismatchError,
    ElseNotAllowedError,
    EmptyBlockContentError,
    ErrorCode,
    InvalidSignatureError,
    MismatchedBlockCloseError,
    MissingArgumentError,
    ParseError,
    SourceSnippet,
    TemplateError,
    UnboundPrivateVariableError,
    UnknownHelperError,
    UnresolvableScopeError,
    UnterminatedMarkerError,
    build_source_snippet,
)
from stache.environment.registry import BlockRegistry
from stache.template.helpers import STATIC_NAMESPACE

__version__ = "0.1.0"

__all__ = [
    "STATIC_NAMESPACE",
    "ArityMismatchError",
    "Block",
    "BlockFactory",
    "BlockRegistry",
    "CompiledTemplate",
    "Compiler",
    "ElseNotAllowedError",
    "EmptyBlockContentError",
    "ErrorCode",
    "GeneratedFunction",
    "InvalidSignatureError",
    "MismatchedBlockCloseError",
    "MissingArgumentError",
    "Options",
    "ParseError",
    "SourceSnippet",
    "TemplateError",
    "UnboundPrivateVariableError",
    "UnknownHelperError",
    "UnresolvableScopeError",
    "UnterminatedMarkerError",
    "__version__",
    "build_source_snippet",
    "generate_function_from_file",
    "generate_function_from_str",
    "optimize_source",
]


# Host integration is loaded on first use; plain compilation never needs it.
_LAZY_BUILD = frozenset(
    {"GeneratedFunction", "generate_function_from_file", "generate_function_from_str"}
)


# Free-threading declaration (PEP 703) + lazy host-integration imports
def __getattr__(name: str) -> object:
    """Module-level getattr for free-threading declaration and lazy imports."""
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    if name in _LAZY_BUILD:
        from stache.build import (
            GeneratedFunction,
            generate_function_from_file,
            generate_function_from_str,
        )

        # Populate globals so subsequent access is direct (no __getattr__)
        globals().update(
            GeneratedFunction=GeneratedFunction,
            generate_function_from_file=generate_function_from_file,
            generate_function_from_str=generate_function_from_str,
        )
        return globals()[name]
    raise AttributeError(f"module 'stache' has no attribute {name!r}")
