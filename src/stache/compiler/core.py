"""stache Compiler Core: the Compiler facade and one compilation run.

The Compiler turns Handlebars-style template text into Python source that
writes the rendered output to a sink object. Uses a mixin-based design:
scope resolution, expression compilation and output batching each live in
their own mixin, combined on ``Compilation``.

Design Principles:
1. **AST first**: Generate ``ast`` nodes, render with ``ast.unparse``
2. **Batched output**: Literals and values between control-flow markers
   become one ``out.write(...)`` call
3. **Compile-time scopes**: Every path resolves to a Python expression
   before any code runs; there is no runtime lookup
4. **O(1) dispatch**: Dict-based expression type → handler lookup

Example:
    >>> compiled = Compiler(Options(root_var_name="obj", write_var_name="w")).compile(
    ...     "Hello {{{name}}}!"
    ... )
    >>> print(compiled.code)
    w.write('Hello {}!'.format(as_display(obj.name)))
    >>> compiled.imports()
    'from stache.template.helpers import as_display'

A ``Compiler`` holds only immutable configuration and may be shared between
threads. Each ``compile()`` call creates a fresh ``Compilation`` that owns the
scope stack, the output frames and the capability set.
"""

from __future__ import annotations

import ast
import keyword
import logging
from collections.abc import Callable
from dataclasses import dataclass

from stache.compiler.blocks.base import Root
from stache.compiler.coalescing import coalesce_writes
from stache.compiler.expressions import ExpressionCompilationMixin
from stache.compiler.output import OutputMixin, PendingWrite
from stache.compiler.scope import Scope, ScopeMixin
from stache.environment.exceptions import (
    ElseNotAllowedError,
    EmptyBlockContentError,
    MismatchedBlockCloseError,
    ParseError,
    UnknownHelperError,
)
from stache.environment.registry import BlockRegistry
from stache.expression import Expression, ExpressionType, scan
from stache.tokenizer import Token
from stache.utils.constants import RUNTIME_MODULE, USE_AS_DISPLAY, USE_AS_DISPLAY_HTML

logger = logging.getLogger(__name__)

ELSE = "else"


def _check_identifier(value: str, option: str) -> None:
    if not value.isidentifier() or keyword.iskeyword(value):
        raise ValueError(f"{option} must be a Python identifier, got {value!r}")


@dataclass(frozen=True, slots=True)
class Options:
    """Compilation options.

    Attributes:
        root_var_name: Name of the root object. ``{{x}}`` compiles to
            ``<root>.x``; when None, top-level paths are free-standing names
            (``{{x}}`` compiles to ``x``).
        write_var_name: Name of the sink object generated code writes to.
    """

    root_var_name: str | None = None
    write_var_name: str = "out"

    def __post_init__(self) -> None:
        if self.root_var_name is not None:
            _check_identifier(self.root_var_name, "root_var_name")
        _check_identifier(self.write_var_name, "write_var_name")


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """Result of one compilation.

    Attributes:
        code: Generated Python statements.
        module: The ``ast.Module`` the code was rendered from.
        uses: Runtime capability names the code calls.
    """

    code: str
    module: ast.Module
    uses: frozenset[str]

    def imports(self) -> str:
        """Import line the host must place before ``code``; empty if none."""
        if not self.uses:
            return ""
        return f"from {RUNTIME_MODULE} import {', '.join(sorted(self.uses))}"

    def __str__(self) -> str:
        return self.code


class Compilation(ScopeMixin, ExpressionCompilationMixin, OutputMixin):
    """State of a single compile call.

    Attributes:
        _options: Compilation options
        _blocks: Block registry consulted for ``{{#name}}`` markers
        _source: Template text
        _name: Template name for error messages
        _scopes: Scope arena; index 0 is the root scope
        _frames: Output frames; index 0 is the module body
        _pending: Writes not yet flushed
        _uses: Capabilities required so far
        _bound: Identifiers claimed by blocks
        _free: Free-standing root names the template reads
        _reserved: Sink and root names no block may bind
    """

    __slots__ = (
        "_blocks",
        "_bound",
        "_dispatch",
        "_frames",
        "_free",
        "_name",
        "_options",
        "_pending",
        "_reserved",
        "_scopes",
        "_source",
        "_uses",
    )

    def __init__(
        self,
        options: Options,
        blocks: BlockRegistry,
        source: str,
        name: str | None = None,
    ):
        self._options = options
        self._blocks = blocks
        self._source = source
        self._name = name
        self._scopes: list[Scope] = [Scope(depth=0, block=Root(options.root_var_name))]
        self._frames: list[list[ast.stmt]] = [[]]
        self._pending: list[PendingWrite] = []
        self._uses: set[str] = set()
        self._bound: set[str] = set()
        self._free: set[str] = set()
        self._reserved = frozenset(
            var for var in (options.root_var_name, options.write_var_name) if var is not None
        )
        self._dispatch: dict[ExpressionType, Callable[[Expression], None]] = {
            ExpressionType.COMMENT: self._compile_comment,
            ExpressionType.ESCAPED: self._compile_escaped,
            ExpressionType.RAW: self._compile_raw,
            ExpressionType.HTML_ESCAPED: self._compile_html_escaped,
            ExpressionType.OPEN: self._compile_open,
            ExpressionType.CLOSE: self._compile_close,
        }

    def require(self, capability: str) -> None:
        """Record that generated code calls ``capability``."""
        self._uses.add(capability)

    def run(self) -> CompiledTemplate:
        """Compile the whole template.

        Raises:
            ParseError: On the first error; no partial output is returned.
        """
        source = self._source
        logger.debug("Compiling %s (%d chars)", self._name or "<template>", len(source))

        rest = 0
        offset = 0
        try:
            expression = scan(source)
            while expression is not None:
                offset = expression.start
                self.write_literal(expression.prefix)
                self._dispatch[expression.type](expression)
                rest = expression.end
                expression = expression.next()
        except ParseError as exc:
            exc.locate(source, offset, self._name)
            raise
        self.write_literal(source[rest:])

        if len(self._scopes) > 1:
            raise MismatchedBlockCloseError(
                f"unclosed block {self.current_scope.block.name}",
                source=source,
                offset=len(source),
                name=self._name,
            )
        self.flush()

        body = coalesce_writes(self._frames[0], self._options.write_var_name)
        module = ast.Module(body=body, type_ignores=[])
        ast.fix_missing_locations(module)
        uses = frozenset(self._uses)
        logger.debug("Compiled %s: uses %s", self._name or "<template>", sorted(uses))
        return CompiledTemplate(code=ast.unparse(module), module=module, uses=uses)

    # ─────────────────────────────────────────────────────────────────────────
    # Expression handlers
    # ─────────────────────────────────────────────────────────────────────────

    def _compile_comment(self, expression: Expression) -> None:
        pass

    def _compile_escaped(self, expression: Expression) -> None:
        self.write_literal(expression.content)

    def _compile_raw(self, expression: Expression) -> None:
        self.write_value(self.compile_value(expression.content), USE_AS_DISPLAY)

    def _compile_html_escaped(self, expression: Expression) -> None:
        words = expression.content.split()
        if words[0] == ELSE:
            if len(words) > 1:
                raise ElseNotAllowedError("else with a condition is not supported")
            self.flush()
            self.current_scope.block.handle_else(self, expression)
            return
        self.write_value(self.compile_value(expression.content), USE_AS_DISPLAY_HTML)

    def _compile_open(self, expression: Expression) -> None:
        self.flush()
        token = Token.first(expression.content)
        if token is None:
            raise EmptyBlockContentError("expected a helper name")
        factory = self._blocks.get(token.value)
        if factory is None:
            raise UnknownHelperError(token.value)
        frames = len(self._frames)
        block = factory.open(self, token, expression)
        scope = self.push_scope(block, frames)
        logger.debug("Opened %s at depth %d", token.value, scope.depth)

    def _compile_close(self, expression: Expression) -> None:
        self.flush()
        name = expression.content.strip()
        scope = self.current_scope
        if scope.depth == 0:
            raise MismatchedBlockCloseError(f"unexpected close {name}, no block is open")
        block = scope.block
        if not block.closes_with(name):
            raise MismatchedBlockCloseError(f"{name} does not close {block.name}")
        block.handle_close(self)
        if len(self._frames) != scope.frames:
            raise RuntimeError(
                f"block {block.name} left {len(self._frames) - scope.frames} output frame(s) open"
            )
        self.pop_scope()


class Compiler:
    """Compile Handlebars-style templates to Python source.

    Args:
        options: Compilation options; defaults to ``Options()``.
        blocks: Block registry; defaults to a fresh registry holding the
            builtin blocks.

    Example:
        >>> compiler = Compiler(Options(root_var_name="page"))
        >>> print(compiler.compile("{{#if user}}Hi {{user.name}}{{/if}}").code)
        if as_bool(page.user):
            out.write('Hi {}'.format(as_display_html(page.user.name)))
    """

    __slots__ = ("_blocks", "_options")

    def __init__(self, options: Options | None = None, blocks: BlockRegistry | None = None):
        self._options = options if options is not None else Options()
        self._blocks = blocks if blocks is not None else BlockRegistry.with_builtins()

    @property
    def options(self) -> Options:
        return self._options

    @property
    def blocks(self) -> BlockRegistry:
        return self._blocks

    def compile(self, source: str, name: str | None = None) -> CompiledTemplate:
        """Compile ``source``.

        Args:
            source: Template text.
            name: Template name used in error locations.

        Raises:
            ParseError: The template is malformed.
        """
        return Compilation(self._options, self._blocks, source, name).run()
