"""Exceptions for the stache template compiler.

Exception Hierarchy:
TemplateError (base)
└── ParseError                          # Any compile-time failure
    ├── UnterminatedMarkerError          # {{ without }} / unbalanced ( or "
    ├── EmptyBlockContentError           # {{}} / {{# }}
    ├── UnknownHelperError               # {{#nope x}}
    ├── MissingArgumentError             # {{#if}}
    ├── ArityMismatchError               # {{#if a b}}
    ├── MismatchedBlockCloseError        # {{#if a}}{{/each}}
    ├── ElseNotAllowedError              # {{#with a}}{{else}}
    ├── UnresolvableScopeError           # {{../x}} at the root
    ├── UnboundPrivateVariableError      # {{@index}} outside each
    └── InvalidSignatureError            # bad {{!def ...}} header

Compilation is fail-fast: the first error aborts the whole compile and no
partial output is produced. Every error carries a short trailing context
snippet (``near``) and, once located, the template line and column:

    S-SCP-001: unable to resolve scope for ../../title near {{#each items}}{{../../title
      --> page.hbs:1:28
       |
    >  1 | {{#each items}}{{../../title}}{{/each}}
       |

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stache.environment import terminal

# Width of the trailing context snippet attached to every ParseError.
NEAR_CAP = 32


class ErrorCode(Enum):
    """Searchable error codes for compiler errors.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: SCN (scanner), BLK (blocks), SCP (scopes), BLD (host build)
    """

    # Scanner errors (S-SCN-xxx)
    UNTERMINATED_MARKER = "S-SCN-001"
    EMPTY_BLOCK = "S-SCN-002"

    # Block errors (S-BLK-xxx)
    UNKNOWN_HELPER = "S-BLK-001"
    MISSING_ARGUMENT = "S-BLK-002"
    ARITY_MISMATCH = "S-BLK-003"
    MISMATCHED_CLOSE = "S-BLK-004"
    ELSE_NOT_ALLOWED = "S-BLK-005"

    # Scope errors (S-SCP-xxx)
    UNRESOLVABLE_SCOPE = "S-SCP-001"
    UNBOUND_PRIVATE = "S-SCP-002"

    # Host build errors (S-BLD-xxx)
    INVALID_SIGNATURE = "S-BLD-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'scanner', 'block', 'scope', 'build')."""
        prefix = self.value.split("-")[1]
        return {
            "SCN": "scanner",
            "BLK": "block",
            "SCP": "scope",
            "BLD": "build",
        }.get(prefix, "unknown")


def near_snippet(text: str, cap: int = NEAR_CAP) -> str:
    """Return the last ``cap`` characters of ``text``."""
    if len(text) > cap:
        return text[-cap:]
    return text


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format snippet in Rust-inspired diagnostic style with colors."""
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
        if self.column is not None:
            caret = " " * self.column + "^"
            # Line prefix is ">NNN | "
            parts.append(" " * 7 + terminal.error_line(caret))
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 1,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all stache errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None


class ParseError(TemplateError):
    """Compile-time error with a bounded source snippet.

    ``near`` is the trailing context of the text scanned when the error was
    found. Errors raised by the token reader know only the marker content;
    the compiler calls ``locate()`` to attach the template source and offset
    before the error propagates to the host.
    """

    def __init__(
        self,
        message: str,
        *,
        near: str | None = None,
        source: str | None = None,
        offset: int | None = None,
        name: str | None = None,
    ):
        self.message = message
        self.near = near
        self.source = source
        self.offset = offset
        self.name = name
        if near is None and source is not None and offset is not None:
            self.near = near_snippet(source[:offset])
        super().__init__(self._format_message())

    @property
    def lineno(self) -> int | None:
        """Line number where the error occurred (1-based)."""
        if self.source is None or self.offset is None:
            return None
        return self.source.count("\n", 0, self.offset) + 1

    @property
    def col_offset(self) -> int | None:
        """Column offset where the error occurred (0-based)."""
        if self.source is None or self.offset is None:
            return None
        return self.offset - (self.source.rfind("\n", 0, self.offset) + 1)

    def locate(self, source: str, offset: int, name: str | None = None) -> None:
        """Attach template location to an error raised without one.

        Errors that already carry a source keep their offset; only a missing
        template name is filled in.
        """
        if self.name is None:
            self.name = name
        if self.source is not None:
            return
        self.source = source
        self.offset = offset
        if name is not None:
            self.name = name
        if self.near is None:
            self.near = near_snippet(source[:offset])
        self.args = (self._format_message(),)

    def _format_message(self) -> str:
        if self.near:
            return f"{self.message} near {self.near}"
        return self.message

    def format_compact(self) -> str:
        """Format the error as a structured terminal diagnostic.

        Returns:
            Multi-line string with error code, message, location and source
            snippet (when the error has been located).
        """
        parts = [terminal.format_error_header(self.code.value if self.code else None, str(self))]
        lineno = self.lineno
        if lineno is not None and self.source is not None:
            location = f"{self.name or '<template>'}:{lineno}:{self.col_offset}"
            parts.append(f"  --> {terminal.location(location)}")
            snippet = build_source_snippet(self.source, lineno, column=self.col_offset)
            parts.append(snippet.format())
        return "\n".join(parts)


class UnterminatedMarkerError(ParseError):
    """A marker, sub-expression or quoted string was opened and never closed."""

    code: ErrorCode | None = ErrorCode.UNTERMINATED_MARKER


class EmptyBlockContentError(ParseError):
    """A value, block-open or block-close marker has no content."""

    code: ErrorCode | None = ErrorCode.EMPTY_BLOCK


class UnknownHelperError(ParseError):
    """``{{#name ...}}`` names a helper missing from the block registry."""

    code: ErrorCode | None = ErrorCode.UNKNOWN_HELPER

    def __init__(self, helper: str, **kwargs):
        self.helper = helper
        super().__init__(f"unsupported helper {helper}", **kwargs)


class MissingArgumentError(ParseError):
    """A helper that needs an argument was opened without one."""

    code: ErrorCode | None = ErrorCode.MISSING_ARGUMENT


class ArityMismatchError(ParseError):
    """A helper received more (or other) arguments than it accepts."""

    code: ErrorCode | None = ErrorCode.ARITY_MISMATCH


class MismatchedBlockCloseError(ParseError):
    """A close marker does not match the innermost open block.

    Also raised for a close with no open block and for blocks left open at
    the end of the template.
    """

    code: ErrorCode | None = ErrorCode.MISMATCHED_CLOSE


class ElseNotAllowedError(ParseError):
    """``{{else}}`` inside a block without an else arm, or given twice."""

    code: ErrorCode | None = ErrorCode.ELSE_NOT_ALLOWED


class UnresolvableScopeError(ParseError):
    """A path walks above the root scope or is not a valid attribute path."""

    code: ErrorCode | None = ErrorCode.UNRESOLVABLE_SCOPE


class UnboundPrivateVariableError(ParseError):
    """An ``@name`` private variable is not provided by the block it lands on."""

    code: ErrorCode | None = ErrorCode.UNBOUND_PRIVATE


class InvalidSignatureError(ParseError):
    """The leading ``{{!def ...}}`` comment is not a usable function header."""

    code: ErrorCode | None = ErrorCode.INVALID_SIGNATURE
