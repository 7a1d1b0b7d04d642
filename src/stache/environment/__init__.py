"""Compiler environment: errors, terminal formatting and the block registry."""

from stache.environment.exceptions import (
    ArityMismatchError,
    ElseNotAllowedError,
    EmptyBlockContentError,
    ErrorCode,
    InvalidSignatureError,
    MismatchedBlockCloseError,
    MissingArgumentError,
    ParseError,
    TemplateError,
    UnboundPrivateVariableError,
    UnknownHelperError,
    UnresolvableScopeError,
    UnterminatedMarkerError,
)
from stache.environment.registry import BlockRegistry

__all__ = [
    "ArityMismatchError",
    "BlockRegistry",
    "ElseNotAllowedError",
    "EmptyBlockContentError",
    "ErrorCode",
    "InvalidSignatureError",
    "MismatchedBlockCloseError",
    "MissingArgumentError",
    "ParseError",
    "TemplateError",
    "UnboundPrivateVariableError",
    "UnknownHelperError",
    "UnresolvableScopeError",
    "UnterminatedMarkerError",
]
