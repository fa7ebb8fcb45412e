"""
Error types for psgraph configuration, lexing, parsing and output.

Every failure that stops a run derives from PsGraphError and carries the
exit status the CLI reports for it. Domain violations during evaluation are
not errors: they surface as NaN/inf samples and are handled by the renderer.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional


class PsGraphError(Exception):
    """Base exception for all psgraph errors."""

    stage = "error"
    exit_code = 1

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class ConfigError(PsGraphError):
    """
    Raised when a psgraph.toml file cannot be loaded.

    Examples:
    - Malformed TOML
    - Non-positive sampling step or page size
    - Colour components outside 0..1
    """

    stage = "config"
    exit_code = 1


class ArgumentError(PsGraphError):
    """Raised for a malformed invocation, e.g. an empty expression."""

    stage = "arguments"
    exit_code = 2


class OutputError(PsGraphError):
    """Raised when the output sink cannot be opened or written."""

    stage = "output"
    exit_code = 3


class LimitsError(PsGraphError):
    """
    Raised when axis limits are malformed or unusable.

    Examples:
    - "1:2:3" (three fields)
    - "5:1:0:10" (x_min > x_max)
    - "0:0:-1:1" (zero-width window, cannot be scaled)
    """

    stage = "limits"
    exit_code = 4


class LexErrorKind(StrEnum):
    """Reasons the lexer can reject its input."""

    UNBALANCED_BRACKETS = "unbalanced brackets"
    MALFORMED_NUMBER = "malformed number"
    MALFORMED_EXPONENT = "malformed exponent"
    UNKNOWN_IDENTIFIER = "unknown identifier"
    IDENTIFIER_TOO_LONG = "identifier too long"
    UNKNOWN_CHARACTER = "unknown character"


class LexError(PsGraphError):
    """Raised when the expression text cannot be tokenized."""

    stage = "lexer"
    exit_code = 5

    def __init__(
        self,
        kind: LexErrorKind,
        message: str,
        context: Optional["ErrorContext"] = None,
    ):
        self.kind = kind
        super().__init__(message, context)


class ParseErrorKind(StrEnum):
    """Reasons the parser can reject a token stream."""

    UNEXPECTED_TOKEN = "unexpected token"
    EXPECTED_OPEN_PAREN = "expected '('"
    EXPECTED_CLOSE_PAREN = "expected ')'"
    TRAILING_INPUT = "invalid expression"
    TOO_DEEP = "nesting too deep"


class ParseError(PsGraphError):
    """Raised when the token stream does not form an expression."""

    stage = "parser"
    exit_code = 6

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        context: Optional["ErrorContext"] = None,
    ):
        self.kind = kind
        super().__init__(message, context)


@dataclass
class ErrorContext:
    """
    Location of an error inside the expression text.

    Attributes:
        source: The full expression text
        column: Offending character offset (0-indexed)
    """

    source: str
    column: int

    def format(self) -> str:
        """
        Format the context as the source line with a caret under the column.

        Returns:
            Formatted string like:
                "  sin(0\\n      ^"
        """
        column = min(max(self.column, 0), len(self.source))
        return f"  {self.source}\n  {' ' * column}^"


def make_lex_error(kind: LexErrorKind, message: str, source: str, column: int) -> LexError:
    """
    Helper to create a LexError with context.

    Args:
        kind: Lexer failure category
        message: Error description
        source: Expression text being scanned
        column: Offset of the offending character

    Returns:
        LexError with context attached
    """
    return LexError(kind, message, ErrorContext(source=source, column=column))


def make_parse_error(
    kind: ParseErrorKind,
    message: str,
    source: str | None = None,
    column: int | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with optional context.

    The parser can run on a bare token list, in which case the source text
    is unknown and no snippet is attached.
    """
    if source is not None and column is not None:
        return ParseError(kind, message, ErrorContext(source=source, column=column))
    return ParseError(kind, message)
