"""
Tokenizer for the psgraph expression language.

Converts an expression string into a sequence of typed tokens. Bracket
balance is checked for the whole input before the first token is scanned.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum, auto

from psgraph.core.errors import LexErrorKind, make_lex_error
from psgraph.core.ir.expressions import VARIABLE_NAME, MathFunction

logger = logging.getLogger(__name__)

# Longest identifier the lexer accepts (the longest function name is 4)
MAX_IDENTIFIER_LENGTH = 9

_END = ""


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    NUMBER = auto()

    # Names
    IDENT = auto()
    FUNC = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    CARET = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    # End of input
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A single token from the expression tokenizer.

    ``value`` is the parsed float for NUMBER, the function name for FUNC and
    the lexeme for everything else.
    """

    kind: TokenKind
    value: float | str
    pos: int


_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "^": TokenKind.CARET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

_FUNCTION_NAMES = frozenset(f.value for f in MathFunction)


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_letter(c: str) -> bool:
    return c.isascii() and c.isalpha()


def check_brackets(source: str) -> None:
    """Raise LexError if parentheses in ``source`` are unbalanced.

    Reports the first ``)`` that has no open partner, otherwise the last
    ``(`` left unclosed at the end of input.
    """
    open_positions: list[int] = []
    for i, c in enumerate(source):
        if c == "(":
            open_positions.append(i)
        elif c == ")":
            if not open_positions:
                raise make_lex_error(
                    LexErrorKind.UNBALANCED_BRACKETS,
                    "Unbalanced brackets: ')' has no matching '('",
                    source,
                    i,
                )
            open_positions.pop()

    if open_positions:
        raise make_lex_error(
            LexErrorKind.UNBALANCED_BRACKETS,
            "Unbalanced brackets: '(' is never closed",
            source,
            open_positions[-1],
        )


class Lexer:
    """
    Lexer for expression text.

    Holds the source and a scan cursor; ``next_token`` advances the cursor
    past one lexeme per call and returns EOF once the input is exhausted.
    """

    def __init__(self, text: str):
        """
        Initialize lexer.

        Args:
            text: Expression text to tokenize

        Raises:
            LexError: If the parentheses in ``text`` are unbalanced.
        """
        check_brackets(text)
        self.text = text
        self.pos = 0

    @property
    def current_char(self) -> str:
        """Character under the cursor, or "" at end of input."""
        if self.pos >= len(self.text):
            return _END
        return self.text[self.pos]

    def advance(self) -> None:
        """Move to the next character."""
        if self.pos < len(self.text):
            self.pos += 1

    def skip_whitespace(self) -> None:
        while self.current_char and self.current_char.isspace():
            self.advance()

    def next_token(self) -> Token:
        """Scan and return the next token."""
        self.skip_whitespace()
        c = self.current_char

        if c == _END:
            return Token(TokenKind.EOF, "", self.pos)

        if _is_digit(c) or c == ".":
            return self.read_number()

        if _is_letter(c):
            return self.read_identifier()

        kind = _SINGLE_CHAR.get(c)
        if kind is not None:
            start = self.pos
            self.advance()
            return Token(kind, c, start)

        raise make_lex_error(
            LexErrorKind.UNKNOWN_CHARACTER,
            f"Unknown character: {c!r}",
            self.text,
            self.pos,
        )

    def read_number(self) -> Token:
        """
        Read a decimal number with an optional exponent (e.g. 12, .5, 1.2e-3).

        The value is accumulated digit by digit; the exponent is applied as a
        power of ten afterwards.
        """
        start = self.pos
        value = 0.0
        scale = 1.0
        seen_dot = False
        seen_digit = False

        while _is_digit(self.current_char) or self.current_char == ".":
            c = self.current_char
            if c == ".":
                if seen_dot:
                    raise make_lex_error(
                        LexErrorKind.MALFORMED_NUMBER,
                        "Malformed number: more than one decimal point",
                        self.text,
                        self.pos,
                    )
                seen_dot = True
            elif seen_dot:
                scale *= 0.1
                value += (ord(c) - ord("0")) * scale
                seen_digit = True
            else:
                value = value * 10 + (ord(c) - ord("0"))
                seen_digit = True
            self.advance()

        if not seen_digit:
            raise make_lex_error(
                LexErrorKind.MALFORMED_NUMBER,
                "Malformed number: no digits",
                self.text,
                start,
            )

        if self.current_char in ("e", "E"):
            value = self._read_exponent(value)

        return Token(TokenKind.NUMBER, value, start)

    def _read_exponent(self, mantissa: float) -> float:
        """Consume ``e[+-]digits`` and return the scaled mantissa."""
        marker = self.pos
        self.advance()

        sign = 1
        if self.current_char in ("+", "-"):
            if self.current_char == "-":
                sign = -1
            self.advance()

        if not _is_digit(self.current_char):
            raise make_lex_error(
                LexErrorKind.MALFORMED_EXPONENT,
                "Malformed exponent: expected digits after exponent marker",
                self.text,
                marker,
            )

        exponent = 0
        while _is_digit(self.current_char):
            exponent = exponent * 10 + (ord(self.current_char) - ord("0"))
            self.advance()

        c = self.current_char
        if c == "." or c == "(" or _is_letter(c):
            raise make_lex_error(
                LexErrorKind.MALFORMED_EXPONENT,
                f"Malformed exponent: unexpected {c!r} after exponent",
                self.text,
                self.pos,
            )

        if exponent == 0:
            return mantissa
        return _scale_by_power_of_ten(mantissa, sign * exponent)

    def read_identifier(self) -> Token:
        """Read a run of letters: the variable or a function name."""
        start = self.pos
        while _is_letter(self.current_char):
            self.advance()
        word = self.text[start : self.pos]

        if len(word) > MAX_IDENTIFIER_LENGTH:
            raise make_lex_error(
                LexErrorKind.IDENTIFIER_TOO_LONG,
                f"Identifier too long: {word[:MAX_IDENTIFIER_LENGTH]}...",
                self.text,
                start,
            )
        if word == VARIABLE_NAME:
            return Token(TokenKind.IDENT, word, start)
        if word in _FUNCTION_NAMES:
            return Token(TokenKind.FUNC, word, start)

        raise make_lex_error(
            LexErrorKind.UNKNOWN_IDENTIFIER,
            f"Unknown identifier: {word!r}",
            self.text,
            start,
        )

    def tokenize(self) -> list[Token]:
        """Scan the remaining input into a list ending with EOF."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.kind == TokenKind.EOF:
                return tokens


def _scale_by_power_of_ten(value: float, exponent: int) -> float:
    try:
        return value * 10.0**exponent
    except OverflowError:
        # 10**exponent is not representable; the product saturates
        return math.copysign(math.inf, value) if value else 0.0


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens."""
    tokens = Lexer(source).tokenize()
    logger.debug("Tokenized %r into %d tokens", source, len(tokens))
    return tokens
