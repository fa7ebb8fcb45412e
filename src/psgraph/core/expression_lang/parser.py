"""
Recursive descent parser for the psgraph expression language.

Grammar (precedence low to high):
    expr    → term (("+" | "-") term)*
    term    → factor (("*" | "/" | "^") factor)*
    factor  → "-" factor
            | NUMBER
            | IDENT
            | FUNC "(" expr ")"
            | "(" expr ")"

"*", "/" and "^" share one left-associative level, so 2^3^2 is (2^3)^2
and 2*3^2 is (2*3)^2.

Nesting of parentheses, calls and unary minus is limited to
MAX_NESTING_DEPTH levels; long flat chains such as x+x+...+x are not.
"""

from __future__ import annotations

import logging

from psgraph.core.errors import ArgumentError, ParseError, ParseErrorKind, make_parse_error
from psgraph.core.expression_lang.tokenizer import Token, TokenKind, tokenize
from psgraph.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Call,
    Expr,
    MathFunction,
    Number,
    UnaryMinus,
    Variable,
)

logger = logging.getLogger(__name__)

# Deepest chain of parentheses, calls and unary minus parse_factor will enter
MAX_NESTING_DEPTH = 100

_ADDITIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
}

_MULTIPLICATIVE_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
    TokenKind.CARET: BinaryOp.POW,
}

_TOKEN_NAMES: dict[TokenKind, str] = {
    TokenKind.LPAREN: "'('",
    TokenKind.RPAREN: "')'",
    TokenKind.EOF: "end of input",
}


def _describe(tok: Token) -> str:
    if tok.kind in _TOKEN_NAMES:
        return _TOKEN_NAMES[tok.kind]
    if tok.kind == TokenKind.NUMBER:
        return f"number {tok.value:g}"
    return repr(tok.value)


class _Parser:
    """Recursive descent parser over a token list with one-token lookahead."""

    def __init__(self, tokens: list[Token], source: str | None = None) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            end = tokens[-1].pos + 1 if tokens else 0
            tokens = [*tokens, Token(TokenKind.EOF, "", end)]
        self.tokens = tokens
        self.source = source
        self.pos = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def expect(self, kind: TokenKind, error_kind: ParseErrorKind) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise self._error(
                error_kind,
                f"Expected {_TOKEN_NAMES.get(kind, kind)}, got {_describe(tok)}",
                tok,
            )
        return self.advance()

    def _enter(self, tok: Token) -> None:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise self._error(
                ParseErrorKind.TOO_DEEP,
                f"Expression nested too deeply (more than {MAX_NESTING_DEPTH} levels)",
                tok,
            )

    def _leave(self) -> None:
        self.depth -= 1

    def _error(self, kind: ParseErrorKind, message: str, tok: Token) -> ParseError:
        return make_parse_error(
            kind,
            message,
            self.source,
            tok.pos if self.source is not None else None,
        )

    # -- Grammar rules --

    def parse_expr(self) -> Expr:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while self.current.kind in _ADDITIVE_OPS:
            op = _ADDITIVE_OPS[self.advance().kind]
            right = self.parse_term()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_term(self) -> Expr:
        """factor (('*' | '/' | '^') factor)*"""
        left = self.parse_factor()
        while self.current.kind in _MULTIPLICATIVE_OPS:
            op = _MULTIPLICATIVE_OPS[self.advance().kind]
            right = self.parse_factor()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_factor(self) -> Expr:
        """'-' factor | NUMBER | IDENT | FUNC '(' expr ')' | '(' expr ')'"""
        tok = self.current

        if tok.kind == TokenKind.MINUS:
            self._enter(tok)
            self.advance()
            operand = self.parse_factor()
            self._leave()
            return UnaryMinus(operand=operand)

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return Number(value=float(tok.value))

        if tok.kind == TokenKind.IDENT:
            self.advance()
            return Variable()

        if tok.kind == TokenKind.FUNC:
            return self._parse_call()

        if tok.kind == TokenKind.LPAREN:
            self._enter(tok)
            self.advance()
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN, ParseErrorKind.EXPECTED_CLOSE_PAREN)
            self._leave()
            return expr

        raise self._error(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"Unexpected token: {_describe(tok)}",
            tok,
        )

    def _parse_call(self) -> Call:
        """FUNC '(' expr ')'"""
        self._enter(self.current)
        name_tok = self.advance()
        self.expect(TokenKind.LPAREN, ParseErrorKind.EXPECTED_OPEN_PAREN)
        arg = self.parse_expr()
        self.expect(TokenKind.RPAREN, ParseErrorKind.EXPECTED_CLOSE_PAREN)
        self._leave()
        return Call(func=MathFunction(name_tok.value), arg=arg)


def parse(tokens: list[Token], source: str | None = None) -> Expr:
    """Parse a token list into an AST.

    Args:
        tokens: Tokens from :func:`tokenize`; a trailing EOF is added if
            missing.
        source: Expression text, used only to attach caret snippets to errors.

    Returns:
        Parsed expression AST that consumed every token.

    Raises:
        ParseError: On the first malformed construct or trailing input.
    """
    parser = _Parser(tokens, source)
    expr = parser.parse_expr()

    # Ensure all tokens consumed
    if parser.current.kind != TokenKind.EOF:
        raise parser._error(
            ParseErrorKind.TRAILING_INPUT,
            f"Invalid expression: unexpected {_describe(parser.current)} after expression",
            parser.current,
        )

    return expr


def parse_expr(source: str) -> Expr:
    """Lex and parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "sin(x) + x^2")

    Returns:
        Parsed expression AST.

    Raises:
        ArgumentError: If the expression is empty.
        LexError: If tokenization fails.
        ParseError: If the expression is invalid.
    """
    if not source.strip():
        raise ArgumentError("Expression is empty")

    expr = parse(tokenize(source), source)
    logger.debug("Parsed %r as %s", source, expr)
    return expr
