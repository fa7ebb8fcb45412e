"""
psgraph expression language.

Tokenizer, parser and evaluator for single-variable expressions in x.

Usage:
    from psgraph.core.expression_lang import parse_expr, evaluate

    expr = parse_expr("sin(x) + x^2")
    y = evaluate(expr, 1.5)
"""

from psgraph.core.expression_lang.evaluator import evaluate, sample
from psgraph.core.expression_lang.parser import parse, parse_expr
from psgraph.core.expression_lang.tokenizer import Lexer, Token, TokenKind, tokenize

__all__ = ["Lexer", "Token", "TokenKind", "evaluate", "parse", "parse_expr", "sample", "tokenize"]
