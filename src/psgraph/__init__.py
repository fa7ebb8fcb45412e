"""
psgraph - plot single-variable functions as PostScript graphs.

Parses an expression in x, samples it across a window and draws axes, grid
and curve as vector instructions.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import (
    ArgumentError,
    ConfigError,
    LexError,
    LimitsError,
    OutputError,
    ParseError,
    PsGraphError,
)
from .core.expression_lang import evaluate, parse_expr, tokenize
from .core.limits import Limits, default_limits, parse_limits
from .render import render, to_postscript

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "PsGraphError",
    "ArgumentError",
    "ConfigError",
    "LexError",
    "LimitsError",
    "OutputError",
    "ParseError",
    "Limits",
    "default_limits",
    "parse_limits",
    "tokenize",
    "parse_expr",
    "evaluate",
    "render",
    "to_postscript",
]
