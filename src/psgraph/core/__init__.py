"""Core psgraph functionality: IR, expression language, limits, configuration, errors."""

from . import ir
from .config import RenderConfig, find_config, load_config
from .errors import (
    ArgumentError,
    ConfigError,
    ErrorContext,
    LexError,
    LexErrorKind,
    LimitsError,
    OutputError,
    ParseError,
    ParseErrorKind,
    PsGraphError,
)
from .limits import Limits, default_limits, parse_limits

__all__ = [
    "ir",
    "PsGraphError",
    "ArgumentError",
    "ConfigError",
    "OutputError",
    "LimitsError",
    "LexError",
    "LexErrorKind",
    "ParseError",
    "ParseErrorKind",
    "ErrorContext",
    "Limits",
    "default_limits",
    "parse_limits",
    "RenderConfig",
    "load_config",
    "find_config",
]
