"""
Codegraph Source

Processed source units: parsed Python source with cached line, token and
comment views for lint and autocorrect drivers.
"""

__version__ = "0.1.0"

from .exceptions import (
    CodegraphSourceError,
    EncodingError,
    InvalidConfigurationError,
    ParsingError,
    SourceFileNotFoundError,
    SyntaxFailure,
    UnknownDialectError,
)
from .models import Comment, DialectVersion, Diagnostic, Severity, Span, Token
from .processed_source import ProcessedSource

__all__ = [
    "ProcessedSource",
    "Comment",
    "DialectVersion",
    "Diagnostic",
    "Severity",
    "Span",
    "Token",
    "CodegraphSourceError",
    "EncodingError",
    "InvalidConfigurationError",
    "ParsingError",
    "SourceFileNotFoundError",
    "SyntaxFailure",
    "UnknownDialectError",
]
