"""
Parsing Layer

Dialect-aware parsing infrastructure behind ProcessedSource.

Components:
- source_buffer: Normalized source text and line view
- diagnostics: Diagnostic sink and reporting policy
- backends: CPython parser backends, one per language release
- parser_registry: Dialect version -> backend factory
- syntax_tree: Tree wrapper with spans and comment association
"""

from codegraph_source.parsing.backends import PythonBackend
from codegraph_source.parsing.diagnostics import DiagnosticEngine, DiagnosticSink
from codegraph_source.parsing.parser_registry import (
    SUPPORTED_PYTHON_VERSIONS,
    BackendRegistry,
    get_registry,
)
from codegraph_source.parsing.source_buffer import STRING_SOURCE_NAME, SourceBuffer
from codegraph_source.parsing.syntax_tree import SyntaxTree

__all__ = [
    "BackendRegistry",
    "get_registry",
    "SUPPORTED_PYTHON_VERSIONS",
    "PythonBackend",
    "DiagnosticEngine",
    "DiagnosticSink",
    "SourceBuffer",
    "STRING_SOURCE_NAME",
    "SyntaxTree",
]
