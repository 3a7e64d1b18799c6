"""
Ports

Interfaces at the edges of the processed-source core:
- ParserBackend: a dialect parser a registry factory builds
- CommentConfig: the downstream interpreter of disable/enable comments
"""

from abc import abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    import ast

    from codegraph_source.models import Comment, DialectVersion
    from codegraph_source.parsing.source_buffer import SourceBuffer


@runtime_checkable
class ParserBackend(Protocol):
    """
    Dialect parser.

    Diagnostics go to the consumer the backend was built with. A terminal
    syntax failure is raised as SyntaxFailure carrying partial results.

    The tree root must be an `ast` node (normally ast.Module): other
    engines plug in by translating their tree to `ast`. ProcessedSource
    rejects any other root with InvalidConfigurationError.
    """

    version: "DialectVersion"

    @abstractmethod
    def tokenize(self, buffer: "SourceBuffer") -> tuple["ast.AST | None", list["Comment"], list[Any]]:
        """
        Lex and parse a buffer.

        Returns:
            (ast root or None, comments, raw tokens)
        """
        ...


@runtime_checkable
class CommentConfig(Protocol):
    """
    Interpretation of inline disable/enable comments.

    Built from a ProcessedSource's comments and lines by a downstream
    component; this package only hands the source over.
    """

    @property
    @abstractmethod
    def disabled_line_ranges(self) -> Mapping[str, Sequence[range]]:
        """Rule name -> line ranges where the rule is disabled"""
        ...
