"""
Processed source

A parsed source unit: raw text plus a dialect version in, syntax tree,
tokens, comments and diagnostics out, with cached line-oriented views on
top. Instances are built once per analysis pass and never updated; parse
again by constructing a new instance.
"""

import ast
import hashlib
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from functools import cached_property
from pathlib import Path
from typing import Any, Protocol

from codegraph_source.config import SourceSettings, get_settings
from codegraph_source.exceptions import EncodingError, InvalidConfigurationError, SourceFileNotFoundError, SyntaxFailure
from codegraph_source.models import Comment, DialectVersion, Diagnostic, Token
from codegraph_source.observability import get_logger
from codegraph_source.parsing.diagnostics import DiagnosticSink
from codegraph_source.parsing.parser_registry import BackendRegistry, get_registry
from codegraph_source.parsing.source_buffer import STRING_SOURCE_NAME, SourceBuffer
from codegraph_source.parsing.syntax_tree import SyntaxTree
from codegraph_source.ports import CommentConfig, ParserBackend

logger = get_logger(__name__)

_LEADING_WHITESPACE = re.compile(r"^(\s*)", re.ASCII)


class _Located(Protocol):
    line: int


CommentConfigFactory = Callable[["ProcessedSource"], CommentConfig]


class ProcessedSource:
    """
    Parsed source with cached derived views.

    Attributes:
        path: Source path, or None for in-memory source
        buffer: Normalized source buffer
        tree: SyntaxTree, or None when nothing parsed (blank or invalid source)
        comments: Comments in source order
        tokens: Tokens in source order (comments included)
        diagnostics: Everything the parser reported, in order
        parser_error: Terminal failure (encoding) that prevented parsing
        raw_source: Source exactly as given
        dialect_version: Version the backend was selected for
    """

    def __init__(
        self,
        source: str | bytes,
        dialect_version: DialectVersion | tuple[int, int] | str | None,
        path: str | Path | None = None,
        *,
        settings: SourceSettings | None = None,
        registry: BackendRegistry | None = None,
        comment_config_factory: CommentConfigFactory | None = None,
    ):
        self.settings = settings if settings is not None else get_settings()
        self.registry = registry if registry is not None else get_registry()

        if dialect_version is None:
            dialect_version = self.settings.dialect_version

        # Unknown versions fail here, before anything is parsed
        self._backend_factory = self.registry.select(dialect_version)
        self.dialect_version = DialectVersion.parse(dialect_version)

        self.raw_source = source
        self.path = str(path) if path is not None else None
        self.parser_error: EncodingError | None = None
        self.tree: SyntaxTree | None = None
        self.comments: tuple[Comment, ...] = ()
        self.tokens: tuple[Token, ...] = ()
        self.buffer = SourceBuffer(self.path or STRING_SOURCE_NAME, 1)
        self._sink = DiagnosticSink()
        self._comment_config_factory = comment_config_factory

        self._parse(source)
        self.diagnostics: tuple[Diagnostic, ...] = self._sink.diagnostics

        logger.debug(
            "source_processed",
            path=self.file_path,
            dialect=str(self.dialect_version),
            tokens=len(self.tokens),
            comments=len(self.comments),
            diagnostics=len(self.diagnostics),
            blank=self.blank,
        )

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        dialect_version: DialectVersion | tuple[int, int] | str | None,
        **kwargs: Any,
    ) -> "ProcessedSource":
        """
        Read a file (binary) and process it.

        Raises:
            SourceFileNotFoundError: If path does not exist
        """
        try:
            source = Path(path).read_bytes()
        except FileNotFoundError as e:
            raise SourceFileNotFoundError(str(path)) from e
        return cls(source, dialect_version, path, **kwargs)

    # ========================================================================
    # Parsing
    # ========================================================================

    def _parse(self, source: str | bytes) -> None:
        try:
            self.buffer.source = source
        except EncodingError as e:
            self.parser_error = e
            logger.warning("source_encoding_error", path=self.file_path, error=str(e))
            return

        tree, comments, tokens = self._tokenize(self._create_parser())
        self.tree = tree
        self.comments = tuple(comments)
        self.tokens = tuple(tokens)

    def _create_parser(self) -> ParserBackend:
        return self._backend_factory(
            self._sink,
            all_errors_are_fatal=self.settings.all_errors_are_fatal,
            ignore_warnings=self.settings.ignore_warnings,
        )

    def _tokenize(self, parser: ParserBackend) -> tuple[SyntaxTree | None, list[Comment], list[Token]]:
        try:
            root, comments, raw_tokens = parser.tokenize(self.buffer)
        except SyntaxFailure as e:
            # Everything the caller needs is already in diagnostics
            logger.debug("syntax_failure_absorbed", path=self.file_path, error=e.message)
            root, comments, raw_tokens = None, e.comments, e.tokens

        if root is not None and not isinstance(root, ast.AST):
            raise InvalidConfigurationError(
                "Parser backend returned a tree root that is not an ast node",
                {"backend": repr(parser), "root_type": type(root).__name__},
            )

        tree = SyntaxTree(self.buffer, root).complete() if root is not None else None
        tokens = [Token.from_token_info(t) for t in raw_tokens]
        return tree, list(comments), tokens

    # ========================================================================
    # Derived views
    # ========================================================================

    @property
    def file_path(self) -> str:
        return self.buffer.name

    @property
    def valid_syntax(self) -> bool:
        if self.parser_error is not None:
            return False
        return not any(d.is_error for d in self.diagnostics)

    @property
    def blank(self) -> bool:
        return self.tree is None

    @cached_property
    def checksum(self) -> str:
        """SHA-1 of the raw source bytes, for spotting autocorrect loops."""
        return hashlib.sha1(_raw_bytes(self.raw_source)).hexdigest()

    @cached_property
    def lines(self) -> list[str]:
        """
        Source lines, terminators removed, excluding a trailing end marker
        line and everything after it.

        The marker only counts at or after the last token's line; with no
        tokens any marker line truncates.
        """
        if self.parser_error is not None:
            return []

        all_lines = self.buffer.source_lines
        last_token_line = self.tokens[-1].line if self.tokens else 0
        end_marker = self.settings.end_marker

        result = []
        for ix, line in enumerate(all_lines):
            if ix >= last_token_line and line == end_marker:
                break
            result.append(line)
        return result

    def __getitem__(self, index: int | slice) -> str | list[str] | None:
        try:
            return self.lines[index]
        except IndexError:
            return None

    @cached_property
    def _comment_lines(self) -> frozenset[int]:
        return frozenset(c.location.line for c in self.comments)

    @cached_property
    def ast_with_comments(self) -> dict[ast.AST, list[Comment]] | None:
        """Comments grouped by their nearest enclosing node."""
        if self.tree is None:
            return None
        return self.tree.associate_comments(self.comments)

    @cached_property
    def comment_config(self) -> CommentConfig:
        if self._comment_config_factory is None:
            raise InvalidConfigurationError(
                "No comment config factory configured",
                {"path": self.file_path},
            )
        return self._comment_config_factory(self)

    @property
    def disabled_line_ranges(self) -> Mapping[str, Sequence[range]]:
        return self.comment_config.disabled_line_ranges

    # ========================================================================
    # Queries
    # ========================================================================

    def commented(self, location: _Located) -> bool:
        return location.line in self._comment_lines

    def comments_before_line(self, line: int) -> list[Comment]:
        return [c for c in self.comments if c.location.line <= line]

    def start_with(self, string: str) -> bool:
        first = self[0]
        if first is None:
            return False
        return first.startswith(string)

    def preceding_line(self, token: _Located) -> str | None:
        return self._line_at(token.line - 2)

    def following_line(self, token: _Located) -> str | None:
        return self._line_at(token.line)

    def line_indentation(self, line_number: int) -> int:
        line = self._line_at(line_number - 1)
        if line is None:
            return 0
        return len(_LEADING_WHITESPACE.match(line).group(1))

    def _line_at(self, index: int) -> str | None:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def each_comment(self) -> Iterator[Comment]:
        yield from self.comments

    def find_comment(self, predicate: Callable[[Comment], bool]) -> Comment | None:
        return next((c for c in self.comments if predicate(c)), None)

    def each_token(self) -> Iterator[Token]:
        yield from self.tokens

    def find_token(self, predicate: Callable[[Token], bool]) -> Token | None:
        return next((t for t in self.tokens if predicate(t)), None)

    def __repr__(self) -> str:
        return (
            f"ProcessedSource(file={self.file_path}, dialect={self.dialect_version}, "
            f"valid_syntax={self.valid_syntax})"
        )


def _raw_bytes(raw: str | bytes) -> bytes:
    if not isinstance(raw, str):
        return bytes(raw)
    try:
        return raw.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return raw.encode("utf-8", "surrogatepass")
