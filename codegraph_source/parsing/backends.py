"""
Python parser backends

One backend per language release. Each is driven by CPython's own parser
(`ast.parse` with feature_version pinned to the release) and its tokenizer.
"""

from __future__ import annotations

import ast
import io
import tokenize
import warnings

from codegraph_source.exceptions import SyntaxFailure
from codegraph_source.models import Comment, DialectVersion, Diagnostic, Severity, Span
from codegraph_source.parsing.diagnostics import DiagnosticConsumer, DiagnosticEngine
from codegraph_source.parsing.source_buffer import SourceBuffer

# Zero-width bookkeeping tokens; DEDENT/ENDMARKER sit past the last real line
_SKIPPED_TOKEN_TYPES = frozenset({tokenize.ENDMARKER, tokenize.DEDENT})


class PythonBackend:
    """
    Parser for one Python release.

    Args:
        version: Language release the grammar is pinned to
        consumer: Receives every diagnostic
        all_errors_are_fatal: Stop at the first diagnostic of any severity
        ignore_warnings: Drop warning diagnostics
    """

    def __init__(
        self,
        version: DialectVersion | tuple[int, int] | str,
        consumer: DiagnosticConsumer | None = None,
        *,
        all_errors_are_fatal: bool = False,
        ignore_warnings: bool = False,
    ):
        self.version = DialectVersion.parse(version)
        self.diagnostics = DiagnosticEngine(
            consumer,
            all_errors_are_fatal=all_errors_are_fatal,
            ignore_warnings=ignore_warnings,
        )

    def tokenize(self, buffer: SourceBuffer) -> tuple[ast.Module | None, list[Comment], list[tokenize.TokenInfo]]:
        """
        Lex and parse a buffer.

        Returns:
            (module or None, comments, raw tokens). The module is None when
            the source holds no statements.

        Raises:
            SyntaxFailure: On a syntax error or a fatal diagnostic. The
                exception carries the partial comments and tokens.
        """
        tokens, lex_error = self._lex(buffer.source)
        comments = [
            Comment(text=info.string, location=_token_span(info)) for info in tokens if info.type == tokenize.COMMENT
        ]

        try:
            module = self._parse(buffer)
            if lex_error is not None:
                self.diagnostics.process(_lex_error_diagnostic(lex_error))
        except SyntaxFailure as failure:
            failure.comments = comments
            failure.tokens = tokens
            raise

        return module, comments, tokens

    def _lex(self, source: str) -> tuple[list[tokenize.TokenInfo], Exception | None]:
        tokens: list[tokenize.TokenInfo] = []
        readline = io.StringIO(source, newline=None).readline
        # The parser reports the same warnings with better locations
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            try:
                for info in tokenize.generate_tokens(readline):
                    if info.type not in _SKIPPED_TOKEN_TYPES:
                        tokens.append(info)
            except (tokenize.TokenError, SyntaxError) as e:
                return tokens, e
        return tokens, None

    def _parse(self, buffer: SourceBuffer) -> ast.Module | None:
        failure: SyntaxError | ValueError | None = None
        module = None

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                module = ast.parse(
                    buffer.source,
                    filename=buffer.name,
                    feature_version=self.version.as_tuple(),
                )
            except SyntaxError as e:
                failure = e
            except ValueError as e:
                # Source containing null bytes on older interpreters
                failure = e

        for warning in caught:
            self.diagnostics.process(_warning_diagnostic(buffer, warning))

        if failure is not None:
            diagnostic = _error_diagnostic(failure)
            self.diagnostics.process(diagnostic)
            raise SyntaxFailure(diagnostic.message, diagnostic) from failure

        if module is None or not module.body:
            return None
        return module

    def __repr__(self) -> str:
        return f"PythonBackend(version={self.version})"


def _token_span(info: tokenize.TokenInfo) -> Span:
    return Span(start_line=info.start[0], start_col=info.start[1], end_line=info.end[0], end_col=info.end[1])


def _error_diagnostic(error: SyntaxError | ValueError) -> Diagnostic:
    if not isinstance(error, SyntaxError):
        return Diagnostic(Severity.ERROR, str(error), None, reason=type(error).__name__)

    line = error.lineno or 1
    start_col = max((error.offset or 1) - 1, 0)
    end_line = error.end_lineno or line
    end_col = (error.end_offset or error.offset or 1) - 1
    if end_line == line:
        end_col = max(end_col, start_col)

    return Diagnostic(
        Severity.ERROR,
        error.msg,
        Span(start_line=line, start_col=start_col, end_line=end_line, end_col=max(end_col, 0)),
        reason=type(error).__name__,
    )


def _warning_diagnostic(buffer: SourceBuffer, warning: warnings.WarningMessage) -> Diagnostic:
    line = warning.lineno or 1
    text = buffer.line(line) or ""
    return Diagnostic(
        Severity.WARNING,
        str(warning.message),
        Span(start_line=line, start_col=0, end_line=line, end_col=len(text)),
        reason=warning.category.__name__,
    )


def _lex_error_diagnostic(error: Exception) -> Diagnostic:
    if isinstance(error, SyntaxError):
        return _error_diagnostic(error)

    # tokenize.TokenError args: (message, (line, column))
    message = error.args[0] if error.args else str(error)
    location = None
    if len(error.args) > 1 and isinstance(error.args[1], tuple):
        line, column = error.args[1]
        location = Span(start_line=line, start_col=column, end_line=line, end_col=column)
    return Diagnostic(Severity.ERROR, str(message), location, reason=type(error).__name__)
