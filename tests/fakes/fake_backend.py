"""
Fake Parser Backend for Unit Testing
"""

import tokenize
from typing import Any

from codegraph_source.exceptions import SyntaxFailure
from codegraph_source.models import Comment, Diagnostic
from codegraph_source.parsing.diagnostics import DiagnosticEngine

FAKE_VERSION = "9.9"


def fake_token(type_name: str, string: str, line: int, col: int = 0) -> tokenize.TokenInfo:
    """Build a raw token the way `tokenize` reports it."""
    return tokenize.TokenInfo(
        getattr(tokenize, type_name),
        string,
        (line, col),
        (line, col + len(string)),
        string,
    )


class FakeBackendFactory:
    """
    ParserBackend factory replaying a fixed result.

    Records every backend it builds so tests can check whether parsing ran.
    """

    def __init__(
        self,
        tokens: list[tokenize.TokenInfo] | None = None,
        comments: list[Comment] | None = None,
        root: Any = None,
        diagnostics: list[Diagnostic] | None = None,
        fail: bool = False,
    ):
        self.tokens = tokens or []
        self.comments = comments or []
        self.root = root
        self.diagnostics = diagnostics or []
        self.fail = fail
        self.created: list["FakeBackend"] = []

    def __call__(self, consumer, *, all_errors_are_fatal: bool = False, ignore_warnings: bool = False):
        backend = FakeBackend(self, consumer, all_errors_are_fatal=all_errors_are_fatal, ignore_warnings=ignore_warnings)
        self.created.append(backend)
        return backend


class FakeBackend:
    """ParserBackend Fake: no grammar, returns what the factory scripted."""

    def __init__(self, script: FakeBackendFactory, consumer, *, all_errors_are_fatal: bool, ignore_warnings: bool):
        self.script = script
        self.version = None
        self.diagnostics = DiagnosticEngine(
            consumer,
            all_errors_are_fatal=all_errors_are_fatal,
            ignore_warnings=ignore_warnings,
        )
        self.buffers: list[Any] = []

    def tokenize(self, buffer):
        self.buffers.append(buffer)
        try:
            for diagnostic in self.script.diagnostics:
                self.diagnostics.process(diagnostic)
            if self.script.fail:
                raise SyntaxFailure("scripted failure")
        except SyntaxFailure as failure:
            failure.comments = list(self.script.comments)
            failure.tokens = list(self.script.tokens)
            raise
        return self.script.root, list(self.script.comments), list(self.script.tokens)
