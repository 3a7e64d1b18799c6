"""
Processed Source Tests (scripted backend)

Drives ProcessedSource with a fake backend to pin token/line edge cases
the Python grammar cannot produce on its own.
"""

import ast

import pytest

from codegraph_source.config import SourceSettings
from codegraph_source.exceptions import InvalidConfigurationError
from codegraph_source.models import Comment, Diagnostic, Severity, Span
from codegraph_source.processed_source import ProcessedSource
from tests.fakes import FAKE_VERSION, fake_token


def processed_with(registry, source, settings=None, **kwargs):
    return ProcessedSource(source, FAKE_VERSION, registry=registry, settings=settings or SourceSettings(), **kwargs)


class TestEndMarker:
    def test_marker_after_last_token_truncates(self, fake_registry):
        registry, factory = fake_registry
        factory.tokens = [fake_token("NAME", "x", 1)]

        processed = processed_with(registry, "x\n__END__\ntrailing text\nmore\n")

        assert processed.lines == ["x"]
        assert processed[-1] == "x"

    def test_marker_on_last_token_line_is_content(self, fake_registry):
        registry, factory = fake_registry
        factory.tokens = [fake_token("NAME", "x", 1), fake_token("NAME", "__END__", 2)]

        processed = processed_with(registry, "x\n__END__\ntrailing\n")

        assert processed.lines == ["x", "__END__", "trailing"]

    def test_marker_before_last_token_is_content(self, fake_registry):
        registry, factory = fake_registry
        factory.tokens = [fake_token("NAME", "a", 1), fake_token("NAME", "b", 3)]

        processed = processed_with(registry, "a\n__END__\nb\n")

        assert processed.lines == ["a", "__END__", "b"]

    def test_no_tokens_always_truncates(self, fake_registry):
        registry, _ = fake_registry

        processed = processed_with(registry, "__END__\nanything\n")

        assert processed.lines == []

    def test_only_first_marker_matters(self, fake_registry):
        registry, factory = fake_registry
        factory.tokens = [fake_token("NAME", "x", 1)]

        processed = processed_with(registry, "x\n__END__\n__END__\n")

        assert processed.lines == ["x"]

    def test_marker_must_match_whole_line(self, fake_registry):
        registry, factory = fake_registry
        factory.tokens = [fake_token("NAME", "x", 1)]

        processed = processed_with(registry, "x\n__END__ \n  __END__\n")

        assert processed.lines == ["x", "__END__ ", "  __END__"]

    def test_configured_marker(self, fake_registry):
        registry, factory = fake_registry
        factory.tokens = [fake_token("NAME", "x", 1)]

        processed = processed_with(registry, "x\n# EOF\ndata\n", SourceSettings(end_marker="# EOF"))

        assert processed.lines == ["x"]

    def test_truncation_does_not_touch_buffer(self, fake_registry):
        registry, factory = fake_registry
        factory.tokens = [fake_token("NAME", "x", 1)]

        processed = processed_with(registry, "x\n__END__\ndata\n")

        assert processed.buffer.source_lines == ("x", "__END__", "data")
        assert len(processed.lines) <= len(processed.buffer.source_lines)


class TestScriptedFailures:
    def test_partial_results_survive_failure(self, fake_registry):
        registry, factory = fake_registry
        comment = Comment("# kept", Span(2, 0, 2, 6))
        factory.tokens = [fake_token("NAME", "x", 1), fake_token("COMMENT", "# kept", 2)]
        factory.comments = [comment]
        factory.diagnostics = [Diagnostic(Severity.ERROR, "unexpected token", Span(1, 2, 1, 3))]
        factory.fail = True

        processed = processed_with(registry, "x ?\n# kept\n")

        assert processed.tree is None
        assert not processed.valid_syntax
        assert processed.comments == (comment,)
        assert [t.text for t in processed.tokens] == ["x", "# kept"]
        assert [d.message for d in processed.diagnostics] == ["unexpected token"]

    def test_failure_without_diagnostics_keeps_syntax_valid(self, fake_registry):
        registry, factory = fake_registry
        factory.fail = True

        processed = processed_with(registry, "x\n")

        assert processed.blank
        assert processed.valid_syntax

    def test_settings_reach_backend(self, fake_registry):
        registry, factory = fake_registry

        processed_with(registry, "x\n", SourceSettings(all_errors_are_fatal=True, ignore_warnings=True))

        backend = factory.created[0]
        assert backend.diagnostics.all_errors_are_fatal
        assert backend.diagnostics.ignore_warnings

    def test_backend_receives_named_buffer(self, fake_registry):
        registry, factory = fake_registry

        processed = processed_with(registry, "x\n")

        assert factory.created[0].buffers == [processed.buffer]

    def test_encoding_error_skips_backend(self, fake_registry):
        registry, factory = fake_registry

        processed = processed_with(registry, b"\xc3\x28")

        assert processed.parser_error is not None
        assert factory.created == []

    @pytest.mark.parametrize("level", [Severity.ERROR, Severity.FATAL])
    def test_error_levels_invalidate_syntax(self, fake_registry, level):
        registry, factory = fake_registry
        factory.diagnostics = [Diagnostic(level, "bad")]
        factory.fail = level is Severity.FATAL

        assert not processed_with(registry, "x\n").valid_syntax


class TestScriptedTree:
    SOURCE = "x = 1  # note\n"

    def test_ast_root_is_finalized(self, fake_registry):
        registry, factory = fake_registry
        root = ast.parse(self.SOURCE)
        comment = Comment("# note", Span(1, 7, 1, 13))
        factory.root = root
        factory.comments = [comment]
        factory.tokens = [fake_token("NAME", "x", 1), fake_token("COMMENT", "# note", 1, 7)]

        processed = processed_with(registry, self.SOURCE)

        assert not processed.blank
        assert processed.tree.root is root
        assert processed.tree.is_complete
        assert processed.tree.get_span(root.body[0]) == Span(1, 0, 1, 5)
        assert processed.ast_with_comments == {root: [comment]}

    @pytest.mark.parametrize("root", [{"type": "program"}, "module", 42])
    def test_non_ast_root_is_rejected(self, fake_registry, root):
        registry, factory = fake_registry
        factory.root = root

        with pytest.raises(InvalidConfigurationError) as exc_info:
            processed_with(registry, "x\n")

        assert exc_info.value.details["root_type"] == type(root).__name__
