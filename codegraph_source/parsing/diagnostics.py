"""
Diagnostic collection

DiagnosticSink accumulates what a single parse reports. DiagnosticEngine is
the policy a backend reports through: it filters, escalates and decides
when parsing must stop.
"""

from collections.abc import Callable, Iterator

from codegraph_source.exceptions import SyntaxFailure
from codegraph_source.models import Diagnostic, Severity

DiagnosticConsumer = Callable[[Diagnostic], None]


class DiagnosticSink:
    """Append-only, per-parse diagnostic collector. Never raises."""

    def __init__(self):
        self._diagnostics: list[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def has_errors(self) -> bool:
        return any(d.is_error for d in self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __repr__(self) -> str:
        return f"DiagnosticSink(count={len(self._diagnostics)})"


class DiagnosticEngine:
    """
    Routes backend diagnostics to a consumer.

    Args:
        consumer: Callback receiving every diagnostic that is not ignored
        all_errors_are_fatal: Escalate every diagnostic to fatal, so the
            first reported problem stops the parse. Use on hosts where the
            backend may not terminate on malformed input.
        ignore_warnings: Drop warning diagnostics
    """

    def __init__(
        self,
        consumer: DiagnosticConsumer | None = None,
        all_errors_are_fatal: bool = False,
        ignore_warnings: bool = False,
    ):
        self.consumer = consumer
        self.all_errors_are_fatal = all_errors_are_fatal
        self.ignore_warnings = ignore_warnings

    def process(self, diagnostic: Diagnostic) -> None:
        """
        Report a diagnostic.

        Raises:
            SyntaxFailure: If the diagnostic is (or was escalated to) fatal
        """
        if self.ignore_warnings and diagnostic.level is Severity.WARNING:
            return

        if self.all_errors_are_fatal:
            diagnostic = diagnostic.escalate()

        if self.consumer is not None:
            self.consumer(diagnostic)

        if diagnostic.level is Severity.FATAL:
            raise SyntaxFailure(diagnostic.message, diagnostic)
