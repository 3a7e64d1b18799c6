"""
Codegraph Source Exception Hierarchy

Only configuration and I/O errors leave a ProcessedSource constructor.
Parsing errors are captured on the instance (parser_error, diagnostics).

Example:
    try:
        processed = ProcessedSource.from_file(path, "3.12")
    except SourceFileNotFoundError as e:
        logger.warning("source_missing", path=e.details["path"])
"""

from typing import Any


class CodegraphSourceError(Exception):
    """Base exception for all codegraph-source errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            details: Optional additional details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================
# Validation Errors
# ============================================================


class ValidationError(CodegraphSourceError):
    """Input validation failures."""

    pass


class InvalidConfigurationError(ValidationError):
    """Invalid configuration."""

    pass


class UnknownDialectError(InvalidConfigurationError):
    """Requested dialect version has no registered parser backend."""

    pass


# ============================================================
# I/O Errors
# ============================================================


class SourceIOError(CodegraphSourceError):
    """Reading source failed."""

    pass


class SourceFileNotFoundError(SourceIOError):
    """Source path does not exist."""

    def __init__(self, path: str):
        super().__init__(f"No such file or directory: {path}", {"path": path})
        self.path = path

    def __str__(self) -> str:
        return self.message


# ============================================================
# Parsing Errors
# ============================================================


class ParsingError(CodegraphSourceError):
    """Code parsing failures."""

    pass


class EncodingError(ParsingError):
    """Source is not valid in the canonical text encoding (UTF-8)."""

    pass


class SyntaxFailure(ParsingError):
    """
    Terminal syntax failure raised by a parser backend.

    Carries whatever the backend produced before failing so the caller can
    keep partial comments and tokens. The diagnostics themselves have already
    been routed to the consumer.
    """

    def __init__(self, message: str, diagnostic: Any = None):
        super().__init__(message)
        self.diagnostic = diagnostic
        self.comments: list[Any] = []
        self.tokens: list[Any] = []
