"""
Custom exceptions shared by all FLETCHER contexts.

Every exception carries a short message plus an optional hint (usually the
diagnostic text of an underlying failure) so that callers can print both.
"""

from typing import Optional


class FletcherError(Exception):
    """
    Base exception for reportable FLETCHER failures.

    Attributes:
        message: Error description
        hint: Optional diagnostic detail (parser message, compiler log lines, ...)
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        self.message = message
        self.hint = hint

        parts = [message]
        if hint:
            # Truncate hint if too long
            snippet = hint[:500] + "..." if len(hint) > 500 else hint
            parts.append(f"\nHint: {snippet}")

        super().__init__("\n".join(parts))


class InvalidRecordError(FletcherError, ValueError):
    """
    Raised when a master record, profile or override mapping has the wrong shape.

    This covers missing identity fields, wrong container types and duplicate ids.
    Dangling id references are NOT shape errors and never raise.
    """

    pass


class DocumentShapeError(FletcherError, TypeError):
    """Raised by pure components when handed the wrong entity kind."""

    pass


class JobAnalysisError(FletcherError):
    """Raised when an extracted job analysis payload is malformed or fails validation."""

    pass


class ExternalServiceError(FletcherError):
    """Raised when an external collaborator (LLM, LaTeX compiler) fails."""

    pass


class RewriteError(ExternalServiceError):
    """Raised when the text rewrite service fails or returns nothing usable."""

    pass


class CompilationError(ExternalServiceError):
    """
    Raised when LaTeX compilation fails.

    The hint holds the fatal lines extracted from the compiler log.
    """

    pass
