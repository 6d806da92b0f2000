from __future__ import annotations


class ManuscriptEngineError(RuntimeError):
    """Base class for failures raised by the analysis engine."""


class InputDecodingError(ManuscriptEngineError):
    """Raised when byte input cannot be decoded as UTF-8 text."""


class AnalyzerFailure(ManuscriptEngineError):
    """Raised when a dimensional analyzer fails unexpectedly.

    The failing analyzer's name is kept on ``analyzer`` and the original
    exception on ``cause`` (also chained as ``__cause__``).
    """

    def __init__(self, analyzer: str, cause: BaseException) -> None:
        super().__init__(f"Analyzer '{analyzer}' failed: {cause}")
        self.analyzer = analyzer
        self.cause = cause
