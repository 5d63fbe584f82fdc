"""Error kinds surfaced by the analyzer client."""

from config import MSG_BAD_SCHEMA, MSG_EMPTY_SOURCE, MSG_SERVICE_DOWN


class AnalyzerError(Exception):
    """Base exception for all analyzer client errors.

    `notice` is the text shown to the user; the exception message keeps the
    technical reason for the console.
    """

    notice = ""

    def __init__(self, message: str, notice: str = None):
        super().__init__(message)
        if notice is not None:
            self.notice = notice


class ValidationError(AnalyzerError):
    """Raised when the source buffer is empty or whitespace-only."""

    notice = MSG_EMPTY_SOURCE

    def __init__(self, message: str = "Source text is empty"):
        super().__init__(message)


class ServiceError(AnalyzerError):
    """Raised when the analysis service is unreachable or answers non-2xx."""

    notice = MSG_SERVICE_DOWN

    def __init__(self, reason: str, status: int = None):
        super().__init__(reason)
        self.reason = reason
        self.status = status


class SchemaError(AnalyzerError):
    """Raised when a payload matches no known result shape."""

    notice = MSG_BAD_SCHEMA

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field
