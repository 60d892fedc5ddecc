"""
Error Types
===========

Leaf components raise these; the web layer maps them to HTTP responses.
"""


class ReviewInsightError(Exception):
    """Base exception for all review insight errors."""
    pass


class NotFoundError(ReviewInsightError):
    """No place, no reviews or no stored analysis. User-correctable."""
    pass


class UpstreamError(ReviewInsightError):
    """Google Places or the LLM provider returned a non-success status."""

    def __init__(self, message: str, status: str = ""):
        super().__init__(message)
        self.status = status


class MalformedResponseError(ReviewInsightError):
    """LLM output was not JSON or was missing required fields."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class ValidationError(ReviewInsightError):
    """Caller-supplied identifiers are missing or malformed."""
    pass
