"""
Custom exceptions for the RavenScans source.

Error policy:
  - TransportError → FAIL HARD: the fetch failed, the whole call fails, nothing is retried.
  - ParseError     → FAIL HARD: the document could not be turned into a tree.
  - ConfigError    → raised at startup when the environment holds an unusable value.

Missing markup is not an error anywhere in this package: extractors fall back
to empty strings, None, WorkStatus.UNKNOWN or skip the item.
"""

from typing import Optional


class SourceError(Exception):
    """Base exception for all RavenScans source errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to the error record handed back to the host."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


class TransportError(SourceError):
    """
    Raised when a GET request fails.

    Covers connection failures, timeouts and non-2xx responses.
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code  # None when no response was received

    def to_response(self) -> dict:
        response = super().to_response()
        response["url"] = self.url
        response["status_code"] = self.status_code
        return response


class ParseError(SourceError):
    """Raised when a fetched byte stream cannot be decoded or parsed as HTML."""
    pass


class ConfigError(SourceError):
    """Raised when configuration loaded from the environment is invalid."""
    pass
