"""
Exception types raised by the extraction engine.
"""

from __future__ import annotations


class ContentQuarryError(Exception):
    """Base exception for all extraction errors."""

    pass


class InvalidInputError(ContentQuarryError):
    """Raised when the document is empty, unparseable or has no body element."""

    pass


class InvalidURLError(ContentQuarryError, ValueError):
    """Raised when a base URL (or a URL resolved against it) is malformed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Malformed URL {url!r}: {reason}")


class NoContentFoundError(ContentQuarryError):
    """Raised by strict callers when every retry attempt stayed below the threshold."""

    def __init__(self, attempts: int, best_length: int = 0) -> None:
        self.attempts = attempts
        self.best_length = best_length
        super().__init__(f"No content found after {attempts} attempts (longest attempt: {best_length} characters)")
