"""
Custom exceptions for the site content library.

Error philosophy:
  - FetchError      → FAIL for this attempt: the service falls back to a cached
                      record of any age, and re-raises only when none exists.
  - StructureError  → same treatment as FetchError: the page downloaded but the
                      sections a category cannot do without were not found.
  - StorageError    → NON-FATAL: a cache write failed, the fresh record is
                      still returned and the failure is logged.

A missing field on an otherwise readable page is not an error at all; the
extractor leaves that field as None and the record is a valid result.
"""

from typing import Optional


class ContentError(Exception):
    """Base exception for all site content errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- FAIL for one fetch attempt: the service may still serve a stale cache ---

class ContentLoadError(ContentError):
    """A category could not be loaded from the network."""

    def __init__(
        self,
        message: str,
        category: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.category = category

    def to_response(self) -> dict:
        """Convert to a plain dict for callers that report errors as JSON."""
        return {
            "error": type(self).__name__,
            "category": self.category,
            "message": self.message,
            "details": self.details
        }


class FetchError(ContentLoadError):
    """
    Raised when a page cannot be downloaded.

    Covers connection failures (status_code is None) and any response whose
    status is not 200.
    """

    def __init__(
        self,
        message: str,
        category: str,
        url: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, category, details)
        self.url = url
        self.status_code = status_code

    def to_response(self) -> dict:
        response = super().to_response()
        response["url"] = self.url
        response["status_code"] = self.status_code
        return response


class StructureError(ContentLoadError):
    """
    Raised when a downloaded page lacks the sections a category requires
    (e.g. the class listings without their youngsters/adults cells).
    """
    pass


# --- NON-FATAL: caching problems never reach the caller ---

class StorageError(ContentError):
    """Raised by a store when a value cannot be persisted."""

    def __init__(
        self,
        message: str,
        key: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.key = key
