"""Error taxonomy shared by the fetch, generation and search layers."""
from __future__ import annotations


class ScribeError(RuntimeError):
    """Base class for failures surfaced to the user as ``Session.last_error``."""


class MalformedURLError(ScribeError):
    """Raised when a candidate URL does not parse into a scheme and host."""


class BlockedDomainError(ScribeError):
    """Raised when a URL points at a host on the denylist."""


class FetchError(ScribeError):
    """Raised when an image cannot be retrieved."""


class NetworkError(FetchError):
    """Raised when the transport fails before a response arrives."""


class HttpStatusError(FetchError):
    """Raised when the image host answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotAnImageError(FetchError):
    """Raised when the retrieved content type is outside ``image/*``."""


class ImageTooLargeError(FetchError):
    """Raised when the body exceeds the configured size limit."""


class ConfigError(ScribeError):
    """Raised when the generation service credential is missing."""


class EmptyResponseError(ScribeError):
    """Raised when the model returns no text."""


class AnalysisFailedError(ScribeError):
    """Raised when the analysis request fails or its reply has the wrong shape."""


class SearchFailedError(ScribeError):
    """Raised when the image search request fails."""


class RequestTimeoutError(ScribeError):
    """Raised when a network call exceeds its timeout."""


class CancelledError(ScribeError):
    """Raised when the in-flight operation was cancelled by the user."""


class BusyError(ScribeError):
    """Raised when an operation is started while another one is pending."""


__all__ = [
    "ScribeError",
    "MalformedURLError",
    "BlockedDomainError",
    "FetchError",
    "NetworkError",
    "HttpStatusError",
    "NotAnImageError",
    "ImageTooLargeError",
    "ConfigError",
    "EmptyResponseError",
    "AnalysisFailedError",
    "SearchFailedError",
    "RequestTimeoutError",
    "CancelledError",
    "BusyError",
]
